"""Example: drive the tracking engine through the service layer (no Flask).

Uses the in-memory backend so it runs without MySQL.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.workhours.workhours.container import build_container
from src.workhours.workhours.events.model import Event, Job


def main():
    container = build_container(secret_key="example-secret", backend="memory")

    start = datetime(2026, 7, 1, 10, 0, tzinfo=timezone.utc)
    event = container.events_repo.add_event(
        Event(event_id=1, organizer_id=1, title="Summer Festival", start_time=start, end_time=start + timedelta(days=2))
    )
    container.events_repo.add_job(
        Job(job_id=1, event_id=1, title="Stage crew", pay_per_person=Decimal("20"), hired_workers=frozenset({10}))
    )

    svc = container.work_schedule_service
    token = container.token_provider.current(event, now=start)

    svc.check_in(qr_token=token.to_wire(), worker_id=10, now=start)
    session = svc.check_out(qr_token=token.to_wire(), worker_id=10, now=start + timedelta(hours=4, minutes=30))
    print(session.to_dict())
    print(svc.event_summary(event=event).to_dict()["overall"])


if __name__ == "__main__":
    main()
