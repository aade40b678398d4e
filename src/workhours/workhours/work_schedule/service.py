from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..assignments.service import AssignmentLookup
from ..common.datetime_utils import now_utc
from ..core.exceptions import EventNotFoundError
from ..events.model import Event, Job
from ..events.repository import EventRepository
from ..notifications.dispatcher import NotificationDispatcher, WorkNotification
from ..payroll.service import EventSummary, WorkerSummary, WorkSummaryService
from ..schedules.model import WorkSchedule
from ..schedules.service import WeeklyScheduleService
from ..tokens.model import WorkToken
from ..tokens.provider import CurrentTokenProvider
from ..tokens.validator import WorkTokenValidator
from ..work_sessions.model import WorkSession
from ..work_sessions.service import WorkSessionService


@dataclass(frozen=True)
class QRView:
    event: Event
    token: WorkToken
    jobs: Sequence[Job]


class WorkScheduleService:
    """Use cases behind the /work-schedule endpoints.

    Token validity is decided once, at request entry, with the ``now`` the
    request started with.
    """

    def __init__(
        self,
        events: EventRepository,
        tokens: CurrentTokenProvider,
        validator: WorkTokenValidator,
        assignments: AssignmentLookup,
        sessions: WorkSessionService,
        summaries: WorkSummaryService,
        notifier: NotificationDispatcher,
        schedules: WeeklyScheduleService,
    ):
        self._events = events
        self._tokens = tokens
        self._validator = validator
        self._assignments = assignments
        self._sessions = sessions
        self._summaries = summaries
        self._notifier = notifier
        self._schedules = schedules

    def get_event(self, event_id: int) -> Event:
        event = self._events.get_event(int(event_id))
        if not event:
            raise EventNotFoundError(event_id)
        return event

    def is_organizer(self, event: Event, user_id: int) -> bool:
        return event.organizer_id == int(user_id)

    def qr_for(self, *, event_id: int, user_id: int, now: Optional[datetime] = None) -> QRView:
        """Organizers see every job of their event; workers only the jobs they hold."""

        now = now or now_utc()
        event = self.get_event(event_id)
        if self.is_organizer(event, user_id):
            jobs = list(self._events.list_jobs(event.event_id))
        else:
            jobs = list(self._assignments.jobs_for(event.event_id, user_id))
        return QRView(event=event, token=self._tokens.current(event, now=now), jobs=jobs)

    def send_qr(self, *, event: Event, now: Optional[datetime] = None) -> tuple[WorkToken, int]:
        return self._publish_qr(
            event,
            now=now or now_utc(),
            title="Work Hours QR Code",
            message=f"Work hours QR code for {event.title}. Tap to view and start tracking your work hours.",
        )

    def create_schedule(
        self, *, event: Event, weekly_data, now: Optional[datetime] = None
    ) -> tuple[WorkSchedule, WorkToken, int]:
        """Save the weekly schedule, then issue a fresh QR token and notify the event's workers."""

        now = now or now_utc()
        schedule = self._schedules.create(event=event, weekly_data=weekly_data, now=now)
        token, notified = self._publish_qr(
            event,
            now=now,
            title="New Work Hours QR Code",
            message=f"New QR code generated for {event.title}. Tap to view and start tracking your work hours.",
        )
        return schedule, token, notified

    def update_schedule(self, *, event: Event, weekly_data, now: Optional[datetime] = None) -> WorkSchedule:
        return self._schedules.update(event=event, weekly_data=weekly_data, now=now)

    def schedule_for(self, *, event_id: int, user_id: int) -> WorkSchedule:
        event = self.get_event(event_id)
        if not self.is_organizer(event, user_id):
            self._assignments.jobs_for(event.event_id, user_id)
        return self._schedules.get(event.event_id)

    def _publish_qr(self, event: Event, *, now: datetime, title: str, message: str) -> tuple[WorkToken, int]:
        token = self._tokens.refresh(event, now=now)

        worker_ids: set[int] = set()
        for job in self._events.list_jobs(event.event_id):
            worker_ids.update(job.hired_workers)

        notified = 0
        if worker_ids:
            notified = self._notifier.notify(
                worker_ids,
                WorkNotification(
                    type="qr_code",
                    title=title,
                    message=message,
                    event_id=event.event_id,
                    action_url=f"/work-qr/{event.event_id}",
                    metadata={"qrToken": token.to_wire()},
                ),
            )
        return token, notified

    def check_in(self, *, qr_token: str, worker_id: int, job_id: Optional[int] = None, now: Optional[datetime] = None) -> WorkSession:
        now = now or now_utc()
        claims = self._validator.validate(qr_token, now)
        job = self._assignments.resolve_job(claims.event_id, worker_id, job_id)
        return self._sessions.check_in(event_id=claims.event_id, job=job, worker_id=worker_id, now=now)

    def check_out(self, *, qr_token: str, worker_id: int, job_id: Optional[int] = None, now: Optional[datetime] = None) -> WorkSession:
        now = now or now_utc()
        claims = self._validator.validate(qr_token, now)
        job = self._assignments.resolve_job(claims.event_id, worker_id, job_id)
        return self._sessions.check_out(event_id=claims.event_id, job=job, worker_id=worker_id, now=now)

    def worker_sessions(self, *, event_id: int, worker_id: int) -> WorkerSummary:
        self.get_event(event_id)
        return self._summaries.summary_for_worker(event_id=event_id, worker_id=worker_id)

    def active_sessions(self, *, worker_id: int) -> Sequence[WorkSession]:
        return self._sessions.active_sessions_for_worker(worker_id)

    def event_summary(self, *, event: Event) -> EventSummary:
        return self._summaries.summary_for_event(event.event_id)

    def export_rows(self, summary: EventSummary) -> Sequence[dict]:
        return self._summaries.export_rows(summary)
