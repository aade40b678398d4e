from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .assignments.service import AssignmentLookup
from .core.constants import DEFAULT_TOKEN_REFRESH_MARGIN_MINUTES, DEFAULT_TOKEN_TTL_HOURS
from .core.enums import TokenHorizon
from .database.connection import DBConfig, DatabaseConnection
from .events.memory_event_repository import InMemoryEventRepository
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher
from .payroll.calculator.hourly_calculator import HourlyEarningsCalculator
from .payroll.service import WorkSummaryService
from .schedules.memory_schedule_repository import InMemoryWorkScheduleRepository
from .schedules.mysql_schedule_repository import MySQLWorkScheduleRepository
from .schedules.repository import WorkScheduleRepository
from .schedules.service import WeeklyScheduleService
from .tokens.issuer import WorkTokenIssuer
from .tokens.provider import CurrentTokenProvider
from .tokens.validator import WorkTokenValidator
from .work_schedule.service import WorkScheduleService
from .work_sessions.memory_session_repository import InMemoryWorkSessionRepository
from .work_sessions.mysql_session_repository import MySQLWorkSessionRepository
from .work_sessions.repository import WorkSessionRepository
from .work_sessions.service import WorkSessionService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    events_repo: EventRepository
    sessions_repo: WorkSessionRepository
    schedules_repo: WorkScheduleRepository

    token_issuer: WorkTokenIssuer
    token_validator: WorkTokenValidator
    token_provider: CurrentTokenProvider
    assignment_lookup: AssignmentLookup
    work_session_service: WorkSessionService
    work_summary_service: WorkSummaryService
    weekly_schedule_service: WeeklyScheduleService
    notifier: NotificationDispatcher
    work_schedule_service: WorkScheduleService


def build_container(
    *,
    secret_key: str,
    db_config: Optional[dict] = None,
    backend: str = "mysql",
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS,
    token_horizon: str = TokenHorizon.FIXED_DURATION.value,
    token_refresh_margin_minutes: int = DEFAULT_TOKEN_REFRESH_MARGIN_MINUTES,
    notifier: Optional[NotificationDispatcher] = None,
) -> Container:
    conn: Optional[DatabaseConnection] = None
    if backend == "memory":
        events_repo = InMemoryEventRepository()
        sessions_repo = InMemoryWorkSessionRepository()
        schedules_repo = InMemoryWorkScheduleRepository()
    elif backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        events_repo = MySQLEventRepository(conn)
        sessions_repo = MySQLWorkSessionRepository(conn)
        schedules_repo = MySQLWorkScheduleRepository(conn)
    else:
        raise ValueError(f"Unknown DB_BACKEND: {backend!r}")

    token_issuer = WorkTokenIssuer(
        secret_key,
        horizon=TokenHorizon(token_horizon),
        ttl=timedelta(hours=int(token_ttl_hours)),
    )
    token_validator = WorkTokenValidator(secret_key)
    token_provider = CurrentTokenProvider(
        token_issuer,
        refresh_margin=timedelta(minutes=int(token_refresh_margin_minutes)),
    )
    assignment_lookup = AssignmentLookup(events_repo)
    work_session_service = WorkSessionService(sessions_repo, calculator=HourlyEarningsCalculator())
    work_summary_service = WorkSummaryService(sessions_repo)
    weekly_schedule_service = WeeklyScheduleService(schedules_repo)
    notifier = notifier or LoggingNotificationDispatcher()

    work_schedule_service = WorkScheduleService(
        events_repo,
        token_provider,
        token_validator,
        assignment_lookup,
        work_session_service,
        work_summary_service,
        notifier,
        weekly_schedule_service,
    )

    return Container(
        conn=conn,
        events_repo=events_repo,
        sessions_repo=sessions_repo,
        schedules_repo=schedules_repo,
        token_issuer=token_issuer,
        token_validator=token_validator,
        token_provider=token_provider,
        assignment_lookup=assignment_lookup,
        work_session_service=work_session_service,
        work_summary_service=work_summary_service,
        weekly_schedule_service=weekly_schedule_service,
        notifier=notifier,
        work_schedule_service=work_schedule_service,
    )
