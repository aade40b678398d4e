from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkNotification:
    type: str
    title: str
    message: str
    event_id: int
    action_url: str
    metadata: dict = field(default_factory=dict)


class NotificationDispatcher(Protocol):
    """Contract of the external notification service."""

    def notify(self, worker_ids: Iterable[int], notification: WorkNotification) -> int:
        """Deliver to every worker; returns how many were handed off."""

        raise NotImplementedError


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Stand-in used when no notification service is wired: records what would be sent."""

    def notify(self, worker_ids: Iterable[int], notification: WorkNotification) -> int:
        recipients = sorted({int(w) for w in worker_ids})
        for worker_id in recipients:
            logger.info(
                "notify worker=%s type=%s event=%s title=%r",
                worker_id,
                notification.type,
                notification.event_id,
                notification.title,
            )
        return len(recipients)
