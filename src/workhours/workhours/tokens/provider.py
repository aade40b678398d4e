from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import to_epoch_ms
from ..common.single_flight import SingleFlight
from ..core.constants import DEFAULT_TOKEN_REFRESH_MARGIN_MINUTES
from ..core.exceptions import ValidationError
from ..events.model import Event
from .issuer import WorkTokenIssuer
from .model import WorkToken


class CurrentTokenProvider:
    """Keeps the token currently shown for each event.

    Concurrent requests that find the cached token missing or about to expire
    share one mint through ``SingleFlight`` instead of each issuing their own.
    """

    def __init__(
        self,
        issuer: WorkTokenIssuer,
        *,
        refresh_margin: timedelta = timedelta(minutes=DEFAULT_TOKEN_REFRESH_MARGIN_MINUTES),
        single_flight: Optional[SingleFlight] = None,
    ):
        self._issuer = issuer
        self._refresh_margin = refresh_margin
        self._flights = single_flight or SingleFlight()
        self._lock = threading.Lock()
        self._current: dict[int, WorkToken] = {}

    def current(self, event: Event, *, now: datetime) -> WorkToken:
        cached = self._fresh(event, now)
        if cached:
            return cached
        # Re-checked inside the flight: a previous flight may have just stored a fresh token.
        return self._flights.do(event.event_id, lambda: self._fresh(event, now) or self._mint(event, now))

    def refresh(self, event: Event, *, now: datetime) -> WorkToken:
        """Always issue a new token ("send updated QR"); older tokens stay valid until they expire."""

        return self._flights.do(event.event_id, lambda: self._mint(event, now))

    def _fresh(self, event: Event, now: datetime) -> Optional[WorkToken]:
        with self._lock:
            cached = self._current.get(event.event_id)
        if not cached or now >= cached.expires_at:
            return None
        if now < cached.expires_at - self._refresh_margin:
            return cached

        # Inside the margin, keep the cached token unless a new one would expire later.
        try:
            next_expiry = self._issuer.expiry_for(event, now=now)
        except ValidationError:
            return cached
        return cached if to_epoch_ms(next_expiry) <= to_epoch_ms(cached.expires_at) else None

    def _mint(self, event: Event, now: datetime) -> WorkToken:
        token = self._issuer.issue(event, now=now)
        with self._lock:
            self._current[event.event_id] = token
        return token
