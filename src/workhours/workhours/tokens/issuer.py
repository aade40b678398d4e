from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

import jwt

from ..common.datetime_utils import ensure_utc, from_epoch_ms, to_epoch_ms
from ..core.constants import DEFAULT_TOKEN_TTL_HOURS, TOKEN_TYPE
from ..core.enums import TokenHorizon
from ..core.exceptions import ValidationError
from ..events.model import Event
from .keys import event_signing_key
from .model import WorkToken

logger = logging.getLogger(__name__)


class WorkTokenIssuer:
    """Mints work tokens.

    The expiry horizon is either a fixed duration from ``now`` or the end of
    the event. Issuing a new token never revokes older ones; each token only
    obeys its own ``expiresAt``.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        horizon: TokenHorizon = TokenHorizon.FIXED_DURATION,
        ttl: timedelta = timedelta(hours=DEFAULT_TOKEN_TTL_HOURS),
    ):
        if not secret_key:
            raise ValueError("secret_key is required to sign work tokens")
        self._secret_key = secret_key
        self._horizon = horizon
        self._ttl = ttl

    def expiry_for(self, event: Event, *, now: datetime, horizon: Optional[TokenHorizon] = None, ttl: Optional[timedelta] = None) -> datetime:
        horizon = horizon or self._horizon
        now = ensure_utc(now)
        if horizon == TokenHorizon.EVENT_END:
            end_time = ensure_utc(event.end_time)
            if end_time <= now:
                raise ValidationError("Event has already ended")
            return end_time
        return now + (ttl or self._ttl)

    def issue(
        self,
        event: Event,
        *,
        now: datetime,
        horizon: Optional[TokenHorizon] = None,
        ttl: Optional[timedelta] = None,
    ) -> WorkToken:
        expires_at = self.expiry_for(event, now=now, horizon=horizon, ttl=ttl)
        issued_ms = to_epoch_ms(now)
        expires_ms = to_epoch_ms(expires_at)
        nonce = secrets.token_hex(16)

        # No registered "exp" claim: expiry is checked against the caller's clock.
        payload = {
            "typ": TOKEN_TYPE,
            "eventId": event.event_id,
            "issuedAt": issued_ms,
            "expiresAt": expires_ms,
            "nonce": nonce,
        }
        token = jwt.encode(payload, event_signing_key(self._secret_key, event.event_id), algorithm="HS256")

        logger.info("Issued work token for event %s (expires %s)", event.event_id, expires_at.isoformat())
        return WorkToken(
            event_id=event.event_id,
            issued_at=from_epoch_ms(issued_ms),
            expires_at=from_epoch_ms(expires_ms),
            nonce=nonce,
            token=token,
        )
