from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

import jwt

from ..common.datetime_utils import from_epoch_ms, to_epoch_ms
from ..core.constants import TOKEN_TYPE
from ..core.exceptions import TokenExpiredError, TokenMalformedError
from .keys import event_signing_key
from .model import TokenClaims

logger = logging.getLogger(__name__)


class WorkTokenValidator:
    """Parses scanned tokens. Pure: depends only on the payload, the secret and ``now``.

    Accepts either the QR wire JSON or a bare compact token. A token is valid
    while ``now < expiresAt``; at ``expiresAt`` itself it is already expired.
    """

    def __init__(self, secret_key: str):
        self._secret_key = secret_key

    def validate(self, serialized: str, now: datetime) -> TokenClaims:
        if not isinstance(serialized, str) or not serialized.strip():
            raise TokenMalformedError("QR code is empty")

        raw = serialized.strip()
        wire_event_id = None
        if raw.startswith("{"):
            wire = self._parse_wire(raw)
            wire_event_id = wire.get("eventId")
            raw = wire.get("token")
            if not isinstance(raw, str) or not raw:
                raise TokenMalformedError()

        claims = self._verify(raw)

        if wire_event_id is not None and _as_int(wire_event_id) != claims.event_id:
            logger.warning("Rejected work token: wire eventId %r does not match claims", wire_event_id)
            raise TokenMalformedError()

        if to_epoch_ms(now) >= to_epoch_ms(claims.expires_at):
            raise TokenExpiredError()
        return claims

    def _parse_wire(self, raw: str) -> dict:
        try:
            wire = json.loads(raw)
        except ValueError:
            raise TokenMalformedError() from None
        if not isinstance(wire, dict):
            raise TokenMalformedError()
        # Checked before any signature work: QR codes from other features carry another type.
        if wire.get("type") != TOKEN_TYPE:
            raise TokenMalformedError("This QR code is not a work-hours code")
        return wire

    def _verify(self, token: str) -> TokenClaims:
        try:
            unverified = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            raise TokenMalformedError() from None

        if unverified.get("typ") != TOKEN_TYPE:
            raise TokenMalformedError("This QR code is not a work-hours code")
        event_id = _as_int(unverified.get("eventId"))
        if event_id is None:
            raise TokenMalformedError()

        try:
            payload = jwt.decode(
                token,
                event_signing_key(self._secret_key, event_id),
                algorithms=["HS256"],
                options={"require": ["typ", "eventId", "issuedAt", "expiresAt", "nonce"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning("Rejected work token for event %s: %s", event_id, exc)
            raise TokenMalformedError() from None

        issued_ms = _as_int(payload.get("issuedAt"))
        expires_ms = _as_int(payload.get("expiresAt"))
        if issued_ms is None or expires_ms is None or _as_int(payload.get("eventId")) != event_id:
            raise TokenMalformedError()

        return TokenClaims(
            event_id=event_id,
            issued_at=from_epoch_ms(issued_ms),
            expires_at=from_epoch_ms(expires_ms),
            nonce=str(payload["nonce"]),
        )


def _as_int(value: Any):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
