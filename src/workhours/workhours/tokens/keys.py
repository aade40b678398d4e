from __future__ import annotations

import hashlib
import hmac

from ..core.constants import TOKEN_TYPE


def event_signing_key(secret_key: str, event_id: int) -> str:
    """Derive the per-event HS256 key so a token can only verify for its own event."""

    message = f"{TOKEN_TYPE}:{int(event_id)}".encode("utf-8")
    return hmac.new(secret_key.encode("utf-8"), message, hashlib.sha256).hexdigest()
