from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import isoformat_ms
from ..core.constants import TOKEN_TYPE


@dataclass(frozen=True)
class WorkToken:
    """A signed, time-limited authorization bound to one event.

    ``token`` is the compact signed form; everything else is readable
    metadata copied from its claims. Tokens are never persisted.
    """

    event_id: int
    issued_at: datetime
    expires_at: datetime
    nonce: str
    token: str

    def to_wire(self) -> str:
        """Payload encoded into the QR image."""

        return json.dumps(
            {
                "type": TOKEN_TYPE,
                "eventId": self.event_id,
                "token": self.token,
                "expiresAt": isoformat_ms(self.expires_at),
            },
            separators=(",", ":"),
        )


@dataclass(frozen=True)
class TokenClaims:
    """Result of a successful validation."""

    event_id: int
    issued_at: datetime
    expires_at: datetime
    nonce: str
