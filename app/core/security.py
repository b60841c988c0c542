"""Signed session tokens handed out after a successful code verification."""
from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from itsdangerous import BadSignature, URLSafeSerializer

from app.core.clock import utcnow
from app.core.errors import InvalidTokenError

SESSION_TOKEN_SALT = "session-token"


@dataclass(frozen=True)
class SessionIdentity:
    """Identity embedded in a session token."""

    id: int
    email: str
    role: str
    name: str | None = None


def _to_epoch(moment: datetime) -> int:
    return calendar.timegm(moment.utctimetuple())


def _from_epoch(value: int) -> datetime:
    return datetime(1970, 1, 1) + timedelta(seconds=value)


class SessionTokenManager:
    """Mint and check session tokens.

    Tokens are self-contained: the payload carries the identity and an
    absolute expiry, and the signature is the only proof of authenticity.
    Rotating ``secret_key`` is the only way to revoke them early.
    """

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._serializer = URLSafeSerializer(secret_key, salt=SESSION_TOKEN_SALT)

    def issue(self, identity: SessionIdentity, now: datetime | None = None) -> tuple[str, datetime]:
        """Return a signed token for ``identity`` and its expiry."""
        issued_at = _to_epoch(now or self._clock())
        expires_at = issued_at + int(self.ttl.total_seconds())
        payload: dict[str, Any] = asdict(identity)
        payload.update({"iat": issued_at, "exp": expires_at})
        return self._serializer.dumps(payload), _from_epoch(expires_at)

    def load(self, token: str, now: datetime | None = None) -> SessionIdentity:
        """Verify ``token`` and return the identity it carries."""
        try:
            data = self._serializer.loads(token)
        except BadSignature:
            raise InvalidTokenError() from None

        if not isinstance(data, dict):
            raise InvalidTokenError()

        try:
            expires_at = int(data["exp"])
            identity = SessionIdentity(
                id=int(data["id"]),
                email=str(data["email"]),
                role=str(data["role"]),
                name=data.get("name"),
            )
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError() from None

        if expires_at <= _to_epoch(now or self._clock()):
            raise InvalidTokenError("Token expired")

        return identity


__all__ = ["SESSION_TOKEN_SALT", "SessionIdentity", "SessionTokenManager"]
