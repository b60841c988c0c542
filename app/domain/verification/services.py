"""Issue and verify one-time email verification codes."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Protocol

from starlette.concurrency import run_in_threadpool

from app.core.clock import utcnow
from app.core.errors import (
    ChallengeExpiredError,
    ChallengeNotFoundError,
    CodeMismatchError,
    UnknownEmailError,
)
from app.core.hashing import SecretHasher
from app.core.logging_config import anonymise
from app.core.security import SessionIdentity, SessionTokenManager
from app.domain.parents.models import Parent
from app.domain.parents.services import ParentDirectory, normalize_email
from app.domain.verification.store import CodeStore

CODE_DIGITS = 6
PARENT_ROLE = "parent"

security_logger = logging.getLogger("app.security")


class CodeSender(Protocol):
    async def send(self, email: str, code: str) -> bool: ...


def generate_code(digits: int = CODE_DIGITS) -> str:
    """Uniformly random numeric code, leading zeros kept."""
    return f"{secrets.randbelow(10 ** digits):0{digits}d}"


@dataclass(frozen=True)
class IssuedChallenge:
    email: str
    expires_at: datetime
    # Only surfaced to clients in development.
    code: str


@dataclass(frozen=True)
class SessionGrant:
    token: str
    expires_at: datetime
    parent: Parent


class ChallengeIssuer:
    """Create a fresh code for a registered parent and send it by email."""

    def __init__(
        self,
        store: CodeStore,
        directory: ParentDirectory,
        hasher: SecretHasher,
        mailer: CodeSender,
        code_ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.directory = directory
        self.hasher = hasher
        self.mailer = mailer
        self.code_ttl = code_ttl
        self._clock = clock

    async def issue(self, email: str) -> IssuedChallenge:
        email = normalize_email(email)
        parent = await self.directory.find_by_email(email)
        if parent is None:
            security_logger.info("Verification requested for unknown email [email_hash=%s]", anonymise(email))
            raise UnknownEmailError()

        code = generate_code()
        code_hash = await run_in_threadpool(self.hasher.hash, code)
        expires_at = self._clock() + self.code_ttl
        await self.store.upsert(email, code_hash, expires_at)

        delivered = await self.mailer.send(email, code)
        security_logger.info(
            "Verification code issued [parent_id=%s, email_hash=%s, delivered=%s]",
            parent.id,
            anonymise(email),
            delivered,
        )
        return IssuedChallenge(email=email, expires_at=expires_at, code=code)


class ChallengeVerifier:
    """Check a submitted code and exchange it for a session token.

    Checks run in a fixed order (existence, expiry, code) so a replayed code
    and an expired code each get their own stable error.
    """

    def __init__(
        self,
        store: CodeStore,
        directory: ParentDirectory,
        hasher: SecretHasher,
        token_manager: SessionTokenManager,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.directory = directory
        self.hasher = hasher
        self.token_manager = token_manager
        self._clock = clock

    async def verify(self, email: str, submitted_code: str) -> SessionGrant:
        email = normalize_email(email)
        email_hash = anonymise(email)

        record = await self.store.get(email)
        if record is None or record.used:
            security_logger.info("No pending verification code [email_hash=%s]", email_hash)
            raise ChallengeNotFoundError()

        now = self._clock()
        if now >= record.expires_at:
            security_logger.info("Expired verification code submitted [email_hash=%s]", email_hash)
            raise ChallengeExpiredError()

        matches = await run_in_threadpool(self.hasher.verify, submitted_code, record.code_hash)
        if not matches:
            security_logger.warning("Incorrect verification code [email_hash=%s]", email_hash)
            raise CodeMismatchError()

        # Loses with ChallengeNotFoundError if a concurrent request got here first.
        await self.store.mark_used(email, record.code_hash)

        parent = await self.directory.find_by_email(email)
        if parent is None:
            raise ChallengeNotFoundError()

        identity = SessionIdentity(id=parent.id, email=parent.email, role=PARENT_ROLE, name=parent.name)
        token, expires_at = self.token_manager.issue(identity, now=now)
        security_logger.info("Parent authenticated [parent_id=%s, email_hash=%s]", parent.id, email_hash)
        return SessionGrant(token=token, expires_at=expires_at, parent=parent)


__all__ = [
    "ChallengeIssuer",
    "ChallengeVerifier",
    "CodeSender",
    "IssuedChallenge",
    "SessionGrant",
    "generate_code",
]
