"""Persistence of verification challenges, one record per email."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError

from app.core.clock import utcnow
from app.core.database import Database
from app.core.errors import ChallengeNotFoundError, TransientStoreError
from app.domain.verification.models import VerificationCode

UPSERT_ATTEMPTS = 3


@dataclass(frozen=True)
class ChallengeRecord:
    email: str
    code_hash: str
    expires_at: datetime
    used: bool


class CodeStore:
    """Atomic get/replace/consume operations over ``verification_codes``.

    The store never inspects codes; callers pass already-hashed values and
    normalized emails.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def upsert(self, email: str, code_hash: str, expires_at: datetime) -> None:
        """Replace the challenge for ``email``; last writer wins."""
        values = {
            "code_hash": code_hash,
            "expires_at": expires_at,
            "used": False,
            "updated_at": utcnow(),
        }
        try:
            for _ in range(UPSERT_ATTEMPTS):
                async with self._database.session() as session:
                    result = await session.execute(
                        update(VerificationCode)
                        .where(VerificationCode.email == email)
                        .values(**values)
                    )
                    if result.rowcount:
                        await session.commit()
                        return

                    try:
                        await session.execute(
                            insert(VerificationCode).values(
                                email=email, created_at=values["updated_at"], **values
                            )
                        )
                        await session.commit()
                        return
                    except IntegrityError:
                        # A concurrent upsert inserted first; overwrite it.
                        await session.rollback()
        except DBAPIError as exc:
            raise TransientStoreError() from exc

        raise TransientStoreError()

    async def get(self, email: str) -> Optional[ChallengeRecord]:
        try:
            async with self._database.session() as session:
                row = (
                    await session.execute(
                        select(VerificationCode).where(VerificationCode.email == email)
                    )
                ).scalar_one_or_none()
        except DBAPIError as exc:
            raise TransientStoreError() from exc

        if row is None:
            return None
        return ChallengeRecord(
            email=row.email,
            code_hash=row.code_hash,
            expires_at=row.expires_at,
            used=bool(row.used),
        )

    async def mark_used(self, email: str, code_hash: str | None = None) -> None:
        """Flip ``used`` from false to true, exactly once.

        When ``code_hash`` is given only that specific challenge is consumed,
        so a record replaced in the meantime is left alone.
        """
        statement = (
            update(VerificationCode)
            .where(VerificationCode.email == email, VerificationCode.used == False)  # noqa: E712
            .values(used=True, updated_at=utcnow())
        )
        if code_hash is not None:
            statement = statement.where(VerificationCode.code_hash == code_hash)

        try:
            async with self._database.session() as session:
                result = await session.execute(statement)
                await session.commit()
        except DBAPIError as exc:
            raise TransientStoreError() from exc

        if result.rowcount != 1:
            raise ChallengeNotFoundError()


__all__ = ["ChallengeRecord", "CodeStore"]
