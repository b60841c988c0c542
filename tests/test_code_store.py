"""Tests for the verification code store."""

import asyncio
from datetime import datetime

import pytest

from app.core.errors import ChallengeNotFoundError

EXPIRES = datetime(2026, 10, 19, 12, 10, 0)


class TestCodeStore:

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store):
        assert await store.get("nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_upsert_creates_record(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)

        record = await store.get("a@x.com")
        assert record.email == "a@x.com"
        assert record.code_hash == "hash-1"
        assert record.expires_at == EXPIRES
        assert record.used is False

    @pytest.mark.asyncio
    async def test_upsert_replaces_and_revives_record(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)
        await store.mark_used("a@x.com")

        later = datetime(2026, 10, 19, 13, 0, 0)
        await store.upsert("a@x.com", "hash-2", later)

        record = await store.get("a@x.com")
        assert record.code_hash == "hash-2"
        assert record.expires_at == later
        assert record.used is False

    @pytest.mark.asyncio
    async def test_concurrent_upserts_leave_one_record(self, store, database):
        from sqlalchemy import func, select

        from app.domain.verification.models import VerificationCode

        await asyncio.gather(*(store.upsert("a@x.com", f"hash-{i}", EXPIRES) for i in range(5)))

        async with database.session() as session:
            count = await session.scalar(select(func.count()).select_from(VerificationCode))
        assert count == 1
        assert (await store.get("a@x.com")).code_hash.startswith("hash-")

    @pytest.mark.asyncio
    async def test_mark_used_sets_flag(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)
        await store.mark_used("a@x.com")

        assert (await store.get("a@x.com")).used is True

    @pytest.mark.asyncio
    async def test_mark_used_without_record_fails(self, store):
        with pytest.raises(ChallengeNotFoundError):
            await store.mark_used("nobody@x.com")

    @pytest.mark.asyncio
    async def test_mark_used_only_once(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)
        await store.mark_used("a@x.com")

        with pytest.raises(ChallengeNotFoundError):
            await store.mark_used("a@x.com")

    @pytest.mark.asyncio
    async def test_mark_used_ignores_replaced_challenge(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)
        await store.upsert("a@x.com", "hash-2", EXPIRES)

        with pytest.raises(ChallengeNotFoundError):
            await store.mark_used("a@x.com", "hash-1")
        assert (await store.get("a@x.com")).used is False

    @pytest.mark.asyncio
    async def test_concurrent_mark_used_has_one_winner(self, store):
        await store.upsert("a@x.com", "hash-1", EXPIRES)

        results = await asyncio.gather(
            store.mark_used("a@x.com", "hash-1"),
            store.mark_used("a@x.com", "hash-1"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, ChallengeNotFoundError)]
        assert len(failures) == 1
        assert results.count(None) == 1
