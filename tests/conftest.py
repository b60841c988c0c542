"""Pytest configuration and shared fixtures."""

import os
import sys
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Settings are read at import time; keep them away from real resources.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-session-tokens")
os.environ.setdefault("CODE_HASH_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="petits-moulins-logs-"))

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import httpx  # noqa: E402

from app.core.config import Settings  # noqa: E402
from app.core.database import Database  # noqa: E402
from app.core.hashing import SecretHasher  # noqa: E402
from app.core.security import SessionTokenManager  # noqa: E402
from app.domain.parents.services import ParentDirectory  # noqa: E402
from app.domain.verification.services import ChallengeIssuer, ChallengeVerifier  # noqa: E402
from app.domain.verification.store import CodeStore  # noqa: E402
from main import create_app  # noqa: E402

TEST_SECRET = "test-secret-key-for-the-session-tokens"
PARENT_EMAIL = "a@x.com"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingMailer:
    """Stands in for the email channel and remembers what it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send(self, email: str, code: str) -> bool:
        self.sent.append((email, code))
        return True

    def last_code(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        ENV="test",
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        CODE_HASH_ROUNDS=4,
        LOG_DIR=str(tmp_path / "logs"),
    )


@pytest.fixture
async def database(settings):
    db = Database(settings.DATABASE_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 10, 19, 12, 0, 0))


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def hasher():
    return SecretHasher(rounds=4)


@pytest.fixture
def store(database):
    return CodeStore(database)


@pytest.fixture
def directory(database):
    return ParentDirectory(database)


@pytest.fixture
def token_manager(clock):
    return SessionTokenManager(TEST_SECRET, ttl=timedelta(hours=2), clock=clock)


@pytest.fixture
def issuer(store, directory, hasher, mailer, clock):
    return ChallengeIssuer(store, directory, hasher, mailer, code_ttl=timedelta(minutes=10), clock=clock)


@pytest.fixture
def verifier(store, directory, hasher, token_manager, clock):
    return ChallengeVerifier(store, directory, hasher, token_manager, clock=clock)


@pytest.fixture
async def parent(directory):
    return await directory.register(
        "Alice Tremblay",
        PARENT_EMAIL,
        phone="514-555-0100",
        children=["Léa"],
    )


@pytest.fixture
def app(settings, database, mailer):
    return create_app(settings=settings, database=database, mailer=mailer)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client
