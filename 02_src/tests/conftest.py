"""Pytest configuration and fixtures."""

import sys
import time
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def mailer():
    """Mailer that keeps sent mail in ``outbox``."""
    from memes.identity import LogMailer

    return LogMailer()


@pytest.fixture
def photos():
    """Photo processor that never touches the network or disk."""
    processor = Mock()
    processor.process = AsyncMock(return_value="cropped.jpg")
    processor.ensure_default = Mock()
    return processor


@pytest_asyncio.fixture
async def app(mailer, photos):
    """Started Application on an in-memory database."""
    from memes.app import Application

    application = Application(db_path=":memory:", mailer=mailer, photos=photos)
    await application.start()
    yield application
    await application.stop()


class LateClock:
    """Reads 50 ms before a whole second at the last ``rewind``, then runs in real time."""

    base = 1_000_000.95

    def __init__(self):
        self.rewind()

    def rewind(self) -> None:
        self._started = time.monotonic()

    def __call__(self) -> float:
        return self.base + (time.monotonic() - self._started)


@pytest.fixture
def late_clock():
    return LateClock()


@pytest_asyncio.fixture
async def late_clock_app(late_clock, mailer, photos):
    """Application driven by ``late_clock``."""
    from memes.app import Application

    application = Application(
        db_path=":memory:",
        clock=late_clock,
        mailer=mailer,
        photos=photos,
    )
    await application.start()
    yield application
    await application.stop()


@pytest.fixture
def store():
    """Empty WorkspaceStore."""
    from memes.storage import WorkspaceStore

    return WorkspaceStore()


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from memes.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def event_bus():
    from memes.event_bus import EventBus

    return EventBus()


@pytest.fixture
def register(app):
    """Register a user by first and last name; returns the AuthSession."""

    async def _register(name_first: str, name_last: str, email: str | None = None):
        email = email or f"{name_first}.{name_last}@example.com".lower()
        return await app.auth.register(email, "password123", name_first, name_last)

    return _register


@pytest_asyncio.fixture
async def owner(register):
    """First registered user, hence the global owner. Handle ``adalovelace``."""
    return await register("Ada", "Lovelace")


@pytest_asyncio.fixture
async def member(owner, register):
    """Plain member. Handle ``gracehopper``."""
    return await register("Grace", "Hopper")


@pytest_asyncio.fixture
async def outsider(member, register):
    """Plain member who joins nothing. Handle ``alanturing``."""
    return await register("Alan", "Turing")


@pytest_asyncio.fixture
async def channel_id(app, owner):
    """Public channel owned by ``owner``."""
    return await app.channels.create(owner.token, "general", True)


@pytest_asyncio.fixture
async def joined_channel_id(app, channel_id, member):
    """``channel_id`` with ``member`` joined."""
    await app.channels.join(member.token, channel_id)
    return channel_id
