"""Shared test fixtures for Smart Bookmark tests."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add api/ to Python path so imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from core.auth import AuthenticatedUser, get_current_user  # noqa: E402
from index import app  # noqa: E402

# A fake authenticated user for testing protected endpoints.
MOCK_USER = AuthenticatedUser(
    user_id="test-user-id-123", access_token="fake-jwt", email="me@example.com"
)


async def _override_get_current_user() -> AuthenticatedUser:
    return MOCK_USER


@pytest_asyncio.fixture
async def client():
    """Async test client for FastAPI app (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def authed_client():
    """Async test client with auth dependency overridden."""
    app.dependency_overrides[get_current_user] = _override_get_current_user
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_current_user, None)


def _make_bookmark_data(**overrides) -> dict:
    data = {
        "id": "bm-1",
        "url": "https://docs.rs",
        "title": "Docs",
        "created_at": "2026-01-01T12:00:00+00:00",
        "user_id": "test-user-id-123",
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_bookmark_data():
    """Factory for bookmark rows as Supabase returns them."""
    return _make_bookmark_data


class FakeSupabase:
    """Async Supabase client double.

    ``rows`` is what every select returns; tests mutate it to simulate
    remote changes.  Query builders are MagicMocks so call arguments can be
    asserted the usual way.
    """

    def __init__(self, rows=None, user_id="test-user-id-123", email="me@example.com"):
        self.rows = list(rows or [])
        self.client = MagicMock()

        session = None
        if user_id is not None:
            session = SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))
        self.client.auth.get_session = AsyncMock(return_value=session)
        self.client.auth.sign_out = AsyncMock(return_value=None)

        table = self.client.table.return_value
        self.select_execute = AsyncMock(side_effect=self._select)
        table.select.return_value.order.return_value.execute = self.select_execute
        self.insert_execute = AsyncMock(
            return_value=SimpleNamespace(data=[{"id": "new"}])
        )
        table.insert.return_value.execute = self.insert_execute
        self.delete_execute = AsyncMock(return_value=SimpleNamespace(data=[]))
        table.delete.return_value.eq.return_value.execute = self.delete_execute

        self.channel = MagicMock()
        self.channel.on_postgres_changes.return_value = self.channel
        self.channel.subscribe = AsyncMock(return_value=self.channel)
        self.client.channel.return_value = self.channel
        self.client.remove_channel = AsyncMock(return_value=None)

    def _select(self):
        return SimpleNamespace(data=[dict(r) for r in self.rows])

    @property
    def table(self):
        return self.client.table.return_value

    @property
    def change_callback(self):
        return self.channel.on_postgres_changes.call_args.kwargs["callback"]


@pytest.fixture
def fake_supabase():
    return FakeSupabase(
        rows=[
            _make_bookmark_data(
                id="bm-2", title="Python", url="https://python.org",
                created_at="2026-01-02T12:00:00+00:00",
            ),
            _make_bookmark_data(),
        ]
    )


@pytest.fixture
def fake_supabase_factory():
    """Build a ``FakeSupabase`` with custom rows or session."""
    return FakeSupabase
