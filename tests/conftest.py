"""Pytest configuration and fixtures for VenusCMS tests."""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from venuscms.config import SecretsConfig, Settings, VenusConfig
from venuscms.main import create_app
from venuscms.schemas.import_schemas import RecordType
from venuscms.services.records import InMemoryRecordStore


DOCUMENTS_CSV = (
    "Title,Content,Category,Tags,Author,Published\n"
    "Welcome,Hello world,gacha,news;intro,Kasumi,true\n"
    'Patch notes,"Fixed bugs, added events",event,patch,,no\n'
)


@pytest.fixture
def documents_csv() -> bytes:
    return DOCUMENTS_CSV.encode("utf-8")


@pytest.fixture
def settings() -> Settings:
    """Settings built from defaults, ignoring any config on disk."""
    return Settings(config=VenusConfig(), secrets=SecretsConfig())


@pytest.fixture
def document_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(RecordType.DOCUMENT)


@pytest.fixture
def update_log_store() -> InMemoryRecordStore:
    return InMemoryRecordStore(RecordType.UPDATE_LOG)


@pytest.fixture
def app(settings, document_store, update_log_store):
    """Application wired to in-memory record stores."""
    return create_app(
        settings,
        record_stores={
            RecordType.DOCUMENT: document_store,
            RecordType.UPDATE_LOG: update_log_store,
        },
    )


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for the application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: int) -> None:
        self.now += timedelta(milliseconds=milliseconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
