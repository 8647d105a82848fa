import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def _configure_path() -> None:
    src_path = Path(__file__).resolve().parents[1] / "src"
    if src_path.exists():
        sys.path.insert(0, str(src_path))


_configure_path()

from comanda_api.app import create_app  # noqa: E402
from comanda_api.core.settings import Settings  # noqa: E402
from comanda_api.db.base import Base  # noqa: E402
from comanda_api.models import DeviceToken  # noqa: E402
from comanda_api.services.notifications import (  # noqa: E402
    InMemoryEmailBackend,
    InMemoryPushBackend,
    build_services,
)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    try:
        yield factory
    finally:
        await engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        tracing_enabled=False,
        log_level="WARNING",
        firebase_credentials_path=None,
        smtp_username="comanda@example.com",
        smtp_password="secret",
    )


@pytest.fixture
def push_backend() -> InMemoryPushBackend:
    return InMemoryPushBackend()


@pytest.fixture
def email_backend() -> InMemoryEmailBackend:
    return InMemoryEmailBackend(sender="comanda@example.com")


@pytest.fixture
def services(settings, session_factory, push_backend, email_backend):
    return build_services(
        settings,
        session_factory,
        push_backend=push_backend,
        email_backend=email_backend,
    )


@pytest.fixture
def app(settings, services, session_factory):
    return create_app(settings, services=services, session_factory=session_factory)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def seeded_tokens(session_factory):
    async with session_factory() as session:
        session.add_all(
            [
                DeviceToken(user_id="1", role="mozo", token="token-mozo-1"),
                DeviceToken(user_id="2", role="mozo", token="token-mozo-2"),
                DeviceToken(user_id="3", role="mozo", token=""),
                DeviceToken(user_id="4", role="mozo", token=None),
                DeviceToken(user_id="5", role="cocinero", token="token-cocinero-5"),
                DeviceToken(user_id="5", role="cocinero", token="token-cocinero-5b"),
            ]
        )
        await session.commit()
    return session_factory
