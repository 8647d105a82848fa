from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from comanda_api.app import create_app
from comanda_api.services.notifications import ConfigurationError, InMemoryPushBackend, PushDispatcher


@pytest.mark.asyncio
async def test_startup_without_firebase_credentials_is_fatal(settings, session_factory) -> None:
    app = create_app(settings, session_factory=session_factory)

    with pytest.raises(ConfigurationError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.asyncio
async def test_startup_builds_services_from_settings(settings, session_factory, monkeypatch, tmp_path) -> None:
    from comanda_api.services.notifications import push

    credentials_file = tmp_path / "service-account.json"
    credentials_file.write_text("{}", encoding="utf-8")
    requested: dict[str, str] = {}

    def fake_from_credentials(path, *, app_name):
        requested["path"] = path
        requested["app_name"] = app_name
        return InMemoryPushBackend()

    monkeypatch.setattr(push.FirebasePushBackend, "from_credentials", staticmethod(fake_from_credentials))
    configured = settings.model_copy(update={"firebase_credentials_path": str(credentials_file)})
    app = create_app(configured, session_factory=session_factory)

    async with app.router.lifespan_context(app):
        assert isinstance(app.state.services.push, PushDispatcher)
        assert app.state.services.mail.configured is True

    assert requested == {"path": str(credentials_file), "app_name": "comanda-notifications"}


@pytest.mark.asyncio
async def test_requests_before_startup_are_unavailable(settings, session_factory) -> None:
    app = create_app(settings, session_factory=session_factory)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/notify", json={"token": "a", "title": "t", "body": "b"})

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_cors_preflight_allows_configured_origins(client) -> None:
    response = await client.options(
        "/notify",
        headers={
            "Origin": "https://comanda.app",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
