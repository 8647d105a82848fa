from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import firebase_admin
import pytest
from firebase_admin import credentials, exceptions, messaging
from google.auth.exceptions import RefreshError, TransportError

from comanda_api.services.notifications import (
    ConfigurationError,
    FirebasePushBackend,
    NotificationPayload,
    PushProviderError,
)


def _backend() -> FirebasePushBackend:
    return FirebasePushBackend(SimpleNamespace(project_id="comanda-test", name="test"))


@pytest.mark.asyncio
async def test_send_builds_single_token_message(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_send(message, app=None, dry_run=False):
        captured["message"] = message
        captured["app"] = app
        return "projects/comanda-test/messages/123"

    monkeypatch.setattr(messaging, "send", fake_send)

    message_id = await _backend().send("device-1", NotificationPayload(title="Hola", body="Mundo"))

    assert message_id == "projects/comanda-test/messages/123"
    message = captured["message"]
    assert message.token == "device-1"
    assert message.notification.title == "Hola"
    assert message.notification.body == "Mundo"
    assert message.data is None
    assert captured["app"].project_id == "comanda-test"


@pytest.mark.asyncio
async def test_send_wraps_provider_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(message, app=None, dry_run=False):
        raise exceptions.InvalidArgumentError("The registration token is not a valid FCM registration token")

    monkeypatch.setattr(messaging, "send", boom)

    with pytest.raises(PushProviderError, match="not a valid FCM registration token"):
        await _backend().send("bogus", NotificationPayload(title="Hola", body="Mundo"))


@pytest.mark.asyncio
async def test_send_multicast_maps_batch_response(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_multicast(message, app=None, dry_run=False):
        captured["message"] = message
        return SimpleNamespace(
            success_count=1,
            failure_count=1,
            responses=[
                SimpleNamespace(success=True, message_id="m-1", exception=None),
                SimpleNamespace(
                    success=False,
                    message_id=None,
                    exception=exceptions.NotFoundError("Requested entity was not found."),
                ),
            ],
        )

    monkeypatch.setattr(messaging, "send_each_for_multicast", fake_multicast)

    result = await _backend().send_multicast(
        ["a", "b"],
        NotificationPayload(title="Hi", body="There", data={"orderId": "9"}),
    )

    message = captured["message"]
    assert message.tokens == ["a", "b"]
    assert message.data == {"title": "Hi", "body": "There", "orderId": "9"}
    assert message.notification.title == "Hi"
    assert result.success_count == 1
    assert result.failure_count == 1
    assert result.responses[0].message_id == "m-1"
    assert result.responses[1].token == "b"
    assert "not found" in result.responses[1].error


@pytest.mark.asyncio
async def test_send_multicast_wraps_transport_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(message, app=None, dry_run=False):
        raise exceptions.UnavailableError("backend unavailable")

    monkeypatch.setattr(messaging, "send_each_for_multicast", boom)

    with pytest.raises(PushProviderError, match="backend unavailable"):
        await _backend().send_multicast(["a"], NotificationPayload(title="Hi", body="There"))


@pytest.mark.asyncio
async def test_send_wraps_credential_refresh_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def revoked(message, app=None, dry_run=False):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")

    monkeypatch.setattr(messaging, "send", revoked)

    with pytest.raises(PushProviderError, match="invalid_grant"):
        await _backend().send("device-1", NotificationPayload(title="Hola", body="Mundo"))


@pytest.mark.asyncio
async def test_send_multicast_wraps_auth_transport_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def unreachable(message, app=None, dry_run=False):
        raise TransportError("Failed to retrieve http://metadata.google.internal")

    monkeypatch.setattr(messaging, "send_each_for_multicast", unreachable)

    with pytest.raises(PushProviderError, match="metadata.google.internal"):
        await _backend().send_multicast(["a"], NotificationPayload(title="Hi", body="There"))

def test_from_credentials_requires_path() -> None:
    with pytest.raises(ConfigurationError):
        FirebasePushBackend.from_credentials(None, app_name="missing")


def test_from_credentials_rejects_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        FirebasePushBackend.from_credentials(str(tmp_path / "absent.json"), app_name="missing")


def test_from_credentials_initialises_named_app(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    service_account = tmp_path / "service-account.json"
    service_account.write_text("{}", encoding="utf-8")
    initialised: dict[str, Any] = {}

    def fake_get_app(name):
        raise ValueError(f"app {name} does not exist")

    def fake_initialize_app(credential, name):
        initialised["credential"] = credential
        initialised["name"] = name
        return SimpleNamespace(project_id=credential.project_id, name=name)

    monkeypatch.setattr(firebase_admin, "get_app", fake_get_app)
    monkeypatch.setattr(firebase_admin, "initialize_app", fake_initialize_app)
    monkeypatch.setattr(credentials, "Certificate", lambda path: SimpleNamespace(project_id="comanda-test", path=path))

    backend = FirebasePushBackend.from_credentials(str(service_account), app_name="comanda-notifications")

    assert backend.project_id == "comanda-test"
    assert initialised["name"] == "comanda-notifications"
    assert initialised["credential"].path == str(service_account)


def test_from_credentials_reports_invalid_service_account(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    service_account = tmp_path / "service-account.json"
    service_account.write_text("{}", encoding="utf-8")

    def fake_get_app(name):
        raise ValueError("missing")

    monkeypatch.setattr(firebase_admin, "get_app", fake_get_app)

    with pytest.raises(ConfigurationError, match="Invalid Firebase service account"):
        FirebasePushBackend.from_credentials(str(service_account), app_name="comanda-broken")
