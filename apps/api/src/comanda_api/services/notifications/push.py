"""Push delivery through Firebase Cloud Messaging."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError
from loguru import logger

from .result import ConfigurationError, DispatchResult, ErrorKind
from .tokens import TokenFilter, TokenSource

NO_RECIPIENTS_MESSAGE = "No hay usuarios a los que enviar un mensaje"


class PushProviderError(RuntimeError):
    """The push provider rejected the message or could not be reached."""


@dataclass(slots=True)
class NotificationPayload:
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)

    def data_block(self) -> dict[str, str]:
        """Data mirror of the display block for client-side handling."""

        return {"title": str(self.title), "body": str(self.body), **self.data}


@dataclass(slots=True)
class TokenOutcome:
    token: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "success": self.success,
            "messageId": self.message_id,
            "error": self.error,
        }


@dataclass(slots=True)
class PushResult:
    """Multicast outcome, in the order the tokens were submitted."""

    success_count: int
    failure_count: int
    responses: list[TokenOutcome] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "PushResult":
        return cls(success_count=0, failure_count=0)

    @property
    def success(self) -> bool:
        return self.success_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "sentCount": self.success_count,
            "successCount": self.success_count,
            "failureCount": self.failure_count,
            "responses": [outcome.to_dict() for outcome in self.responses],
        }


class PushBackend(Protocol):
    """Protocol for push notification connectors."""

    async def send(self, token: str, payload: NotificationPayload) -> str:
        ...

    async def send_multicast(self, tokens: Sequence[str], payload: NotificationPayload) -> PushResult:
        ...


class FirebasePushBackend:
    """Thin asynchronous wrapper around the Firebase Admin messaging API."""

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    @classmethod
    def from_credentials(cls, credentials_path: str | None, *, app_name: str) -> "FirebasePushBackend":
        """Initialise (or reuse) the named Firebase app from a service account file."""

        if not credentials_path:
            raise ConfigurationError("Firebase service account path is not configured")
        path = Path(credentials_path)
        if not path.is_file():
            raise ConfigurationError(f"Firebase service account file not found: {path}")

        try:
            app = firebase_admin.get_app(app_name)
        except ValueError:
            try:
                certificate = credentials.Certificate(str(path))
            except (ValueError, OSError) as exc:
                raise ConfigurationError(f"Invalid Firebase service account: {exc}") from exc
            app = firebase_admin.initialize_app(certificate, name=app_name)
            logger.info("Firebase Admin initialised", project_id=certificate.project_id, app_name=app_name)
        return cls(app)

    @property
    def project_id(self) -> str | None:
        return self._app.project_id

    async def _run(self, func: Any, *args: Any, **kwargs: Any) -> Any:
        """Execute blocking SDK calls in a worker thread."""

        return await asyncio.to_thread(func, *args, **kwargs)

    async def send(self, token: str, payload: NotificationPayload) -> str:
        try:
            message = messaging.Message(
                notification=messaging.Notification(title=payload.title, body=payload.body),
                data=payload.data or None,
                token=token,
            )
            return await self._run(messaging.send, message, app=self._app)
        except (FirebaseError, GoogleAuthError, ValueError) as exc:
            raise PushProviderError(str(exc)) from exc

    async def send_multicast(self, tokens: Sequence[str], payload: NotificationPayload) -> PushResult:
        try:
            # MulticastMessage validates the token list (at most 500) on construction.
            message = messaging.MulticastMessage(
                tokens=list(tokens),
                notification=messaging.Notification(title=payload.title, body=payload.body),
                data=payload.data_block(),
            )
            response = await self._run(messaging.send_each_for_multicast, message, app=self._app)
        except (FirebaseError, GoogleAuthError, ValueError) as exc:
            raise PushProviderError(str(exc)) from exc

        outcomes = [
            TokenOutcome(
                token=token,
                success=item.success,
                message_id=item.message_id,
                error=str(item.exception) if item.exception is not None else None,
            )
            for token, item in zip(tokens, response.responses)
        ]
        return PushResult(
            success_count=response.success_count,
            failure_count=response.failure_count,
            responses=outcomes,
        )


class InMemoryPushBackend:
    """Records outbound pushes instead of delivering them."""

    def __init__(self, *, failing_tokens: Sequence[str] = ()) -> None:
        self.sent_messages: list[dict[str, Any]] = []
        self.multicast_calls: list[dict[str, Any]] = []
        self._failing_tokens = set(failing_tokens)

    async def send(self, token: str, payload: NotificationPayload) -> str:
        if not token:
            raise PushProviderError("Exactly one of token, topic or condition must be specified")
        message_id = f"projects/in-memory/messages/{len(self.sent_messages) + 1}"
        self.sent_messages.append({"token": token, "title": payload.title, "body": payload.body})
        return message_id

    async def send_multicast(self, tokens: Sequence[str], payload: NotificationPayload) -> PushResult:
        self.multicast_calls.append(
            {
                "tokens": list(tokens),
                "notification": {"title": payload.title, "body": payload.body},
                "data": payload.data_block(),
            }
        )
        outcomes = []
        for index, token in enumerate(tokens):
            if token in self._failing_tokens:
                outcomes.append(TokenOutcome(token=token, success=False, error="registration-token-not-registered"))
            else:
                outcomes.append(
                    TokenOutcome(token=token, success=True, message_id=f"projects/in-memory/messages/m{index}")
                )
        succeeded = sum(1 for outcome in outcomes if outcome.success)
        return PushResult(success_count=succeeded, failure_count=len(outcomes) - succeeded, responses=outcomes)


def _stringify_data(data: Mapping[str, Any] | None) -> dict[str, str]:
    # FCM data payloads only accept string values.
    if not data:
        return {}
    return {str(key): value if isinstance(value, str) else str(value) for key, value in data.items()}


class PushDispatcher:
    """Builds push payloads and hands them to the configured backend."""

    def __init__(self, backend: PushBackend, token_source: TokenSource) -> None:
        self._backend = backend
        self._tokens = token_source

    async def send_to_token(
        self,
        token: str,
        title: str,
        body: str,
        *,
        data: Mapping[str, Any] | None = None,
    ) -> DispatchResult[str]:
        payload = NotificationPayload(title=title, body=body, data=_stringify_data(data))
        try:
            message_id = await self._backend.send(token, payload)
        except PushProviderError as exc:
            logger.error("Push send failed", error=str(exc))
            return DispatchResult.failure(ErrorKind.PROVIDER, str(exc))
        return DispatchResult.success(message_id)

    async def send_to_tokens(
        self,
        tokens: Sequence[str],
        title: str,
        body: str,
        *,
        data: Mapping[str, Any] | None = None,
    ) -> DispatchResult[PushResult]:
        if not tokens:
            logger.warning("No device tokens available; skipping multicast send")
            return DispatchResult.failure(
                ErrorKind.NOT_FOUND,
                "No hay tokens disponibles para enviar la notificación",
                value=PushResult.empty(),
            )

        payload = NotificationPayload(title=title, body=body, data=_stringify_data(data))
        try:
            result = await self._backend.send_multicast(tokens, payload)
        except PushProviderError as exc:
            logger.error("Multicast push failed", token_count=len(tokens), error=str(exc))
            return DispatchResult.failure(ErrorKind.PROVIDER, str(exc))

        logger.info(
            "Multicast push delivered",
            token_count=len(tokens),
            success_count=result.success_count,
            failure_count=result.failure_count,
        )
        return DispatchResult.success(result)

    async def send_to_role(
        self,
        role: str,
        title: str,
        body: str,
        *,
        data: Mapping[str, Any] | None = None,
    ) -> DispatchResult[PushResult]:
        return await self._fan_out(TokenFilter(field="role", value=role), title, body, data)

    async def send_to_user(
        self,
        user_id: str | int,
        title: str,
        body: str,
        *,
        data: Mapping[str, Any] | None = None,
    ) -> DispatchResult[PushResult]:
        return await self._fan_out(TokenFilter(field="user_id", value=str(user_id)), title, body, data)

    async def _fan_out(
        self,
        token_filter: TokenFilter,
        title: str,
        body: str,
        data: Mapping[str, Any] | None,
    ) -> DispatchResult[PushResult]:
        tokens = await self._tokens.fetch_tokens(token_filter)
        if not tokens:
            logger.info("No recipients matched", field=token_filter.field, value=token_filter.value)
            return DispatchResult.failure(ErrorKind.NOT_FOUND, NO_RECIPIENTS_MESSAGE)
        return await self.send_to_tokens(tokens, title, body, data=data)


__all__ = [
    "FirebasePushBackend",
    "InMemoryPushBackend",
    "NO_RECIPIENTS_MESSAGE",
    "NotificationPayload",
    "PushBackend",
    "PushDispatcher",
    "PushProviderError",
    "PushResult",
    "TokenOutcome",
]
