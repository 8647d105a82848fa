from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from comanda_api.api.dependencies.services import get_push_dispatcher
from comanda_api.api.responses import error_status
from comanda_api.services.notifications import (
    DispatchResult,
    PushDispatcher,
    PushResult,
    validate_required_fields,
)

router = APIRouter(tags=["Notifications"])


def _data_map(payload: dict[str, Any]) -> dict[str, Any] | None:
    data = payload.get("data")
    return data if isinstance(data, dict) else None


def _require(payload: dict[str, Any], fields: list[str]) -> None:
    missing = validate_required_fields(payload, fields)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing required fields: {', '.join(missing)}",
        )


def _multicast_response(result: DispatchResult[PushResult]) -> dict[str, Any]:
    if not result.ok or result.value is None:
        raise HTTPException(status_code=error_status(result.error), detail=result.detail)
    return result.value.to_dict()


@router.post("/notify", response_class=PlainTextResponse)
async def notify_token(
    payload: dict[str, Any] | None = Body(default=None),
    push: PushDispatcher = Depends(get_push_dispatcher),
) -> PlainTextResponse:
    """Send a push notification to a single device token.

    Fields are forwarded as-is; the provider decides whether the message is valid.
    """

    body = payload or {}
    result = await push.send_to_token(
        body.get("token"),
        body.get("title"),
        body.get("body"),
        data=_data_map(body),
    )
    if not result.ok:
        return PlainTextResponse(
            f"Error al enviar el mensaje: {result.detail}",
            status_code=error_status(result.error),
        )
    return PlainTextResponse(f"Mensaje enviado correctamente: {result.value}")


@router.post("/notify-role")
async def notify_role(
    payload: dict[str, Any] | None = Body(default=None),
    push: PushDispatcher = Depends(get_push_dispatcher),
) -> dict[str, Any]:
    """Multicast to an explicit ``tokens`` list, or to every device registered for ``role``."""

    body = payload or {}
    recipient_field = "tokens" if "tokens" in body else "role"
    _require(body, [recipient_field, "title", "body"])

    if recipient_field == "tokens":
        tokens = body["tokens"]
        if not isinstance(tokens, list):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="tokens must be a list of device tokens",
            )
        result = await push.send_to_tokens(
            [str(token) for token in tokens if token],
            body["title"],
            body["body"],
            data=_data_map(body),
        )
    else:
        result = await push.send_to_role(
            str(body["role"]),
            body["title"],
            body["body"],
            data=_data_map(body),
        )
    return _multicast_response(result)


@router.post("/notify-user")
async def notify_user(
    payload: dict[str, Any] | None = Body(default=None),
    push: PushDispatcher = Depends(get_push_dispatcher),
) -> dict[str, Any]:
    """Multicast to every device registered for one user."""

    body = payload or {}
    _require(body, ["userId", "title", "body"])
    result = await push.send_to_user(
        body["userId"],
        body["title"],
        body["body"],
        data=_data_map(body),
    )
    return _multicast_response(result)
