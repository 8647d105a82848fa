from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from comanda_api.api.dependencies.services import get_mail_dispatcher
from comanda_api.services.notifications import MailDispatcher

router = APIRouter(tags=["Mail"])


@router.post("/send-mail")
async def send_decision_mail(
    payload: dict[str, Any] | None = Body(default=None),
    mail: MailDispatcher = Depends(get_mail_dispatcher),
) -> dict[str, Any]:
    """Email the account review decision.

    Always answers 200; clients read ``seEnvio`` to learn whether the mail went out.
    """

    body = payload or {}
    result = await mail.send_decision_email(
        body.get("mail"),
        body.get("nombreUsuario"),
        bool(body.get("aceptacion")),
    )
    if not result.ok:
        return {"mensaje": result.detail, "seEnvio": False}
    return {**(result.value or {}), "seEnvio": True}
