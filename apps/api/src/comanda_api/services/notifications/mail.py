"""Account decision emails."""

from __future__ import annotations

from typing import Any

from loguru import logger

from .backend import EmailBackend
from .result import DispatchResult, ErrorKind
from .templates import render_account_decision

MAIL_FAILURE_MESSAGE = "No se pudo enviar el mail"


class MailDispatcher:
    """Sends templated acceptance/rejection notices; never raises on delivery failure."""

    def __init__(self, backend: EmailBackend | None) -> None:
        self._backend = backend

    @property
    def configured(self) -> bool:
        return self._backend is not None

    async def send_decision_email(
        self,
        recipient_address: str | None,
        recipient_name: Any,
        is_accepted: bool,
    ) -> DispatchResult[dict[str, Any]]:
        if self._backend is None:
            logger.warning("Mail backend not configured; decision email dropped")
            return DispatchResult.failure(ErrorKind.PROVIDER, MAIL_FAILURE_MESSAGE)
        if not recipient_address:
            logger.warning("Decision email requested without a recipient address")
            return DispatchResult.failure(ErrorKind.VALIDATION, MAIL_FAILURE_MESSAGE)

        rendered = render_account_decision(recipient_name, accepted=bool(is_accepted))
        try:
            receipt = await self._backend.send_email(
                str(recipient_address),
                rendered.subject,
                rendered.text_body,
                body_html=rendered.html_body,
            )
        except Exception as exc:  # noqa: BLE001 - every delivery failure is reported as seEnvio=false
            logger.error(
                "Decision email delivery failed",
                accepted=bool(is_accepted),
                error=str(exc),
            )
            return DispatchResult.failure(ErrorKind.PROVIDER, MAIL_FAILURE_MESSAGE)

        logger.info("Decision email sent", accepted=bool(is_accepted), message_id=receipt.message_id)
        return DispatchResult.success(receipt.to_dict())


__all__ = ["MAIL_FAILURE_MESSAGE", "MailDispatcher"]
