"""Email backend implementations for notifications."""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Any, List, Optional, Protocol


@dataclass(slots=True)
class EmailReceipt:
    """What the relay reported back for one submitted message."""

    message_id: str
    sender: str
    accepted: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "messageId": self.message_id,
            "accepted": list(self.accepted),
            "rejected": list(self.rejected),
            "envelope": {"from": self.sender, "to": list(self.accepted) + list(self.rejected)},
        }


class EmailBackend(Protocol):
    """Minimal protocol for sending notification emails."""

    async def send_email(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        *,
        body_html: str | None = None,
    ) -> EmailReceipt:
        ...


def _build_message(
    sender: str,
    recipient: str,
    subject: str,
    body_text: str,
    body_html: str | None,
) -> EmailMessage:
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipient
    message["Subject"] = subject
    message["Message-ID"] = make_msgid()
    message.set_content(body_text)
    if body_html:
        message.add_alternative(body_html, subtype="html")
    return message


class SMTPEmailBackend:
    """SMTP-powered backend that sends emails via standard library."""

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender_email: str,
        sender_name: str | None = None,
        use_ssl: bool = True,
        use_tls: bool = False,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._use_ssl = use_ssl
        self._use_tls = use_tls
        self._timeout = timeout
        self._sender = formataddr((sender_name, sender_email)) if sender_name else sender_email
        self._envelope_sender = sender_email

    async def send_email(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        *,
        body_html: str | None = None,
    ) -> EmailReceipt:
        """Send email asynchronously by offloading blocking call."""

        message = _build_message(self._sender, recipient, subject, body_text, body_html)
        refused = await asyncio.to_thread(self._send, message)
        return EmailReceipt(
            message_id=message["Message-ID"],
            sender=self._envelope_sender,
            accepted=[recipient] if recipient not in refused else [],
            rejected=list(refused),
        )

    def _connect(self) -> smtplib.SMTP:
        if self._use_ssl:
            return smtplib.SMTP_SSL(
                self._host,
                self._port,
                timeout=self._timeout,
                context=ssl.create_default_context(),
            )
        smtp = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        if self._use_tls:
            smtp.starttls(context=ssl.create_default_context())
        return smtp

    def _send(self, message: EmailMessage) -> dict[str, tuple[int, bytes]]:
        smtp = self._connect()
        try:
            if self._username and self._password:
                smtp.login(self._username, self._password)
            return smtp.send_message(message)
        finally:
            smtp.quit()


@dataclass
class InMemoryEmailBackend:
    """Test backend storing outbound messages in memory."""

    sent_messages: List[EmailMessage]

    def __init__(self, sender: str = "noreply@example.com") -> None:
        self.sent_messages = []
        self._sender = sender

    async def send_email(
        self,
        recipient: str,
        subject: str,
        body_text: str,
        *,
        body_html: str | None = None,
    ) -> EmailReceipt:
        message = _build_message(self._sender, recipient, subject, body_text, body_html)
        self.sent_messages.append(message)
        return EmailReceipt(message_id=message["Message-ID"], sender=self._sender, accepted=[recipient])


__all__ = [
    "EmailBackend",
    "EmailReceipt",
    "InMemoryEmailBackend",
    "SMTPEmailBackend",
]
