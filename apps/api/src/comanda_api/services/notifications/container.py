"""Wiring of notification collaborators from settings."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from comanda_api.core.settings import Settings
from comanda_api.db.session import SessionFactory

from .backend import EmailBackend, SMTPEmailBackend
from .mail import MailDispatcher
from .push import FirebasePushBackend, PushBackend, PushDispatcher
from .tokens import TokenRepository, TokenSource


@dataclass
class NotificationServices:
    """Collaborators shared by the request handlers for the app's lifetime."""

    push: PushDispatcher
    mail: MailDispatcher
    tokens: TokenSource


def build_email_backend(settings: Settings) -> EmailBackend | None:
    sender = settings.mail_sender_address
    if not settings.smtp_configured or not sender:
        logger.warning("SMTP credentials missing; decision emails will not be delivered")
        return None
    return SMTPEmailBackend(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        sender_email=sender,
        sender_name=settings.smtp_sender_name,
        use_ssl=settings.smtp_use_ssl,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )


def build_services(
    settings: Settings,
    session_factory: SessionFactory,
    *,
    push_backend: PushBackend | None = None,
    email_backend: EmailBackend | None = None,
) -> NotificationServices:
    """Build the dispatchers; raises ``ConfigurationError`` without Firebase credentials."""

    tokens = TokenRepository(session_factory)
    if push_backend is None:
        push_backend = FirebasePushBackend.from_credentials(
            settings.firebase_credentials_path,
            app_name=settings.firebase_app_name,
        )
    if email_backend is None:
        email_backend = build_email_backend(settings)

    return NotificationServices(
        push=PushDispatcher(push_backend, tokens),
        mail=MailDispatcher(email_backend),
        tokens=tokens,
    )


__all__ = ["NotificationServices", "build_email_backend", "build_services"]
