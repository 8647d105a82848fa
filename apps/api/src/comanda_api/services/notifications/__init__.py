"""Notification service package."""

from .backend import EmailBackend, EmailReceipt, InMemoryEmailBackend, SMTPEmailBackend
from .container import NotificationServices, build_services
from .mail import MAIL_FAILURE_MESSAGE, MailDispatcher
from .push import (
    FirebasePushBackend,
    InMemoryPushBackend,
    NotificationPayload,
    PushBackend,
    PushDispatcher,
    PushProviderError,
    PushResult,
)
from .result import ConfigurationError, DispatchResult, ErrorKind, validate_required_fields
from .tokens import TokenFilter, TokenRepository

__all__ = [
    "ConfigurationError",
    "DispatchResult",
    "EmailBackend",
    "EmailReceipt",
    "ErrorKind",
    "FirebasePushBackend",
    "InMemoryEmailBackend",
    "InMemoryPushBackend",
    "MAIL_FAILURE_MESSAGE",
    "MailDispatcher",
    "NotificationPayload",
    "NotificationServices",
    "PushBackend",
    "PushDispatcher",
    "PushProviderError",
    "PushResult",
    "SMTPEmailBackend",
    "TokenFilter",
    "TokenRepository",
    "build_services",
    "validate_required_fields",
]
