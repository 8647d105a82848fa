"""Request-scoped accessors for collaborators wired at startup."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from comanda_api.core.settings import Settings
from comanda_api.services.notifications import MailDispatcher, NotificationServices, PushDispatcher


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_services(request: Request) -> NotificationServices:
    services: NotificationServices | None = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification services are not initialised",
        )
    return services


def get_push_dispatcher(services: NotificationServices = Depends(get_services)) -> PushDispatcher:
    return services.push


def get_mail_dispatcher(services: NotificationServices = Depends(get_services)) -> MailDispatcher:
    return services.mail
