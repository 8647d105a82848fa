from __future__ import annotations

from typing import Dict, Literal

from fastapi import APIRouter, Depends, Request
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from comanda_api.api.dependencies.services import get_app_settings
from comanda_api.core.settings import Settings
from comanda_api.db.session import get_session

router = APIRouter()


class ComponentStatus(BaseModel):
    status: Literal["ready", "disabled", "error"]
    detail: str | None = Field(default=None, description="Human readable status detail")


class ReadinessPayload(BaseModel):
    status: Literal["ready", "degraded", "error"]
    components: Dict[str, ComponentStatus]


@router.get("/healthz", summary="Service health check")
async def service_health(request: Request, settings: Settings = Depends(get_app_settings)) -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.environment,
        "version": request.app.version,
    }


@router.get("/readyz", summary="Service readiness", response_model=ReadinessPayload)
async def service_readiness(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> ReadinessPayload:
    components: Dict[str, ComponentStatus] = {}
    overall: Literal["ready", "degraded", "error"] = "ready"

    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Token store readiness probe failed", error=str(exc))
        components["token_store"] = ComponentStatus(status="error", detail=str(exc))
        overall = "error"
    else:
        components["token_store"] = ComponentStatus(status="ready")

    services = getattr(request.app.state, "services", None)
    if services is None:
        components["push_provider"] = ComponentStatus(status="error", detail="Push dispatcher not initialised")
        overall = "error"
    else:
        components["push_provider"] = ComponentStatus(status="ready")

    if services is not None and services.mail.configured:
        components["mail_relay"] = ComponentStatus(status="ready")
    else:
        components["mail_relay"] = ComponentStatus(
            status="disabled",
            detail="SMTP credentials not configured",
        )
        if overall == "ready":
            overall = "degraded"

    return ReadinessPayload(status=overall, components=components)
