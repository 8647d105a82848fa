from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .api.routes import api_router
from .core.logging import configure_logging
from .core.settings import Settings, get_settings
from .db.session import SessionFactory, build_engine, build_session_factory
from .observability.tracing import configure_tracing
from .services.notifications import NotificationServices, build_services


APP_VERSION = "0.1.0"
SERVICE_NAME = "comanda-notifications"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    engine = None
    if app.state.session_factory is None:
        engine = build_engine(settings.database_url, echo=settings.database_echo)
        app.state.session_factory = build_session_factory(engine)

    if app.state.services is None:
        # Raises ConfigurationError without Firebase credentials, which aborts startup.
        app.state.services = build_services(settings, app.state.session_factory)

    logger.info(
        "Notification relay started",
        environment=settings.environment,
        mail_enabled=app.state.services.mail.configured,
    )
    try:
        yield
    finally:
        if engine is not None:
            await engine.dispose()
        logger.info("Notification relay stopped")


def create_app(
    settings: Settings | None = None,
    *,
    services: NotificationServices | None = None,
    session_factory: SessionFactory | None = None,
) -> FastAPI:
    """Application factory for the notification relay.

    ``services`` and ``session_factory`` are built during startup unless injected.
    """
    settings = settings or get_settings()
    configure_logging(
        service_name=SERVICE_NAME,
        environment=settings.environment,
        version=APP_VERSION,
        level=settings.log_level,
    )

    app = FastAPI(
        title="Comanda Notifications API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services
    app.state.session_factory = session_factory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
    )

    if settings.tracing_enabled:
        configure_tracing(
            app,
            service_name=SERVICE_NAME,
            service_version=APP_VERSION,
            environment=settings.environment,
        )

    app.include_router(api_router)
    return app
