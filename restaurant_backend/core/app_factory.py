from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .container import ApplicationContainer, build_container
from .logging import configure_logging
from ..infrastructure.persistence.mongo import MongoPersistence
from ..infrastructure.repositories.contact_repository import MongoContactRepository
from ..infrastructure.repositories.identity_repository import MongoIdentityRepository
from ..presentation.api.routers import accounts as accounts_router
from ..presentation.api.routers import contact as contact_router
from ..presentation.api.routers import password_reset as password_reset_router
from ..services.email_service import EmailService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    """Build the ASGI app.

    A prebuilt ``container`` replaces the MongoDB and SMTP adapters that the
    lifespan would otherwise construct from ``settings``.
    """
    if settings is None:
        settings = container.settings if container is not None else Settings()

    app = FastAPI(title="Restaurant Backend", lifespan=_create_lifespan(settings, container))
    app.state.settings = settings  # type: ignore[attr-defined]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    app.include_router(accounts_router.router)
    app.include_router(contact_router.router)
    if settings.password_reset_enabled:
        app.include_router(password_reset_router.router)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Backend is running"

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        current: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        database = await current.persistence.ping() if current.persistence else True
        return {"ok": True, "database": database}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request", "errors": errors},
        )


def _create_lifespan(settings: Settings, container: Optional[ApplicationContainer]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence: Optional[MongoPersistence] = None

        if container is not None:
            app.state.container = container  # type: ignore[attr-defined]
        else:
            persistence = MongoPersistence(
                settings.mongodb_uri,
                settings.mongodb_database,
                timeout_ms=settings.mongodb_timeout_ms,
            )
            await persistence.connect()

            notifier = None
            if settings.password_reset_enabled:
                notifier = EmailService(
                    smtp_host=settings.smtp_host,
                    smtp_port=settings.smtp_port,
                    smtp_username=settings.smtp_username,
                    smtp_password=settings.smtp_password,
                    from_email=settings.smtp_from_email,
                    from_name=settings.smtp_from_name,
                )

            app.state.container = build_container(  # type: ignore[attr-defined]
                settings,
                identity_repository=MongoIdentityRepository(persistence),
                contact_repository=MongoContactRepository(persistence),
                notifier=notifier,
                persistence=persistence,
            )

        logger.info(
            "Restaurant backend ready (password reset %s)",
            "enabled" if settings.password_reset_enabled else "disabled",
        )
        try:
            yield
        finally:
            if persistence is not None:
                persistence.close()

    return lifespan
