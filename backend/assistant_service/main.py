"""Punto de entrada principal para la aplicación FastAPI."""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from assistant_service.api.routes.health import router as health_router
from assistant_service.assistants.router import router as assistants_router
from assistant_service.assistants.store import AssistantStore
from assistant_service.core.config import settings
from assistant_service.core.errors import (
    AssistantError,
    assistant_error_handler,
    request_validation_handler,
)
from assistant_service.core.logging import configure_logging, get_logger, resolve_log_level
from assistant_service.core.middleware import RequestLoggingMiddleware

PUBLIC_ROOT = Path(__file__).resolve().parent / "public"


def create_app(store: AssistantStore | None = None) -> FastAPI:
    """Crea y configura la instancia de FastAPI.

    Args:
        store: Registro a exponer. Cuando no se indica se crea uno vacío, de
            modo que cada app (y cada prueba) tiene su propio estado.
    """
    default_log_level = logging.DEBUG if settings.environment != "production" else logging.INFO
    log_level = resolve_log_level(settings.log_level, default=default_log_level)
    per_logger_files = None
    if settings.log_file_path:
        log_dir = Path(settings.log_file_path).parent
        per_logger_files = {"assistant_service.request": str(log_dir / "request.log")}

    configure_logging(
        level=log_level,
        log_file=settings.log_file_path,
        per_logger_files=per_logger_files,
    )

    app = FastAPI(title=settings.service_name, version=settings.service_version)
    app.state.store = store if store is not None else AssistantStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(AssistantError, assistant_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # health antes que assistants: `/api/assistants/{name}` también casaría con `/health`.
    app.include_router(health_router)
    app.include_router(assistants_router)

    @app.get("/", tags=["info"])
    def info() -> dict[str, str | None]:
        return {
            "name": settings.service_name,
            "version": settings.service_version,
            "environment": settings.environment,
            "docs": "/docs",
            "client": "/client/" if settings.client_enabled else None,
        }

    log = get_logger("assistant_service")
    if settings.client_enabled:
        if PUBLIC_ROOT.exists():
            app.mount("/client", StaticFiles(directory=str(PUBLIC_ROOT), html=True), name="client")
            log.info("client.static_mounted", extra={"path": str(PUBLIC_ROOT)})
        else:
            log.warning("client.static_missing", extra={"expected_path": str(PUBLIC_ROOT)})

    return app


app = create_app()
