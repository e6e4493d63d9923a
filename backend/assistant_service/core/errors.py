"""Errores de dominio y su traducción a respuestas HTTP."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter

from assistant_service.core.logging import get_logger

logger = get_logger(__name__)

# Mismo serializador que los modelos de respuesta: datetimes UTC terminan en "Z".
_ENVELOPE = TypeAdapter(dict[str, Any])


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssistantError(Exception):
    """Base de los errores que el API sabe representar como envelope JSON."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "Request failed"

    def __init__(self, details: str, *, error: str | None = None, status_code: int | None = None) -> None:
        super().__init__(details)
        self.details = details
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code

    def payload(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "details": self.details,
            "timestamp": utcnow(),
        }


class AssistantNotFoundError(AssistantError):
    """El nombre solicitado no corresponde a ningún asistente registrado."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Assistant not found"

    def __init__(self, name: str, details: str | None = None) -> None:
        super().__init__(details or f"Assistant with name '{name}' does not exist")
        self.name = name

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["assistantName"] = self.name
        return body


class AssistantValidationError(AssistantError):
    """Uno o más campos del payload no cumplen las restricciones."""

    error = "Validation failed"

    def __init__(self, field_errors: dict[str, str]) -> None:
        summary = "; ".join(f"{field}: {reason}" for field, reason in field_errors.items())
        super().__init__(summary or "Invalid request")
        self.field_errors = dict(field_errors)

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["validationErrors"] = self.field_errors
        return body


class AssistantInternalError(AssistantError):
    """Falla inesperada; sólo expone una descripción corta."""


class HealthCheckError(AssistantInternalError):
    """El health check no pudo consultar el store."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Health check failed"

    def payload(self) -> dict[str, Any]:
        return {
            "status": "DOWN",
            "error": self.error,
            "details": self.details,
            "timestamp": utcnow(),
        }


class UnsupportedMediaTypeError(AssistantError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error = "Unsupported media type"


def _field_from_loc(loc: tuple[Any, ...]) -> str:
    # loc llega como ("body", "name") o ("body", 12) para JSON malformado.
    parts = [str(part) for part in loc if part != "body"]
    if not parts or parts[-1].isdigit():
        return "body"
    return parts[-1]


def validation_error_from_pydantic(exc: RequestValidationError) -> AssistantValidationError:
    field_errors: dict[str, str] = {}
    for item in exc.errors():
        field = _field_from_loc(tuple(item.get("loc", ())))
        field_errors.setdefault(field, item.get("msg", "Invalid value"))
    return AssistantValidationError(field_errors)


async def assistant_error_handler(request: Request, exc: AssistantError) -> JSONResponse:
    logger.info(
        "request.rejected",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error": exc.error,
        },
    )
    content = _ENVELOPE.dump_python(exc.payload(), mode="json")
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await assistant_error_handler(request, validation_error_from_pydantic(exc))
