"""Dependencias comunes para las rutas de asistentes."""

from fastapi import Header, Request

from assistant_service.core.errors import UnsupportedMediaTypeError

from .store import AssistantStore


def get_store(request: Request) -> AssistantStore:
    """Devuelve el store construido por `create_app` para esta aplicación."""
    return request.app.state.store


async def require_json_content(content_type: str | None = Header(default=None)) -> None:
    """Rechaza cuerpos que no declaren `Content-Type: application/json`."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type == "application/json" or media_type.endswith("+json"):
        return
    raise UnsupportedMediaTypeError(
        f"Content-Type '{content_type or ''}' is not supported; use application/json"
    )
