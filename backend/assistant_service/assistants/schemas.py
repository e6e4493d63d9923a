"""Esquemas de datos expuestos por el API de asistentes."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import Assistant

Operation = Literal["created", "updated"]


class CamelModel(BaseModel):
    """Acepta y serializa sólo nombres camelCase (`responseText`, `createdAt`, ...)."""

    model_config = ConfigDict(alias_generator=to_camel)


class CamelResponse(CamelModel):
    """Respuestas: se construyen con nombres Python y se serializan en camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssistantRequest(CamelModel):
    """Payload para crear o actualizar un asistente.

    Los campos son opcionales a nivel de esquema: la presencia, longitud y
    contenido no vacío se validan en `service.validate_assistant_payload` para
    reportar todos los errores por campo de una sola vez.
    """

    name: str | None = Field(default=None, description="Nombre único del asistente (1-100).")
    response_text: str | None = Field(
        default=None, description="Texto fijo que devuelve el asistente (1-1000)."
    )


class AssistantOut(CamelResponse):
    """Registro de asistente tal como se entrega al cliente."""

    id: int
    name: str
    response_text: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, record: Assistant) -> AssistantOut:
        return cls(
            id=record.id,
            name=record.name,
            response_text=record.response_text,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class UpsertResponse(CamelResponse):
    """Respuesta a POST /api/assistants."""

    success: bool = True
    message: str
    operation: Operation
    assistant: AssistantOut


class MessageRequest(CamelModel):
    """Mensaje enviado a un asistente; sólo se refleja en la respuesta."""

    message: str | None = Field(default=None, description="Mensaje del usuario (1-500).")


class MessageResponse(CamelResponse):
    """Respuesta a POST /api/assistants/{name}/message."""

    assistant_name: str
    response: str
    original_message: str
    timestamp: datetime


class DeleteResponse(CamelResponse):
    """Confirmación de DELETE /api/assistants/{name}."""

    success: bool = True
    message: str
    assistant_name: str
    timestamp: datetime


class HealthResponse(CamelResponse):
    """Estado del servicio junto al conteo vivo de asistentes."""

    status: Literal["UP"] = "UP"
    service: str
    version: str
    total_assistants: int
    timestamp: datetime
    endpoints: dict[str, str]


class ErrorResponse(CamelResponse):
    """Envelope común de errores (400/404/415/503)."""

    success: bool = False
    error: str
    details: str
    timestamp: datetime
    assistant_name: str | None = None
    validation_errors: dict[str, str] | None = None
