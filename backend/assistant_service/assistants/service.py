"""Lógica del registro de asistentes: validación, operaciones y envelopes."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from assistant_service.core.config import settings
from assistant_service.core.errors import (
    AssistantInternalError,
    AssistantNotFoundError,
    AssistantValidationError,
    HealthCheckError,
    utcnow,
)
from assistant_service.core.logging import get_logger, log_event

from . import schemas
from .models import MESSAGE_MAX_LENGTH, NAME_MAX_LENGTH, RESPONSE_TEXT_MAX_LENGTH
from .store import AssistantStore, AssistantStoreError

logger = get_logger("assistant_service.assistants")

ENDPOINTS = {
    "createAssistant": "POST /api/assistants",
    "sendMessage": "POST /api/assistants/{name}/message",
    "getAllAssistants": "GET /api/assistants",
    "getAssistant": "GET /api/assistants/{name}",
    "deleteAssistant": "DELETE /api/assistants/{name}",
    "health": "GET /api/assistants/health",
}


def _check_text(
    errors: dict[str, str],
    field: str,
    value: str | None,
    *,
    max_length: int,
    required_msg: str,
    too_long_msg: str,
) -> str:
    """Registra el error del campo en `errors` y retorna el valor (vacío si falta)."""
    if value is None or not value.strip():
        errors[field] = required_msg
        return ""
    if len(value) > max_length:
        errors[field] = too_long_msg
    return value


def validate_assistant_payload(payload: schemas.AssistantRequest) -> tuple[str, str]:
    """Valida nombre y texto de respuesta; reporta todos los campos inválidos juntos."""
    errors: dict[str, str] = {}
    name = _check_text(
        errors,
        "name",
        payload.name,
        max_length=NAME_MAX_LENGTH,
        required_msg="Assistant name is required",
        too_long_msg=f"Assistant name must not exceed {NAME_MAX_LENGTH} characters",
    )
    response_text = _check_text(
        errors,
        "responseText",
        payload.response_text,
        max_length=RESPONSE_TEXT_MAX_LENGTH,
        required_msg="Response text is required",
        too_long_msg=f"Response text must not exceed {RESPONSE_TEXT_MAX_LENGTH} characters",
    )
    if errors:
        raise AssistantValidationError(errors)
    return name, response_text


def validate_message_payload(payload: schemas.MessageRequest) -> str:
    errors: dict[str, str] = {}
    message = _check_text(
        errors,
        "message",
        payload.message,
        max_length=MESSAGE_MAX_LENGTH,
        required_msg="Message is required and cannot be empty",
        too_long_msg=f"Message must not exceed {MESSAGE_MAX_LENGTH} characters",
    )
    if errors:
        raise AssistantValidationError(errors)
    return message


@contextmanager
def _internal_errors(error: str) -> Iterator[None]:
    """Traduce fallas del store a `AssistantInternalError` sin exponer detalles."""
    try:
        yield
    except AssistantStoreError as exc:
        raise AssistantInternalError(str(exc), error=error) from exc


def upsert_assistant(store: AssistantStore, payload: schemas.AssistantRequest) -> schemas.UpsertResponse:
    """Crea o actualiza un asistente y describe la operación realizada."""
    name, response_text = validate_assistant_payload(payload)
    with _internal_errors("Error creating/updating assistant"):
        record, created = store.upsert(name, response_text)

    operation: schemas.Operation = "created" if created else "updated"
    log_event(logger, f"assistant.{operation}", assistant_name=name, assistant_id=record.id)
    return schemas.UpsertResponse(
        message=f"Assistant '{name}' {operation} successfully",
        operation=operation,
        assistant=schemas.AssistantOut.from_domain(record),
    )


def send_message(
    store: AssistantStore, name: str, payload: schemas.MessageRequest
) -> schemas.MessageResponse:
    """Devuelve el texto fijo del asistente; el mensaje sólo se refleja como contexto."""
    message = validate_message_payload(payload)
    with _internal_errors("Error processing message"):
        record = store.find_by_name(name)
    if record is None:
        log_event(logger, "assistant.not_found", assistant_name=name, operation="message")
        raise AssistantNotFoundError(
            name,
            f"Assistant with name '{name}' not found. "
            "Please create the assistant first or check the name spelling.",
        )

    log_event(logger, "assistant.message_sent", assistant_name=name, message_length=len(message))
    return schemas.MessageResponse(
        assistant_name=record.name,
        response=record.response_text,
        original_message=message,
        timestamp=utcnow(),
    )


def list_assistants(store: AssistantStore) -> list[schemas.AssistantOut]:
    with _internal_errors("Error retrieving assistants"):
        records = store.list_all()
    return [schemas.AssistantOut.from_domain(record) for record in records]


def get_assistant(store: AssistantStore, name: str) -> schemas.AssistantOut:
    with _internal_errors("Error retrieving assistant"):
        record = store.find_by_name(name)
    if record is None:
        log_event(logger, "assistant.not_found", assistant_name=name, operation="get")
        raise AssistantNotFoundError(name)
    return schemas.AssistantOut.from_domain(record)


def delete_assistant(store: AssistantStore, name: str) -> schemas.DeleteResponse:
    """Elimina el asistente; un segundo borrado del mismo nombre es 404."""
    try:
        with _internal_errors("Error deleting assistant"):
            record = store.delete_by_name(name)
    except AssistantNotFoundError:
        log_event(logger, "assistant.not_found", assistant_name=name, operation="delete")
        raise

    log_event(logger, "assistant.deleted", assistant_name=name, assistant_id=record.id)
    return schemas.DeleteResponse(
        message=f"Assistant '{name}' deleted successfully",
        assistant_name=name,
        timestamp=utcnow(),
    )


def health_snapshot(store: AssistantStore) -> schemas.HealthResponse:
    """Estado estático del servicio más el conteo vivo del store."""
    try:
        total = store.count()
    except AssistantStoreError as exc:
        raise HealthCheckError(str(exc)) from exc
    return schemas.HealthResponse(
        service=settings.service_name,
        version=settings.service_version,
        total_assistants=total,
        timestamp=utcnow(),
        endpoints=dict(ENDPOINTS),
    )
