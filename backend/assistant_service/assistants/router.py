"""Endpoints CRUD del registro de asistentes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from . import schemas, service
from .deps import get_store, require_json_content
from .store import AssistantStore

router = APIRouter(prefix="/api/assistants", tags=["assistants"])

_ERRORS = {
    400: {"model": schemas.ErrorResponse, "description": "Validación fallida o error interno"},
    404: {"model": schemas.ErrorResponse, "description": "Asistente inexistente"},
    415: {"model": schemas.ErrorResponse, "description": "Content-Type distinto de JSON"},
}


@router.post(
    "",
    response_model=schemas.UpsertResponse,
    responses={201: {"model": schemas.UpsertResponse}, 400: _ERRORS[400], 415: _ERRORS[415]},
    summary="Crea o actualiza un asistente",
    dependencies=[Depends(require_json_content)],
)
@router.post(
    "/",
    response_model=schemas.UpsertResponse,
    include_in_schema=False,
    dependencies=[Depends(require_json_content)],
)
def upsert_assistant(
    payload: schemas.AssistantRequest,
    response: Response,
    store: AssistantStore = Depends(get_store),
) -> schemas.UpsertResponse:
    """Responde 201 cuando el nombre era nuevo y 200 cuando se actualizó."""
    result = service.upsert_assistant(store, payload)
    if result.operation == "created":
        response.status_code = status.HTTP_201_CREATED
    return result


@router.get("", response_model=list[schemas.AssistantOut], summary="Lista asistentes")
@router.get("/", response_model=list[schemas.AssistantOut], include_in_schema=False)
def list_assistants(store: AssistantStore = Depends(get_store)) -> list[schemas.AssistantOut]:
    """Todos los asistentes, del más reciente al más antiguo. Una lista vacía no es error."""
    return service.list_assistants(store)


@router.post(
    "/{name:path}/message",
    response_model=schemas.MessageResponse,
    responses={k: _ERRORS[k] for k in (400, 404, 415)},
    summary="Envía un mensaje a un asistente",
    dependencies=[Depends(require_json_content)],
)
def send_message(
    name: str,
    payload: schemas.MessageRequest,
    store: AssistantStore = Depends(get_store),
) -> schemas.MessageResponse:
    """Devuelve la respuesta fija del asistente junto al mensaje original."""
    return service.send_message(store, name, payload)


@router.get(
    "/{name:path}",
    response_model=schemas.AssistantOut,
    responses={404: _ERRORS[404]},
    summary="Obtiene un asistente por nombre",
)
def get_assistant(name: str, store: AssistantStore = Depends(get_store)) -> schemas.AssistantOut:
    return service.get_assistant(store, name)


@router.delete(
    "/{name:path}",
    response_model=schemas.DeleteResponse,
    responses={404: _ERRORS[404]},
    summary="Elimina un asistente",
)
def delete_assistant(name: str, store: AssistantStore = Depends(get_store)) -> schemas.DeleteResponse:
    return service.delete_assistant(store, name)
