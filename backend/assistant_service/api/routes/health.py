"""Endpoint de salud con el conteo vivo de asistentes.

Debe registrarse antes del router de asistentes: de lo contrario
`GET /api/assistants/{name}` capturaría la ruta `/health`.
"""
from fastapi import APIRouter, Depends

from assistant_service.assistants import schemas, service
from assistant_service.assistants.deps import get_store
from assistant_service.assistants.store import AssistantStore

router = APIRouter(prefix="/api/assistants/health", tags=["health"])


@router.get(
    "",
    response_model=schemas.HealthResponse,
    responses={503: {"description": "El store no respondió; status DOWN"}},
    summary="Estado del servicio",
)
def healthcheck(store: AssistantStore = Depends(get_store)) -> schemas.HealthResponse:
    """Retorna el estado del servicio y `totalAssistants` según el store."""
    return service.health_snapshot(store)
