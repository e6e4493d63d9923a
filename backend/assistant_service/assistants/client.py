"""Cliente HTTP asíncrono para el API de asistentes."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from assistant_service.core.errors import AssistantNotFoundError, AssistantValidationError
from assistant_service.core.logging import get_logger

from . import schemas

logger = get_logger(__name__)

API_PREFIX = "/api/assistants"


class AssistantClientError(RuntimeError):
    """Errores del cliente que no corresponden a validación ni a 404."""


class ServiceUnreachableError(AssistantClientError):
    """No hubo respuesta del servicio (DNS, conexión rechazada, timeout)."""


class AssistantServiceError(AssistantClientError):
    """El servicio respondió con un status inesperado."""

    def __init__(self, status_code: int, payload: dict[str, Any] | None) -> None:
        detail = (payload or {}).get("details") or (payload or {}).get("error") or "unexpected response"
        super().__init__(f"Assistant service error (status={status_code}): {detail}")
        self.status_code = status_code
        self.payload = payload or {}


def _path(name: str, *suffix: str) -> str:
    parts = [API_PREFIX, quote(name, safe=""), *suffix]
    return "/".join(parts)


class AssistantClient:
    """Envuelve `httpx.AsyncClient` con el contrato del registro.

    Acepta un `transport` explícito para pruebas (`httpx.ASGITransport` o
    `httpx.MockTransport`).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> AssistantClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, *, json: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.RequestError as exc:
            msg = f"Cannot reach the assistant service at {self.base_url}: {exc}"
            logger.warning("client.unreachable", extra={"url": url, "error": str(exc)})
            raise ServiceUnreachableError(msg) from exc

        if response.status_code < 400:
            return response

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = None

        if response.status_code == 404 and payload and payload.get("assistantName") is not None:
            raise AssistantNotFoundError(payload["assistantName"], payload.get("details"))
        if response.status_code == 400 and payload and payload.get("validationErrors"):
            raise AssistantValidationError(payload["validationErrors"])
        raise AssistantServiceError(response.status_code, payload)

    async def upsert(self, name: str, response_text: str) -> tuple[schemas.AssistantOut, bool]:
        """Crea o actualiza; retorna el registro y si fue creado."""
        response = await self._request(
            "POST", API_PREFIX, json={"name": name, "responseText": response_text}
        )
        result = schemas.UpsertResponse.model_validate(response.json())
        return result.assistant, result.operation == "created"

    async def send_message(self, name: str, message: str) -> schemas.MessageResponse:
        response = await self._request("POST", _path(name, "message"), json={"message": message})
        return schemas.MessageResponse.model_validate(response.json())

    async def list_assistants(self) -> list[schemas.AssistantOut]:
        response = await self._request("GET", API_PREFIX)
        return [schemas.AssistantOut.model_validate(item) for item in response.json()]

    async def get(self, name: str) -> schemas.AssistantOut:
        response = await self._request("GET", _path(name))
        return schemas.AssistantOut.model_validate(response.json())

    async def delete(self, name: str) -> schemas.DeleteResponse:
        response = await self._request("DELETE", _path(name))
        return schemas.DeleteResponse.model_validate(response.json())

    async def health(self) -> schemas.HealthResponse:
        response = await self._request("GET", f"{API_PREFIX}/health")
        return schemas.HealthResponse.model_validate(response.json())
