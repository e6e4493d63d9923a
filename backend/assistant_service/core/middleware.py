"""Middlewares personalizados para el servicio de asistentes."""

from __future__ import annotations

import time
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from assistant_service.core.config import settings
from assistant_service.core.logging import get_logger, resolve_log_level

logger = get_logger("assistant_service.request")


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Registra información básica de cada request entrante y asigna `x-request-id`."""

    def __init__(self, app, *, skip_prefixes: tuple[str, ...] | None = None, level: str | None = None):
        super().__init__(app)
        self._skip_prefixes = tuple(
            settings.request_log_skip_prefixes if skip_prefixes is None else skip_prefixes
        )
        self._level = resolve_log_level(level or settings.request_log_level)

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(prefix) for prefix in self._skip_prefixes)

    async def dispatch(self, request: Request, call_next):
        request_id = uuid4().hex
        start = time.perf_counter()
        path = request.url.path
        client_ip = _client_ip(request)
        should_log = self._should_log(path)

        if should_log:
            logger.log(
                self._level,
                "request.started",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "client_ip": client_ip,
                    "user_agent": request.headers.get("user-agent"),
                },
            )

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "request.failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        response.headers["x-request-id"] = request_id

        if should_log:
            logger.log(
                self._level,
                "request.completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                },
            )

        return response
