"""Configuración de logging estructurado para el servicio de asistentes."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5


class JSONFormatter(logging.Formatter):
    """Formatter que serializa los registros como JSON."""

    _RESERVED = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in self._RESERVED:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # default=str cubre datetimes u otros valores no serializables en `extra`.
        return json.dumps(payload, ensure_ascii=False, default=str)


def _rotating_handler(path: Path) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(JSONFormatter())
    return handler


def configure_logging(
    level: int = logging.INFO,
    *,
    log_file: str | None = None,
    per_logger_files: dict[str, str] | None = None,
) -> None:
    """Configura logging estructurado con formato JSON.

    Limpia los handlers previos del logger raíz, por lo que puede invocarse
    varias veces (una por cada app construida) sin duplicar registros.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    if log_file:
        try:
            root_logger.addHandler(_rotating_handler(Path(log_file)))
        except OSError:
            root_logger.exception(
                "No fue posible iniciar el handler de archivo", extra={"log_file": log_file}
            )

    for logger_name, file_path in (per_logger_files or {}).items():
        target_logger = logging.getLogger(logger_name)
        for existing in list(target_logger.handlers):
            if isinstance(existing, RotatingFileHandler):
                target_logger.removeHandler(existing)
                existing.close()
        try:
            target_logger.addHandler(_rotating_handler(Path(file_path)))
        except OSError:
            root_logger.exception(
                "No fue posible iniciar el handler dedicado",
                extra={"logger": logger_name, "file": file_path},
            )


def resolve_log_level(value: str | int | None, *, default: int = logging.INFO) -> int:
    """Convierte valores configurables a constantes numéricas de logging."""
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return default
        if candidate.isdigit():
            return int(candidate)
        mapped = logging.getLevelName(candidate.upper())
        if isinstance(mapped, int):
            return mapped
    return default


def get_logger(name: str) -> logging.Logger:
    """Retorna un logger hijo con el nombre solicitado."""
    return logging.getLogger(name)


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **extra: Any) -> None:
    """Helper para enviar eventos con campos adicionales en formato JSON."""
    if extra:
        logger.log(level, message, extra=extra)
    else:
        logger.log(level, message)
