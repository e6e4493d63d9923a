"""Registro en memoria de asistentes indexado por nombre único."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta

from assistant_service.core.errors import AssistantNotFoundError, utcnow
from assistant_service.core.logging import get_logger

from .models import Assistant

logger = get_logger(__name__)

Clock = Callable[[], datetime]

_TICK = timedelta(microseconds=1)


class AssistantStoreError(RuntimeError):
    """Falla interna del store distinta de "no encontrado"."""


class AssistantStore:
    """Tabla de asistentes protegida por un único lock.

    Todas las operaciones, lecturas incluidas, toman el mismo `RLock`, por lo
    que cada llamada observa un estado consistente. Los registros expuestos son
    dataclasses congeladas: una actualización reemplaza el snapshot completo en
    vez de mutarlo.

    Si un `delete_by_name` compite con un `upsert` del mismo nombre gana el
    último en adquirir el lock.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._records: dict[str, Assistant] = {}
        self._ids = itertools.count(1)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except AssistantNotFoundError:
                raise
            except Exception as exc:
                logger.exception("store.failure", extra={"operation": operation})
                raise AssistantStoreError(f"Store failure during {operation}") from exc

    def upsert(self, name: str, response_text: str) -> tuple[Assistant, bool]:
        """Crea o actualiza el asistente `name`.

        Retorna el snapshot resultante y `True` si el registro fue creado. La
        verificación de existencia ocurre dentro de la misma sección crítica
        que la escritura.
        """
        with self._guard("upsert"):
            now = self._clock()
            current = self._records.get(name)
            if current is None:
                record = Assistant(
                    id=next(self._ids),
                    name=name,
                    response_text=response_text,
                    created_at=now,
                    updated_at=now,
                )
                self._records[name] = record
                return record, True

            record = replace(
                current,
                response_text=response_text,
                updated_at=max(now, current.updated_at + _TICK),
            )
            self._records[name] = record
            return record, False

    def find_by_name(self, name: str) -> Assistant | None:
        with self._guard("find_by_name"):
            return self._records.get(name)

    def exists_by_name(self, name: str) -> bool:
        with self._guard("exists_by_name"):
            return name in self._records

    def delete_by_name(self, name: str) -> Assistant:
        """Elimina el asistente y retorna el último snapshot.

        Raises:
            AssistantNotFoundError: si `name` no está registrado.
        """
        with self._guard("delete_by_name"):
            try:
                return self._records.pop(name)
            except KeyError:
                raise AssistantNotFoundError(
                    name,
                    f"Cannot delete assistant '{name}' because it doesn't exist. "
                    "Please check the name spelling.",
                ) from None

    def list_all(self) -> list[Assistant]:
        """Asistentes ordenados del más reciente al más antiguo."""
        with self._guard("list_all"):
            return sorted(
                self._records.values(),
                key=lambda record: (record.created_at, record.id),
                reverse=True,
            )

    def count(self) -> int:
        with self._guard("count"):
            return len(self._records)

    def clear(self) -> None:
        with self._guard("clear"):
            self._records.clear()
