"""Modelo de dominio de un asistente registrado."""

from dataclasses import dataclass
from datetime import datetime

NAME_MAX_LENGTH = 100
RESPONSE_TEXT_MAX_LENGTH = 1000
MESSAGE_MAX_LENGTH = 500


@dataclass(frozen=True, slots=True)
class Assistant:
    """Snapshot inmutable de un asistente; el store entrega copias, nunca el estado interno."""

    id: int
    name: str
    response_text: str
    created_at: datetime
    updated_at: datetime
