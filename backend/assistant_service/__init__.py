"""Registro HTTP de asistentes con respuesta fija."""

__version__ = "1.0.0"
