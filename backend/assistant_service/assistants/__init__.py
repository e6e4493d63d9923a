"""Registro de asistentes: store, validación y rutas HTTP."""
