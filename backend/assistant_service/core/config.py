"""Configuración central basada en variables de entorno."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Valores globales leídos desde `.env` o el entorno."""

    environment: str = "development"
    service_name: str = "Digital Assistant Service"
    service_version: str = "1.0.0"
    log_level: str | None = Field(
        default=None,
        description="Nivel de logging global (ej. debug, info, warning). Cuando no se define, usa un valor por ambiente.",
    )
    request_log_level: str = Field(
        default="info",
        description=(
            "Nivel mínimo para registrar solicitudes en middleware. "
            "Valores más altos (warning/error) reducen registros de peticiones exitosas."
        ),
    )
    request_log_skip_prefixes: tuple[str, ...] = Field(
        default=(
            "/client",
            "/favicon",
            "/docs",
            "/openapi",
        ),
        description="Prefijos de ruta para los que no se registrarán eventos de request.started/completed.",
    )
    log_file_path: str | None = Field(
        default=None,
        description="Archivo de log rotativo en formato JSON. Sin valor sólo se escribe a stderr.",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Orígenes permitidos para CORS; por defecto cualquier origen.",
    )
    client_enabled: bool = Field(
        default=True,
        description="Monta el cliente web estático en /client.",
    )
    model_config = SettingsConfigDict(env_file=".env", env_prefix="ASSISTANTS_", extra="allow")


settings = Settings()
