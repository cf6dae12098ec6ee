"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/envelope) lean config de forma consistente.

Nota:
- La configuración *por recurso* (url, headers, auth) llega en el payload del
  orquestador (`ResourceSource`); aquí solo viven defaults del proceso.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTP_RESOURCE_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    default_timeout: str = Field(
        default="5m",
        min_length=1,
        description="Timeout por defecto (duración estilo Go) si el source no define uno.",
    )
    user_agent: str = Field(
        default="http-resource/0.1",
        min_length=1,
        description="User-Agent enviado en cada request.",
    )
    download_filename: str = Field(
        default="downloaded",
        min_length=1,
        description="Nombre fijo del fichero descargado dentro del directorio de trabajo.",
    )
    chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Tamaño de bloque (bytes) al leer el body en streaming.",
    )
    log_level: str = Field(
        default="INFO",
        min_length=1,
        description="Nivel de logging (DEBUG, INFO, WARNING...).",
    )
