"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El payload del orquestador llega como JSON arbitrario; validarlo aquí evita
  que un campo mal formado llegue a la capa HTTP.

Nota:
- Estos modelos describen *qué* es un recurso y una versión, no *cómo* se
  obtienen.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator
from pydantic.config import ConfigDict

from core.duration import parse_duration
from core.errors import ConfigurationError


class BasicAuth(BaseModel):
    """Credenciales HTTP Basic (un único par usuario/contraseña)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    user: str = Field(..., description="Usuario para HTTP Basic auth.")
    password: SecretStr = Field(..., description="Contraseña (nunca se loguea).")


class ResourceSource(BaseModel):
    """Descriptor inmutable del recurso remoto.

    Por qué existe:
    - Es la configuración compartida por `check` e `in`; el fetcher la recibe
      en el constructor en vez de leer defaults globales.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        description="URL del recurso a observar/descargar.",
    )
    timeout: str | None = Field(
        default=None,
        description="Timeout del ciclo request/response (duración estilo Go).",
    )
    headers: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Headers extra por request (nombre -> valores en orden).",
    )
    basic_auth: BasicAuth | None = Field(
        default=None,
        description="Credenciales HTTP Basic opcionales.",
    )

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_header_values(cls, value: Any) -> Any:
        # Aceptamos `{"X-Foo": "bar"}` además de `{"X-Foo": ["bar"]}`.
        if isinstance(value, Mapping):
            return {k: [v] if isinstance(v, str) else v for k, v in value.items()}
        return value

    def request_timeout(self, default: str) -> float | None:
        """Timeout en segundos; `None` significa sin límite (`"0"`)."""

        raw = self.timeout or default
        try:
            seconds = parse_duration(raw)
        except ConfigurationError as exc:
            raise ConfigurationError(
                "failed to parse timeout",
                context={"timeout": raw},
            ) from exc
        if seconds < 0:
            raise ConfigurationError(
                "timeout must not be negative",
                context={"timeout": raw},
            )
        return seconds or None

    def header_items(self) -> list[tuple[str, str]]:
        """Headers aplanados como pares, preservando valores repetidos."""

        return [(name, value) for name, values in self.headers.items() for value in values]


class ETagVersion(BaseModel):
    """Versión identificada por el tag opaco del servidor."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    etag: str = Field(..., min_length=1, description="ETag tal cual lo envía el servidor.")

    def to_payload(self) -> dict[str, str]:
        return {"etag": self.etag}


class SHA1Version(BaseModel):
    """Versión identificada por el SHA-1 del contenido."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sha1: str = Field(
        ...,
        pattern=r"^[0-9a-fA-F]{40}$",
        description="Digest SHA-1 (hex, 40 caracteres) de los bytes exactos del body.",
    )

    @field_validator("sha1")
    @classmethod
    def _lowercase(cls, value: str) -> str:
        return value.lower()

    def to_payload(self) -> dict[str, str]:
        return {"sha1": self.sha1}


# Una versión nueva es exactamente una de las dos; `None` = desconocida.
Version = Union[ETagVersion, SHA1Version]


class VersionPin(BaseModel):
    """Versión recibida del orquestador (previa en `check`, esperada en `in`).

    Por qué un modelo aparte:
    - El resultado de `in` reporta etag y sha1 a la vez, y esa versión puede
      volver como entrada. Ambas claves se conservan y se comparan.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    etag: str | None = Field(default=None, description="ETag conocido, si lo hay.")
    sha1: str | None = Field(
        default=None,
        pattern=r"^[0-9a-fA-F]{40}$",
        description="SHA-1 conocido, si lo hay.",
    )

    @field_validator("etag", "sha1", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        return value or None

    @field_validator("sha1")
    @classmethod
    def _lowercase(cls, value: str | None) -> str | None:
        return value.lower() if value else value

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


def parse_version(payload: Mapping[str, Any] | None) -> VersionPin | None:
    """Convierte el mapping del orquestador en un `VersionPin` (o `None`).

    Sin `etag` ni `sha1` no hay versión conocida.
    """

    if not payload:
        return None
    try:
        pin = VersionPin.model_validate(dict(payload))
    except ValidationError as exc:
        raise ConfigurationError(
            "invalid version payload",
            context={"version": repr(dict(payload))},
        ) from exc
    if pin.etag is None and pin.sha1 is None:
        return None
    return pin


def as_pin(version: Version | VersionPin | None) -> VersionPin:
    """Vista uniforme (etag?, sha1?) de cualquier versión conocida."""

    if version is None:
        return VersionPin()
    if isinstance(version, VersionPin):
        return version
    if isinstance(version, ETagVersion):
        return VersionPin(etag=version.etag)
    return VersionPin(sha1=version.sha1)


class ObservedVersion(BaseModel):
    """Todo lo observado al materializar: tag (si hubo) + digest."""

    model_config = ConfigDict(frozen=True)

    etag: str | None = None
    sha1: str

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class MetadataField(BaseModel):
    name: str
    value: str


class InResult(BaseModel):
    """Resultado de `in`: versión observada + metadata auxiliar."""

    version: ObservedVersion
    metadata: list[MetadataField] = Field(default_factory=list)
