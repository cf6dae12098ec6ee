"""Envelope JSON del orquestador (estilo Concourse).

Por qué un adaptador:
- El Core trabaja con `ResourceSource`/`Version`; el framing del payload
  (stdin/stdout, nombres de campos) es cosa del borde.

Formato:
- check: `{"source": {...}, "version": {...}|null}` -> `[{...}, ...]`
- in:    `{"source": {...}, "version": {...}, "params": {...}}`
         -> `{"version": {...}, "metadata": [{"name": ..., "value": ...}]}`
- out:   siempre error, no se lee el payload
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.domain.models import InResult, ResourceSource, Version, VersionPin, parse_version
from core.errors import ConfigurationError


class CheckRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: ResourceSource
    version: dict[str, Any] | None = None

    def previous_version(self) -> VersionPin | None:
        return parse_version(self.version)


class InRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: ResourceSource
    version: dict[str, Any] | None = None
    params: dict[str, Any] = Field(default_factory=dict)

    def expected_version(self) -> VersionPin | None:
        return parse_version(self.version)


_RequestT = TypeVar("_RequestT", bound=BaseModel)


def parse_request(raw: str, model: type[_RequestT]) -> _RequestT:
    """Valida el payload leído de stdin; cualquier fallo es de configuración."""

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError("failed to decode request payload as JSON") from exc
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            "invalid request payload",
            hint="Expected an object with at least `source.url`.",
        ) from exc


def render_check(versions: Sequence[Version | VersionPin]) -> str:
    return json.dumps([v.to_payload() for v in versions])


def render_in(result: InResult) -> str:
    payload = {
        "version": result.version.to_payload(),
        "metadata": [m.model_dump() for m in result.metadata],
    }
    return json.dumps(payload)
