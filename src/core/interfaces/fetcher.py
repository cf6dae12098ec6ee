"""Contrato del fetcher HTTP.

Por qué Protocol:
- Resolver y Materializer solo necesitan "haz un GET y dame status, headers
  y un body de una sola pasada"; no les importa que detrás haya httpx.
- Permite testear los servicios con fetchers falsos sin red.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class ResponseSnapshot:
    """Respuesta transitoria: se consume una sola vez y no se persiste.

    `headers` debe ser case-insensitive (p.ej. `httpx.Headers`).
    """

    status_code: int
    headers: Mapping[str, str]
    body: Iterator[bytes]

    @property
    def etag(self) -> str | None:
        return self.headers.get("etag") or None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type") or ""


@runtime_checkable
class ResourceFetcher(Protocol):
    """Ejecuta un único GET contra el recurso configurado.

    Reglas de diseño:
    - Un intento por llamada; sin reintentos.
    - El context manager cierra la respuesta al salir; el body no es válido
      fuera del bloque `with`.
    """

    def fetch(
        self, *, if_none_match: str | None = None
    ) -> AbstractContextManager[ResponseSnapshot]:
        ...
