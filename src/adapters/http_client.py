"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, auth y logging de cada request.
- Traduce excepciones de httpx a la taxonomía de `core.errors`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager

import httpx

from core.config import AppSettings
from core.domain.models import ResourceSource
from core.errors import NetworkError, RequestConstructionError
from core.interfaces.fetcher import ResourceFetcher, ResponseSnapshot

logger = logging.getLogger(__name__)

# Fases que httpcore lee de `request.extensions["timeout"]`.
_TIMEOUT_PHASES = ("connect", "read", "write", "pool")
# Un timeout de 0 en httpcore significa "no esperar nada", no "sin límite".
_MIN_BUDGET = 0.001


def build_client(
    source: ResourceSource,
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` para un único recurso.

    Por qué un builder:
    - Centraliza timeout/headers/auth para que `check` e `in` se comporten igual.
    - Un cliente por invocación: no hay estado compartido entre procesos.
    """

    settings = settings or AppSettings()
    auth = None
    if source.basic_auth is not None:
        auth = httpx.BasicAuth(
            source.basic_auth.user,
            source.basic_auth.password.get_secret_value(),
        )
    return httpx.Client(
        timeout=httpx.Timeout(source.request_timeout(settings.default_timeout)),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        auth=auth,
        transport=transport,
    )


class HTTPFetcher(ResourceFetcher):
    """Un GET por llamada contra `source.url`, sin reintentos."""

    def __init__(
        self,
        source: ResourceSource,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._settings = settings or AppSettings()
        self._transport = transport
        self._clock = clock
        # Falla antes de tocar la red si el timeout no parsea.
        self._timeout = source.request_timeout(self._settings.default_timeout)
        self._url = _validate_url(source.url)

    @contextmanager
    def fetch(self, *, if_none_match: str | None = None) -> Iterator[ResponseSnapshot]:
        deadline = None if self._timeout is None else self._clock() + self._timeout

        with build_client(self._source, self._settings, transport=self._transport) as client:
            try:
                headers = httpx.Headers(self._source.header_items())
                if if_none_match:
                    headers["If-None-Match"] = if_none_match
                request = client.build_request("GET", self._url, headers=headers)
                if deadline is not None:
                    request.extensions["timeout"] = _RemainingBudget(deadline, self._clock)
            except (httpx.InvalidURL, ValueError, TypeError) as exc:
                raise RequestConstructionError(
                    "failed to create request",
                    context={"url": self._source.url},
                ) from exc

            logger.debug("GET %s (conditional=%s)", self._source.url, bool(if_none_match))
            try:
                response = client.send(request, stream=True)
            except httpx.TimeoutException as exc:
                raise self._timeout_error() from exc
            except httpx.HTTPError as exc:
                raise NetworkError(
                    "failed to perform request",
                    context={"url": self._source.url},
                ) from exc

            try:
                self._check_deadline(deadline)
                if response.status_code >= 400:
                    logger.warning(
                        "%s answered HTTP %s; using the body as-is",
                        self._source.url,
                        response.status_code,
                    )
                else:
                    logger.info("%s answered HTTP %s", self._source.url, response.status_code)
                yield ResponseSnapshot(
                    status_code=response.status_code,
                    headers=response.headers,
                    body=self._iter_body(response, deadline),
                )
            finally:
                response.close()

    def _iter_body(self, response: httpx.Response, deadline: float | None) -> Iterator[bytes]:
        try:
            for chunk in response.iter_bytes(chunk_size=self._settings.chunk_size):
                self._check_deadline(deadline)
                yield chunk
        except httpx.TimeoutException as exc:
            raise self._timeout_error() from exc
        except httpx.HTTPError as exc:
            raise NetworkError(
                "failed to read response body",
                context={"url": self._source.url},
            ) from exc

    def _check_deadline(self, deadline: float | None) -> None:
        if deadline is not None and self._clock() > deadline:
            raise self._timeout_error()

    def _timeout_error(self) -> NetworkError:
        return NetworkError(
            "request timed out",
            timed_out=True,
            hint="Increase `timeout` in the resource source.",
            context={"url": self._source.url, "timeout_seconds": f"{self._timeout}"},
        )


class _RemainingBudget(Mapping[str, float]):
    """Timeouts por fase calculados contra un único deadline.

    Por qué:
    - httpx aplica `timeout` a cada fase por separado (conectar, leer
      cabeceras...), así que el ciclo completo podría durar varias veces el
      valor configurado.
    - httpcore consulta la fase justo antes de usarla; cada consulta devuelve
      lo que queda del presupuesto en ese momento.
    - El body fija su timeout de lectura al empezar; `_iter_body` revisa el
      deadline entre chunks.
    """

    def __init__(self, deadline: float, clock: Callable[[], float]) -> None:
        self._deadline = deadline
        self._clock = clock

    def __getitem__(self, phase: str) -> float:
        if phase not in _TIMEOUT_PHASES:
            raise KeyError(phase)
        return max(self._deadline - self._clock(), _MIN_BUDGET)

    def __iter__(self) -> Iterator[str]:
        return iter(_TIMEOUT_PHASES)

    def __len__(self) -> int:
        return len(_TIMEOUT_PHASES)


def _validate_url(raw: str) -> httpx.URL:
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as exc:
        raise RequestConstructionError(
            "failed to create request: malformed url",
            context={"url": raw},
        ) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise RequestConstructionError(
            "failed to create request: url must be absolute http(s)",
            context={"url": raw},
        )
    return url
