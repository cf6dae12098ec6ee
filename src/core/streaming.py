"""Tee en streaming: una sola lectura del body, varios destinos.

Idea:
- El body de la respuesta se lee una vez. Para guardar el fichero y calcular
  el SHA-1 a la vez, componemos sinks (fichero + hash) detrás de un
  `FanOutWriter`; la memoria queda acotada al tamaño de cada chunk.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from typing import Protocol


class ByteSink(Protocol):
    def write(self, data: bytes, /) -> object:
        ...


class _Hasher(Protocol):
    def update(self, data: bytes, /) -> None:
        ...

    def hexdigest(self) -> str:
        ...


class HashSink:
    """Adapta un objeto `hashlib` a la interfaz `write`."""

    def __init__(self, hasher: _Hasher | None = None) -> None:
        self._hasher = hasher if hasher is not None else hashlib.sha1()  # nosec - identidad, no seguridad

    def write(self, data: bytes) -> int:
        self._hasher.update(data)
        return len(data)

    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


class FanOutWriter:
    """Reenvía cada bloque a todos los sinks, en orden."""

    def __init__(self, *sinks: ByteSink) -> None:
        self._sinks = sinks

    def write(self, data: bytes) -> int:
        for sink in self._sinks:
            sink.write(data)
        return len(data)


def copy_chunks(chunks: Iterable[bytes], writer: ByteSink) -> int:
    """Copia todos los chunks al writer y devuelve los bytes copiados."""

    total = 0
    for chunk in chunks:
        if chunk:
            writer.write(chunk)
            total += len(chunk)
    return total


def sha1_hexdigest(chunks: Iterable[bytes]) -> str:
    sink = HashSink()
    copy_chunks(chunks, sink)
    return sink.hexdigest()
