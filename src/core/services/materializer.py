"""Materialización del recurso (`in`).

Descarga el body a `<directory>/<download_filename>` y verifica que coincide
con la versión esperada.

Reglas:
- GET incondicional: siempre se trae el body actual.
- Tag esperado distinto del recibido (o ausente) -> falla sin escribir nada.
- Body escrito y hasheado en la misma pasada (fichero temporal + SHA-1).
- SHA-1 esperado distinto -> falla y el temporal se borra.
- Solo una descarga verificada se renombra al nombre final.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from core.config import AppSettings
from core.domain.models import (
    InResult,
    MetadataField,
    ObservedVersion,
    Version,
    VersionPin,
    as_pin,
)
from core.errors import IntegrityMismatchError, StorageError
from core.interfaces.fetcher import ResourceFetcher
from core.streaming import FanOutWriter, HashSink, copy_chunks

logger = logging.getLogger(__name__)


class ContentMaterializer:
    """Descarga + verificación de identidad del recurso."""

    def __init__(
        self,
        fetcher: ResourceFetcher,
        settings: AppSettings | None = None,
        *,
        url: str | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._settings = settings or AppSettings()
        self._url = url

    def materialize(
        self, expected: Version | VersionPin | None, directory: str | Path
    ) -> InResult:
        """Descarga a `directory` y valida contra `expected` (etag y/o sha1)."""

        destination = Path(directory) / self._settings.download_filename
        pinned = as_pin(expected)
        expected_etag = pinned.etag
        expected_sha1 = pinned.sha1

        with self._fetcher.fetch() as response:
            etag = response.etag
            if expected_etag and etag != expected_etag:
                raise IntegrityMismatchError(
                    field="etag",
                    expected=expected_etag,
                    observed=etag,
                    url=self._url,
                )

            content_type = response.content_type
            digest, size = self._download(response.body, destination)

        try:
            if expected_sha1 and digest != expected_sha1:
                raise IntegrityMismatchError(
                    field="sha1",
                    expected=expected_sha1,
                    observed=digest,
                    url=self._url,
                )
            _promote(_partial_path(destination), destination)
        except BaseException:
            _partial_path(destination).unlink(missing_ok=True)
            raise

        logger.info("Downloaded %d bytes to %s (sha1 %s)", size, destination, digest)
        return InResult(
            version=ObservedVersion(etag=etag, sha1=digest),
            metadata=[MetadataField(name="content-type", value=content_type)],
        )

    def _download(self, body: Iterable[bytes], destination: Path) -> tuple[str, int]:
        """Escribe el body en el temporal y devuelve `(sha1, bytes)`."""

        partial = _partial_path(destination)
        hasher = HashSink()
        try:
            try:
                handle = partial.open("wb")
            except OSError as exc:
                raise StorageError(
                    "failed to create file for the download",
                    context={"path": str(partial)},
                ) from exc
            with handle:
                try:
                    size = copy_chunks(body, FanOutWriter(handle, hasher))
                except OSError as exc:
                    raise StorageError(
                        "failed to write out download",
                        context={"path": str(partial)},
                    ) from exc
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
        return hasher.hexdigest(), size


def _partial_path(destination: Path) -> Path:
    return destination.with_name(f".{destination.name}.part")


def _promote(partial: Path, destination: Path) -> None:
    try:
        os.replace(partial, destination)
    except OSError as exc:
        raise StorageError(
            "failed to move download into place",
            context={"path": str(destination)},
        ) from exc
