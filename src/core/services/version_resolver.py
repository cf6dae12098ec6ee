"""Resolución de versiones (`check`).

Decide si el recurso cambió respecto a la última versión conocida:
- Con tag previo, el GET va condicionado (`If-None-Match`) y un 304 corta.
- Si el servidor manda `ETag`, se compara por tag (aunque la versión previa
  fuese por hash).
- Sin `ETag`, se hashea el body completo en streaming (SHA-1).
"""

from __future__ import annotations

import logging

from core.domain.models import ETagVersion, SHA1Version, Version, VersionPin, as_pin
from core.interfaces.fetcher import ResourceFetcher
from core.streaming import sha1_hexdigest

logger = logging.getLogger(__name__)

HTTP_NOT_MODIFIED = 304


class VersionResolver:
    """Calcula la lista de versiones que el orquestador debe considerar conocidas."""

    def __init__(self, fetcher: ResourceFetcher) -> None:
        self._fetcher = fetcher

    def check(
        self, previous: Version | VersionPin | None = None
    ) -> list[Version | VersionPin]:
        """Devuelve las versiones conocidas, de la más antigua a la más nueva.

        La versión previa siempre encabeza la lista: el orquestador nunca debe
        ver "desaparecer" una versión ya reconocida.
        """

        versions: list[Version | VersionPin] = [previous] if previous is not None else []
        known = as_pin(previous)
        previous_etag = known.etag
        previous_sha1 = known.sha1

        with self._fetcher.fetch(if_none_match=previous_etag) as response:
            if response.status_code == HTTP_NOT_MODIFIED:
                logger.info("Not modified since etag %s", previous_etag)
                return versions

            current: Version
            etag = response.etag
            if etag:
                # Servidores que ignoran If-None-Match y responden 200 igual.
                if etag == previous_etag:
                    logger.info("Same etag %s returned with HTTP %s", etag, response.status_code)
                    return versions
                current = ETagVersion(etag=etag)
            else:
                digest = sha1_hexdigest(response.body)
                if digest == previous_sha1:
                    logger.info("Content unchanged (sha1 %s)", digest)
                    return versions
                current = SHA1Version(sha1=digest)

        logger.info("New version detected: %s", current.to_payload())
        versions.append(current)
        return versions
