"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from adapters.http_client import HTTPFetcher
from core.config import AppSettings
from core.domain.models import ResourceSource

URL = "https://example.com/artifact.bin"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> AppSettings:
    # Chunks pequeños para ejercitar el streaming por bloques.
    return AppSettings(chunk_size=3, log_level="WARNING")


@pytest.fixture
def make_fetcher(settings: AppSettings) -> Callable[..., HTTPFetcher]:
    """Build an `HTTPFetcher` backed by `httpx.MockTransport`."""

    def _make(handler: Handler, **source: Any) -> HTTPFetcher:
        source.setdefault("url", URL)
        return HTTPFetcher(
            ResourceSource.model_validate(source),
            settings,
            transport=httpx.MockTransport(handler),
        )

    return _make
