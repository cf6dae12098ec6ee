"""CLI del recurso (Typer).

Tres comandos, uno por operación del orquestador:
- `check`: ¿hay una versión nueva?
- `in <dir>`: descarga y verifica.
- `out <dir>`: no soportado (siempre falla).

El payload llega por stdin, el resultado sale por stdout como JSON y los
logs/errores van a stderr. Exit code 1 ante cualquier fallo.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from adapters.concourse import (
    CheckRequest,
    InRequest,
    parse_request,
    render_check,
    render_in,
)
from adapters.http_client import HTTPFetcher
from cli.logging_setup import configure_logging, stderr_console
from core.config import AppSettings
from core.errors import HttpResourceError
from core.services.materializer import ContentMaterializer
from core.services.publisher import Publisher
from core.services.version_resolver import VersionResolver

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Track and download a remote HTTP resource (check / in / out).",
)

logger = logging.getLogger(__name__)


def _settings() -> AppSettings:
    settings = AppSettings()
    configure_logging(settings.log_level)
    return settings


def _fail(exc: HttpResourceError) -> typer.Exit:
    stderr_console.print(f"[red]error[/red] {escape(f'[{exc.code}]')}", highlight=False)
    stderr_console.print(str(exc), markup=False, highlight=False)
    return typer.Exit(code=1)


@app.command()
def check() -> None:
    """Report versions of the resource, oldest first."""

    settings = _settings()
    try:
        request = parse_request(sys.stdin.read(), CheckRequest)
        previous = request.previous_version()
        fetcher = HTTPFetcher(request.source, settings)
        logger.info("Checking %s", request.source.url)
        versions = VersionResolver(fetcher).check(previous)
    except HttpResourceError as exc:
        raise _fail(exc) from exc

    typer.echo(render_check(versions))


@app.command(name="in")
def in_(
    directory: Path = typer.Argument(..., help="Working directory for the download."),
) -> None:
    """Download the resource into DIRECTORY and verify its version."""

    settings = _settings()
    try:
        request = parse_request(sys.stdin.read(), InRequest)
        expected = request.expected_version()
        fetcher = HTTPFetcher(request.source, settings)
        logger.info("Fetching %s into %s", request.source.url, directory)
        result = ContentMaterializer(fetcher, settings, url=request.source.url).materialize(
            expected, directory
        )
    except HttpResourceError as exc:
        raise _fail(exc) from exc

    typer.echo(render_in(result))


@app.command()
def out(
    directory: Optional[Path] = typer.Argument(None, help="Working directory (unused)."),
) -> None:
    """Publishing is not supported; always fails."""

    _settings()
    try:
        Publisher().publish()
    except HttpResourceError as exc:
        raise _fail(exc) from exc


def run() -> None:
    app()
