"""Logging para la CLI (Rich).

Por qué stderr:
- stdout está reservado para el JSON que lee el orquestador; cualquier log
  ahí rompería el protocolo.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Instala un `RichHandler` sobre stderr en el logger raíz."""

    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        rich_tracebacks=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
    # httpx loguea cada request en INFO; lo dejamos en WARNING.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
