"""Parser de duraciones estilo Go (`5m`, `1h30m`, `1.5s`, `250ms`).

Por qué:
- El payload del recurso expresa `timeout` con la misma sintaxis que el
  orquestador; la convertimos a segundos (float) para httpx.
"""

from __future__ import annotations

import re

from core.errors import ConfigurationError

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # µ (micro sign)
    "μs": 1e-6,  # μ (greek mu)
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

# "ms" va antes que "m" para que la alternancia no corte "5ms" en "5m".
_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Devuelve la duración en segundos.

    Reglas:
    - Secuencia de `<número><unidad>` sin separadores, con signo opcional.
    - `"0"` es la única cifra aceptada sin unidad.
    - Cualquier otra cosa -> `ConfigurationError`.
    """

    raw = text.strip()
    sign = 1.0
    if raw[:1] in ("+", "-"):
        sign = -1.0 if raw[0] == "-" else 1.0
        raw = raw[1:]

    if raw == "0":
        return 0.0
    if not raw:
        raise _invalid(text)

    total = 0.0
    pos = 0
    while pos < len(raw):
        match = _COMPONENT.match(raw, pos)
        if match is None:
            raise _invalid(text)
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    return sign * total


def _invalid(text: str) -> ConfigurationError:
    return ConfigurationError(
        f"invalid duration {text!r}",
        hint="Use Go duration syntax, e.g. '30s', '5m' or '1h30m'.",
    )
