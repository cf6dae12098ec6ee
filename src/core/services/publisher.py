"""Operación `out` (publicar).

No soportada: existe solo para completar el contrato de tres operaciones del
orquestador. Siempre falla, nunca es un no-op silencioso.
"""

from __future__ import annotations

from core.errors import UnimplementedError


class Publisher:
    def publish(self) -> None:
        raise UnimplementedError("not implemented")
