"""Servicios del Core (check / in / out)."""
