"""Adaptadores concretos: cliente HTTP (httpx) y envelope JSON del orquestador."""
