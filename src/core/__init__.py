"""Core del recurso: configuración, errores, dominio y servicios.

No depende de la CLI ni del envelope del orquestador.
"""
