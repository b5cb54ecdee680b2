"""Rotas HTTP das instâncias WhatsApp (/api/whatsapp)."""

from api.routes.instancias.router import router

__all__ = ["router"]
