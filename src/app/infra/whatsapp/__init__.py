"""Integração com o cliente de protocolo WhatsApp."""

from app.infra.whatsapp.client_loader import load_client_factory

__all__ = ["load_client_factory"]
