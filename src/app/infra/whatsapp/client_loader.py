"""Carregamento da factory do cliente de protocolo por import path.

O core não implementa o protocolo WhatsApp. A implementação concreta
é um callable referenciado como "pacote.modulo:callable" em
WHATSAPP_CLIENT_FACTORY; chamado sem argumentos, ele deve devolver
uma WhatsAppClientFactory.
"""

from __future__ import annotations

import importlib
import logging

from app.protocols.whatsapp_client import WhatsAppClientFactory
from utils.errors import ClientFactoryNotConfiguredError

logger = logging.getLogger(__name__)


def load_client_factory(import_path: str) -> WhatsAppClientFactory:
    """Importa e instancia a factory do cliente.

    Args:
        import_path: "modulo:callable"

    Returns:
        Factory pronta para abrir conexões

    Raises:
        ClientFactoryNotConfiguredError: Path vazio, malformado ou que não
            resolve para uma WhatsAppClientFactory
    """
    module_name, sep, attr = (import_path or "").partition(":")
    if not sep or not module_name or not attr:
        raise ClientFactoryNotConfiguredError(
            "WHATSAPP_CLIENT_FACTORY deve ter o formato 'modulo:callable'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ClientFactoryNotConfiguredError(
            f"Módulo da factory não encontrado: {module_name}"
        ) from exc

    target = getattr(module, attr, None)
    if target is None or not callable(target):
        raise ClientFactoryNotConfiguredError(
            f"Callable da factory não encontrado: {import_path}"
        )

    factory = target()
    if not isinstance(factory, WhatsAppClientFactory):
        raise ClientFactoryNotConfiguredError(
            f"{import_path} não retornou uma WhatsAppClientFactory"
        )

    logger.info("whatsapp_client_factory_loaded", extra={"factory": import_path})
    return factory
