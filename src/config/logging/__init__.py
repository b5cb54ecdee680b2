"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="instancias_whatsapp")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("instance_connected", extra={"session_id": "loja1"})

Campos obrigatórios em todo log JSON:
- correlation_id
- service
- level
- logger
- message
- asctime

Nunca logar número de telefone, JID ou conteúdo de mensagem.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
    create_text_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "create_text_formatter",
    "get_logger",
]
