"""Payload builders — conteúdo de mensagens no formato do cliente de protocolo.

Estrutura:
- whatsapp/: texto, texto com menções e lista interativa
"""

from .whatsapp import build_list_content, build_text_content

__all__ = [
    "build_list_content",
    "build_text_content",
]
