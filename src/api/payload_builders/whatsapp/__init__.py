"""Builders de conteúdo de mensagem WhatsApp.

Cada builder devolve o dict de conteúdo aceito por `send_message`
do handle de conexão.
"""

from api.payload_builders.whatsapp.interactive import build_list_content
from api.payload_builders.whatsapp.text import build_text_content

__all__ = [
    "build_list_content",
    "build_text_content",
]
