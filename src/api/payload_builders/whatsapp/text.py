"""Builder para mensagens de texto (com ou sem menções)."""

from __future__ import annotations

from typing import Any

from utils.errors import ValidationError


def build_text_content(message: str | None, mentions: list[str] | None = None) -> dict[str, Any]:
    """Constrói conteúdo de texto.

    Args:
        message: Corpo da mensagem
        mentions: JIDs já normalizados a mencionar (opcional)

    Returns:
        {"text": ...} ou {"text": ..., "mentions": [...]}
    """
    if not message:
        raise ValidationError("O campo message é obrigatório.")
    content: dict[str, Any] = {"text": message}
    if mentions:
        content["mentions"] = list(mentions)
    return content
