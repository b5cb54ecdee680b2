"""Builder para mensagem interativa do tipo lista."""

from __future__ import annotations

from typing import Any

from utils.errors import ValidationError


def build_list_content(
    *,
    title: str,
    description: str,
    button_text: str,
    footer_text: str | None,
    sections: list[dict[str, Any]],
) -> dict[str, Any]:
    """Constrói conteúdo `listMessage`.

    Args:
        title: Título da lista
        description: Texto de apoio
        button_text: Rótulo do botão que abre a lista
        footer_text: Rodapé (opcional)
        sections: Seções com `title` e `rows`

    Returns:
        {"listMessage": {...}} no formato do cliente de protocolo
    """
    if not sections:
        raise ValidationError("A lista precisa de ao menos uma seção.")
    for section in sections:
        if not isinstance(section, dict) or not section.get("rows"):
            raise ValidationError("Cada seção precisa de ao menos uma linha (rows).")

    return {
        "listMessage": {
            "title": title,
            "description": description,
            "buttonText": button_text,
            "footer": footer_text,
            "sections": sections,
        }
    }
