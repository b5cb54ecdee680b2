"""Normalização de destinatários para o formato JID.

Contatos recebem o sufixo @s.whatsapp.net e grupos @g.us, a menos que
o identificador já venha com o sufixo correspondente.
"""

from __future__ import annotations

from utils.errors import ValidationError

INDIVIDUAL_SUFFIX = "@s.whatsapp.net"
GROUP_SUFFIX = "@g.us"


def _clean(identifier: str | None, field: str) -> str:
    value = (identifier or "").strip()
    if not value:
        raise ValidationError(f"O campo {field} é obrigatório.")
    return value


def format_individual_jid(number: str | None) -> str:
    """Normaliza número de contato (ex: 5511999999999 → 5511999999999@s.whatsapp.net)."""
    value = _clean(number, "number")
    if INDIVIDUAL_SUFFIX in value:
        return value
    return f"{value}{INDIVIDUAL_SUFFIX}"


def format_group_jid(group_id: str | None) -> str:
    """Normaliza id de grupo (ex: 1203630@g.us)."""
    value = _clean(group_id, "groupId")
    if GROUP_SUFFIX in value:
        return value
    return f"{value}{GROUP_SUFFIX}"


def format_jid(identifier: str | None, *, is_group: bool = False) -> str:
    if is_group:
        return format_group_jid(identifier)
    return format_individual_jid(identifier)


def format_mentions(mentions: list[str] | None) -> list[str]:
    """Menções são sempre contatos individuais."""
    return [format_individual_jid(item) for item in mentions or []]
