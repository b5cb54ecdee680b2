"""Normalizer WhatsApp — endereçamento (JID) de contatos e grupos."""

from .jid import (
    GROUP_SUFFIX,
    INDIVIDUAL_SUFFIX,
    format_group_jid,
    format_individual_jid,
    format_jid,
    format_mentions,
)

__all__ = [
    "GROUP_SUFFIX",
    "INDIVIDUAL_SUFFIX",
    "format_group_jid",
    "format_individual_jid",
    "format_jid",
    "format_mentions",
]
