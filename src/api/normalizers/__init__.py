"""Normalizers — conversão de identificadores externos para o formato do protocolo."""

from .whatsapp import format_group_jid, format_individual_jid, format_jid

__all__ = [
    "format_group_jid",
    "format_individual_jid",
    "format_jid",
]
