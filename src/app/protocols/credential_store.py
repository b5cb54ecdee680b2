"""Protocolo de escopo de credenciais por instância."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class CredentialStoreProtocol(Protocol):
    """Contrato mínimo para o diretório de credenciais de uma instância.

    O conteúdo do escopo é opaco para o core: quem lê e grava as
    credenciais é o cliente do protocolo.
    """

    def scope_path(self, session_id: str) -> Path: ...

    def ensure_scope(self, session_id: str) -> Path: ...

    def remove_scope(self, session_id: str) -> bool: ...
