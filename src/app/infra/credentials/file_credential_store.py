"""Credential store em disco — um diretório por instância.

O conteúdo do diretório pertence ao cliente do protocolo (que lê e
grava as credenciais); aqui só se cria e remove o escopo.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from utils.errors import ValidationError

logger = logging.getLogger(__name__)


class FileCredentialStore:
    """Diretórios de credenciais sob um caminho raiz.

    Args:
        root: Diretório raiz (ex: connect_instancias/)
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def scope_path(self, session_id: str) -> Path:
        """Caminho do escopo, sem permitir escapar da raiz."""
        if not session_id or Path(session_id).name != session_id or session_id in (".", ".."):
            raise ValidationError("Identificador de instância inválido para credenciais.")
        return self._root / session_id

    def ensure_scope(self, session_id: str) -> Path:
        path = self.scope_path(session_id)
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            logger.info("credential_scope_created", extra={"session_id": session_id})
        return path

    def remove_scope(self, session_id: str) -> bool:
        """Remove o escopo (após logout). Retorna True se existia."""
        path = self.scope_path(session_id)
        if not path.exists():
            return False
        shutil.rmtree(path)
        logger.info("credential_scope_removed", extra={"session_id": session_id})
        return True
