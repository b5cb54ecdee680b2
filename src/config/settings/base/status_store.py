"""Settings do store de status das instâncias."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

StatusStoreBackend = Literal["memory", "postgres"]


@dataclass(frozen=True)
class StatusStoreSettings:
    """Configurações do store de status.

    Attributes:
        backend: Backend do store (memory|postgres)
    """

    backend: StatusStoreBackend = "postgres"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "postgres"):
            errors.append(f"STATUS_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "STATUS_STORE_BACKEND=memory proibido em staging/production. "
                "Use postgres."
            )

        return errors


def _load_status_store_from_env() -> StatusStoreSettings:
    """Carrega StatusStoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("STATUS_STORE_BACKEND", "postgres").lower()
    backend: StatusStoreBackend = (
        backend_str if backend_str in ("memory", "postgres") else "postgres"
    )
    return StatusStoreSettings(backend=backend)


@lru_cache(maxsize=1)
def get_status_store_settings() -> StatusStoreSettings:
    """Retorna instância cacheada de StatusStoreSettings."""
    return _load_status_store_from_env()
