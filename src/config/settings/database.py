"""Settings do PostgreSQL que guarda o status das instâncias.

Parâmetros de conexão e pool para o engine assíncrono do SQLAlchemy
(driver asyncpg).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.engine import URL

DEFAULT_DB_PORT = 5432


@dataclass(frozen=True)
class DatabaseSettings:
    """Configurações de conexão com o PostgreSQL.

    Attributes:
        host: Host do PostgreSQL
        port: Porta do PostgreSQL
        user: Usuário
        password: Senha
        name: Nome do banco
        ssl: Habilita SSL na conexão (sem verificação de certificado)
        pool_size: Tamanho do pool de conexões
        max_overflow: Conexões extras além do pool
        pool_timeout_seconds: Timeout para obter conexão do pool
        echo_sql: Loga SQL emitido (apenas debug)
    """

    host: str = "localhost"
    port: int = DEFAULT_DB_PORT
    user: str = "postgres"
    password: str = ""
    name: str = "hyperion"
    ssl: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout_seconds: float = 30.0
    echo_sql: bool = False

    @property
    def async_url(self) -> URL:
        """URL SQLAlchemy para o driver asyncpg (senha escapada)."""
        return URL.create(
            drivername="postgresql+asyncpg",
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )

    @property
    def connect_args(self) -> dict[str, object]:
        """Argumentos extras repassados ao asyncpg."""
        return {"ssl": "require"} if self.ssl else {}

    def validate(self) -> list[str]:
        """Valida configurações mínimas de banco.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.host:
            errors.append("DB_HOST não configurado")

        if not self.name:
            errors.append("DB_NAME não configurado")

        if not self.password:
            errors.append("DB_PASSWORD não configurado")

        if self.pool_size < 1:
            errors.append("DB_POOL_SIZE deve ser >= 1")

        if self.pool_timeout_seconds <= 0:
            errors.append("DB_POOL_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> DatabaseSettings:
    """Carrega DatabaseSettings a partir de variáveis de ambiente."""
    return DatabaseSettings(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", str(DEFAULT_DB_PORT))),
        user=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", ""),
        name=os.getenv("DB_NAME", "hyperion"),
        ssl=os.getenv("DB_SSL", "false").lower() == "true",
        pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        pool_timeout_seconds=float(os.getenv("DB_POOL_TIMEOUT_SECONDS", "30")),
        echo_sql=os.getenv("DB_ECHO_SQL", "").lower() in ("true", "1"),
    )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """Retorna instância cacheada de DatabaseSettings."""
    return _load_from_env()
