"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - postgres_status_store: Store de status usando PostgreSQL (SQLAlchemy async)
    - memory_stores: Stores em memória para desenvolvimento/testes
    - models: Modelo ORM da tabela whatsapp_instancias
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryStatusStore
from app.infra.stores.models import Base, WhatsAppInstanceModel
from app.infra.stores.postgres_status_store import PostgresStatusStore

__all__ = [
    "Base",
    # Memory (dev/test)
    "MemoryStatusStore",
    # PostgreSQL
    "PostgresStatusStore",
    "WhatsAppInstanceModel",
]
