"""Modelo ORM da tabela de status das instâncias."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base declarativa para registro de modelos no metadata."""


class WhatsAppInstanceModel(Base):
    """Linha de status de uma instância.

    Attributes:
        session_id: Identificador externo da instância (PK)
        status: "conectado" ou "desconectado"
        last_updated: Horário da última escrita (coluna dt_ultima_atualizacao)
    """

    __tablename__ = "whatsapp_instancias"

    session_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    last_updated: Mapped[datetime | None] = mapped_column(
        "dt_ultima_atualizacao",
        DateTime(timezone=True),
        nullable=True,
        server_default=func.now(),
    )
