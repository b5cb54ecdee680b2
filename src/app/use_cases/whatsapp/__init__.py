"""Use cases das instâncias WhatsApp (mensagens, grupos e contatos)."""

from app.use_cases.whatsapp.contacts import ContactOperationsUseCase
from app.use_cases.whatsapp.groups import (
    PARTICIPANT_NOT_ON_WHATSAPP,
    GroupOperationsUseCase,
)
from app.use_cases.whatsapp.send_message import SendMessageUseCase

__all__ = [
    "PARTICIPANT_NOT_ON_WHATSAPP",
    "ContactOperationsUseCase",
    "GroupOperationsUseCase",
    "SendMessageUseCase",
]
