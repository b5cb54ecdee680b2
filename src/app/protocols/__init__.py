"""Protocolos e contratos do core da aplicação."""

from .credential_store import CredentialStoreProtocol
from .qr_encoder import QREncoderProtocol
from .status_store import AsyncStatusStoreProtocol
from .whatsapp_client import (
    LifecycleCallback,
    WhatsAppClientFactory,
    WhatsAppConnectionProtocol,
)

__all__ = [
    "AsyncStatusStoreProtocol",
    "CredentialStoreProtocol",
    "LifecycleCallback",
    "QREncoderProtocol",
    "WhatsAppClientFactory",
    "WhatsAppConnectionProtocol",
]
