"""Protocolo de codificação de QR Code."""

from __future__ import annotations

from typing import Protocol


class QREncoderProtocol(Protocol):
    """Converte a string bruta de pareamento em imagem exibível."""

    async def encode(self, raw: str) -> str: ...
