"""Encoder de QR Code para data URL PNG (qrcode + Pillow)."""

from __future__ import annotations

import asyncio
import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

DATA_URL_PREFIX = "data:image/png;base64,"


def build_qr_png(data: str, *, box_size: int = 10, border: int = 4) -> bytes:
    """Renderiza `data` como PNG."""
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="#000000", back_color="#FFFFFF").convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class PngDataUrlQREncoder:
    """Converte a string de pareamento em `data:image/png;base64,...`.

    A renderização roda fora do event loop (asyncio.to_thread).
    """

    def __init__(self, *, box_size: int = 10, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    async def encode(self, raw: str) -> str:
        png = await asyncio.to_thread(
            build_qr_png, raw, box_size=self._box_size, border=self._border
        )
        return DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")
