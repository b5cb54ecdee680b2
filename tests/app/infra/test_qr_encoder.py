"""Testes do encoder de QR Code (qrcode + Pillow)."""

import base64

import pytest

from app.infra.qr import PngDataUrlQREncoder, build_qr_png
from app.infra.qr.encoder import DATA_URL_PREFIX

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class TestQREncoder:
    """Saída em data URL PNG."""

    def test_build_png_bytes(self) -> None:
        assert build_qr_png("2@abc,def").startswith(PNG_MAGIC)

    @pytest.mark.asyncio
    async def test_encode_returns_png_data_url(self) -> None:
        encoded = await PngDataUrlQREncoder(box_size=2, border=1).encode("2@abc,def")

        assert encoded.startswith(DATA_URL_PREFIX)
        png = base64.b64decode(encoded.removeprefix(DATA_URL_PREFIX))
        assert png.startswith(PNG_MAGIC)
