"""Codificação de QR Code."""

from app.infra.qr.encoder import PngDataUrlQREncoder, build_qr_png

__all__ = ["PngDataUrlQREncoder", "build_qr_png"]
