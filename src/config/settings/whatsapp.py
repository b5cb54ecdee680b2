"""Settings específicas do cliente WhatsApp multi-instância.

Credenciais, factory do cliente de protocolo e política de reconexão.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_AUTH_PATH = "connect_instancias"
DEFAULT_BROWSER: tuple[str, str, str] = ("Chrome", "Chrome 110", "Windows")


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        auth_path: Diretório raiz das credenciais (uma pasta por instância)
        client_factory: Import path "modulo:callable" da factory do cliente
        browser: Identificação do cliente apresentada ao WhatsApp
        max_reconnect_attempts: Teto de reconexões automáticas consecutivas
        reconnect_delay_seconds: Espera fixa antes de cada reconexão
        startup_attempts: Tentativas por instância na reconexão do boot
        startup_retry_delay_seconds: Espera entre tentativas do boot
        qr_wait_seconds: Janela de espera pelo QR Code em /conectar
    """

    auth_path: Path = Path(DEFAULT_AUTH_PATH)
    client_factory: str = ""
    browser: tuple[str, str, str] = DEFAULT_BROWSER

    # Reconexão
    max_reconnect_attempts: int = 5
    reconnect_delay_seconds: float = 5.0

    # Boot
    startup_attempts: int = 3
    startup_retry_delay_seconds: float = 5.0

    # QR Code
    qr_wait_seconds: float = 3.0

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.client_factory:
            errors.append("WHATSAPP_CLIENT_FACTORY não configurado")
        elif ":" not in self.client_factory:
            errors.append("WHATSAPP_CLIENT_FACTORY deve ter o formato 'modulo:callable'")

        if self.max_reconnect_attempts < 0:
            errors.append("WHATSAPP_MAX_RECONNECT_ATTEMPTS deve ser >= 0")

        if self.reconnect_delay_seconds < 0:
            errors.append("WHATSAPP_RECONNECT_DELAY_SECONDS deve ser >= 0")

        if self.startup_attempts < 1:
            errors.append("WHATSAPP_STARTUP_ATTEMPTS deve ser >= 1")

        if self.qr_wait_seconds <= 0:
            errors.append("WHATSAPP_QR_WAIT_SECONDS deve ser > 0")

        return errors


def _parse_browser(raw: str) -> tuple[str, str, str]:
    """Converte "Chrome,Chrome 110,Windows" em tupla de 3 itens."""
    parts = tuple(part.strip() for part in raw.split(",") if part.strip())
    if len(parts) != 3:
        return DEFAULT_BROWSER
    return parts  # type: ignore[return-value]


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        auth_path=Path(os.getenv("WHATSAPP_AUTH_PATH", DEFAULT_AUTH_PATH)),
        client_factory=os.getenv("WHATSAPP_CLIENT_FACTORY", ""),
        browser=_parse_browser(os.getenv("WHATSAPP_BROWSER", "")),
        max_reconnect_attempts=int(os.getenv("WHATSAPP_MAX_RECONNECT_ATTEMPTS", "5")),
        reconnect_delay_seconds=float(
            os.getenv("WHATSAPP_RECONNECT_DELAY_SECONDS", "5")
        ),
        startup_attempts=int(os.getenv("WHATSAPP_STARTUP_ATTEMPTS", "3")),
        startup_retry_delay_seconds=float(
            os.getenv("WHATSAPP_STARTUP_RETRY_DELAY_SECONDS", "5")
        ),
        qr_wait_seconds=float(os.getenv("WHATSAPP_QR_WAIT_SECONDS", "3")),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
