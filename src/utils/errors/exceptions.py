"""Exceções de domínio e de infraestrutura do gerenciador de instâncias."""

from __future__ import annotations


class InstanceError(Exception):
    """Base para erros expostos pela camada HTTP."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InstanceError):
    """Campo obrigatório ausente ou inválido na requisição."""

    status_code = 400


class NotFoundError(InstanceError):
    """Instância desconhecida ou sem conexão ativa."""

    status_code = 404


class UpstreamProtocolError(InstanceError):
    """Falha da operação no WhatsApp (destinatário inválido, rate limit...).

    Nunca é retentada automaticamente pela camada HTTP.
    """

    def __init__(self, message: str, *, status_code: int = 500, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ConnectionOpenError(InstanceError):
    """Falha ao carregar credenciais ou abrir o handle de conexão."""


class ReconnectExhaustedError(InstanceError):
    """Teto de reconexões atingido; visível apenas via status persistido."""


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class StatusStoreUnavailableError(InfrastructureError):
    """Falha de conexão/timeout ao acessar o store de status."""


class ClientFactoryNotConfiguredError(InfrastructureError):
    """Nenhuma factory de cliente WhatsApp configurada."""
