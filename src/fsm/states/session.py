"""
Estados canônicos de conexão de uma instância WhatsApp.

Este módulo define os estados que uma instância pode assumir durante
seu ciclo de vida, do cadastro até a conexão ativa com o WhatsApp.
Estados são determinísticos e explícitos.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """
    Estados de conexão de uma instância.

    Estados:
        - UNREGISTERED: Instância sem entrada no registro (nunca criada ou deslogada)
        - DISCONNECTED: Cadastrada, sem conexão ativa
        - CONNECTING: Handle aberto, aguardando abertura (ou reconexão agendada)
        - AWAITING_QR: QR Code gerado, aguardando leitura no aparelho
        - CONNECTED: Conexão aberta com o WhatsApp
    """

    UNREGISTERED = "UNREGISTERED"
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    AWAITING_QR = "AWAITING_QR"
    CONNECTED = "CONNECTED"

    def __str__(self) -> str:
        return self.value


# Estados em que existe (ou está prestes a existir) um handle vivo
LIVE_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.CONNECTING,
    ConnectionState.AWAITING_QR,
    ConnectionState.CONNECTED,
})

# Estados que permitem transição para si mesmos
REFLEXIVE_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.CONNECTING,
})

# Estado inicial padrão para novas instâncias
DEFAULT_INITIAL_STATE: ConnectionState = ConnectionState.UNREGISTERED


def is_live(state: ConnectionState) -> bool:
    """
    Verifica se o estado corresponde a uma conexão viva ou em andamento.

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado está em LIVE_STATES
    """
    return state in LIVE_STATES

