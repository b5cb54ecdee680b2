"""
Regras de transição válidas entre estados de conexão.

Este módulo define o grafo de transições da máquina de estados
de cada instância (criação, conexão, QR, abertura, queda e logout).
"""

from fsm.states.session import ConnectionState

# Tipagem explícita do mapa de transições
TransitionMap = dict[ConnectionState, frozenset[ConnectionState]]

# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # UNREGISTERED: cadastro ou conexão direta
    ConnectionState.UNREGISTERED: frozenset({
        ConnectionState.DISCONNECTED,
        ConnectionState.CONNECTING,
    }),

    # DISCONNECTED: só sai por conexão explícita
    ConnectionState.DISCONNECTED: frozenset({
        ConnectionState.CONNECTING,
    }),

    # CONNECTING: QR, abertura, nova tentativa, esgotamento ou logout
    ConnectionState.CONNECTING: frozenset({
        ConnectionState.CONNECTING,
        ConnectionState.AWAITING_QR,
        ConnectionState.CONNECTED,
        ConnectionState.DISCONNECTED,
        ConnectionState.UNREGISTERED,
    }),

    # AWAITING_QR: leitura do QR ou queda
    ConnectionState.AWAITING_QR: frozenset({
        ConnectionState.CONNECTED,
        ConnectionState.CONNECTING,
        ConnectionState.DISCONNECTED,
        ConnectionState.UNREGISTERED,
    }),

    # CONNECTED: queda (com ou sem reconexão) ou logout
    ConnectionState.CONNECTED: frozenset({
        ConnectionState.CONNECTING,
        ConnectionState.DISCONNECTED,
        ConnectionState.UNREGISTERED,
    }),
}


def get_valid_targets(state: ConnectionState) -> frozenset[ConnectionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_state in get_valid_targets(from_state)

