"""
Exports públicos do módulo fsm/states.

Estados canônicos de conexão das instâncias.
"""

from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    LIVE_STATES,
    REFLEXIVE_STATES,
    ConnectionState,
    is_live,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "LIVE_STATES",
    "REFLEXIVE_STATES",
    "ConnectionState",
    "is_live",
]
