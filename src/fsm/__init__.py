"""
Módulo FSM — Máquina de Estados de conexão das instâncias WhatsApp.

Estrutura:
    - states/: Definições dos estados (ConnectionState enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (FSMStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import (
    DEFAULT_MAX_HISTORY,
    FSMStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    LIVE_STATES,
    REFLEXIVE_STATES,
    ConnectionState,
    is_live,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "DEFAULT_MAX_HISTORY",
    "LIVE_STATES",
    "REFLEXIVE_STATES",
    "VALID_TRANSITIONS",
    "ConnectionState",
    "FSMStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_live",
    "is_transition_valid",
]
