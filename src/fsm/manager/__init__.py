"""
Exports públicos do módulo fsm/manager.

Máquina de estados (FSMStateMachine) de conexão das instâncias.
"""

from fsm.manager.machine import (
    DEFAULT_MAX_HISTORY,
    FSMStateMachine,
    create_fsm,
)

__all__ = [
    "DEFAULT_MAX_HISTORY",
    "FSMStateMachine",
    "create_fsm",
]
