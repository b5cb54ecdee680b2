"""
Máquina de estados (FSMStateMachine) de conexão de uma instância.

Controla transições de estado e mantém histórico rastreável
(limitado) para observabilidade.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.session import (
    DEFAULT_INITIAL_STATE,
    ConnectionState,
    is_live,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Limite do histórico de transições mantido em memória por instância
DEFAULT_MAX_HISTORY = 50


class FSMStateMachine:
    """
    Máquina de estados de conexão de uma instância.

    Attributes:
        current_state: Estado atual da máquina
        session_id: Identificador da instância
    """

    __slots__ = ("_current_state", "_history", "_max_history", "_session_id")

    def __init__(
        self,
        initial_state: ConnectionState | None = None,
        session_id: str = "",
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        """
        Inicializa a máquina de estados.

        Args:
            initial_state: Estado inicial (usa DEFAULT_INITIAL_STATE se None)
            session_id: Identificador da instância para logs
            max_history: Quantidade máxima de transições mantidas
        """
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: list[StateTransition] = []
        self._session_id = session_id
        self._max_history = max_history

    @property
    def current_state(self) -> ConnectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def session_id(self) -> str:
        """Identificador da instância."""
        return self._session_id

    @property
    def is_live(self) -> bool:
        """Verifica se há conexão viva ou em andamento."""
        return is_live(self._current_state)

    def can_transition_to(self, target: ConnectionState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[ConnectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'connect', 'opened')
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "session_id": self._session_id,
            "current_state": self._current_state.name,
            "is_live": self.is_live,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self, limit: int | None = None) -> list[dict[str, Any]]:
        """
        Retorna histórico em formato seguro para logs.

        Args:
            limit: Quantidade das transições mais recentes (todas se None)
        """
        transitions = self._history if limit is None else self._history[-limit:]
        return [t.to_log_dict() for t in transitions]


def create_fsm(
    session_id: str,
    initial_state: ConnectionState | None = None,
) -> FSMStateMachine:
    """
    Factory function para criar uma FSM.

    Args:
        session_id: Identificador da instância
        initial_state: Estado inicial (opcional)

    Returns:
        FSMStateMachine configurada
    """
    return FSMStateMachine(
        initial_state=initial_state,
        session_id=session_id,
    )
