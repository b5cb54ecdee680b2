"""
Guards e invariantes para transições de estado de conexão.

Guards são regras adicionais, avaliadas depois do mapa de transições,
que podem bloquear uma transição com motivo explícito.
"""

from collections.abc import Callable

from fsm.states.session import REFLEXIVE_STATES, ConnectionState


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[ConnectionState, ConnectionState], GuardResult]


def guard_same_state(
    from_state: ConnectionState,
    to_state: ConnectionState,
) -> GuardResult:
    """
    Guard: Previne transição para o mesmo estado.

    CONNECTING pode transitar para si mesmo (nova tentativa de reconexão).

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        GuardResult indicando se transição é permitida
    """
    if from_state in REFLEXIVE_STATES:
        return GuardResult.allow()

    if from_state == to_state:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )

    return GuardResult.allow()


# Lista de guards a serem aplicados em ordem
# Todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_same_state,
]


def evaluate_guards(
    from_state: ConnectionState,
    to_state: ConnectionState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
