"""
Rebalance States — Состояния и стадии цикла ребалансировки

Один цикл ребалансировки проходит фиксированную последовательность состояний:

    IDLE → CHECKING_RANGE → DONE
    IDLE → CHECKING_RANGE → WITHDRAWING → SWAPPING → DEPOSITING → DONE

Любое нетерминальное состояние может перейти в FAILED.
Стадия (RebalanceStage) — внешняя операция, на которой произошла ошибка.
"""

from enum import Enum


# =============================================================================
# ENUMS
# =============================================================================


class RebalanceState(str, Enum):
    """Состояние state machine цикла ребалансировки"""

    IDLE = "IDLE"
    CHECKING_RANGE = "CHECKING_RANGE"
    WITHDRAWING = "WITHDRAWING"
    SWAPPING = "SWAPPING"
    DEPOSITING = "DEPOSITING"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (RebalanceState.DONE, RebalanceState.FAILED)


class RebalanceStage(str, Enum):
    """
    Стадия цикла, к которой привязывается ошибка.

    Значения используются в отчётах и сообщениях оператору.
    """

    RANGE_CHECK = "range-check"
    WITHDRAW = "withdraw"
    SWAP = "swap"
    DEPOSIT = "deposit"
