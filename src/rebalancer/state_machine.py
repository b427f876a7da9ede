"""Rebalance State Machine — состояния одного цикла ребалансировки.

Переходы:
- IDLE → CHECKING_RANGE
- CHECKING_RANGE → DONE (позиция в диапазоне) | WITHDRAWING
- WITHDRAWING → SWAPPING → DEPOSITING → DONE
- любое нетерминальное → FAILED

Один экземпляр обслуживает один цикл; reset() возвращает машину в IDLE
перед следующим циклом.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from src.core.domain.plan import RebalancePlan
from src.core.domain.pool import PoolSnapshot
from src.core.domain.results import DepositResult, WithdrawResult
from src.core.domain.states import RebalanceStage, RebalanceState
from src.core.errors import InvalidTransitionError, RebalanceError
from src.rebalancer.tracker import DriftReport


_ALLOWED_TRANSITIONS: Dict[RebalanceState, Tuple[RebalanceState, ...]] = {
    RebalanceState.IDLE: (RebalanceState.CHECKING_RANGE,),
    RebalanceState.CHECKING_RANGE: (
        RebalanceState.DONE,
        RebalanceState.WITHDRAWING,
        RebalanceState.FAILED,
    ),
    RebalanceState.WITHDRAWING: (RebalanceState.SWAPPING, RebalanceState.FAILED),
    RebalanceState.SWAPPING: (RebalanceState.DEPOSITING, RebalanceState.FAILED),
    RebalanceState.DEPOSITING: (RebalanceState.DONE, RebalanceState.FAILED),
    RebalanceState.DONE: (),
    RebalanceState.FAILED: (),
}

# Стадия, за которую отвечает каждое рабочее состояние
_STAGE_BY_STATE: Dict[RebalanceState, RebalanceStage] = {
    RebalanceState.CHECKING_RANGE: RebalanceStage.RANGE_CHECK,
    RebalanceState.WITHDRAWING: RebalanceStage.WITHDRAW,
    RebalanceState.SWAPPING: RebalanceStage.SWAP,
    RebalanceState.DEPOSITING: RebalanceStage.DEPOSIT,
}


@dataclass(frozen=True)
class RebalanceResult:
    """Результат успешно завершённого цикла ребалансировки."""

    final_state: RebalanceState
    rebalanced: bool
    snapshot: PoolSnapshot
    drift: DriftReport

    plan: Optional[RebalancePlan] = None
    withdrawn: Optional[WithdrawResult] = None
    deposit: Optional[DepositResult] = None

    # Для отладки
    details: str = ""

    def to_report(self) -> Dict[str, Any]:
        """JSON-совместимый отчёт о цикле (контракт rebalance_report)."""
        plan = None
        if self.plan is not None:
            plan = {
                "direction": self.plan.direction.value,
                "swap_amount": str(self.plan.swap_amount),
                "resulting_base_amount": _optional_str(self.plan.resulting_base_amount),
                "resulting_quote_amount": _optional_str(self.plan.resulting_quote_amount),
            }
        return {
            "status": self.final_state.value,
            "rebalanced": self.rebalanced,
            "failed_stage": None,
            "snapshot": {
                "base_amount": str(self.snapshot.base_amount),
                "quote_amount": str(self.snapshot.quote_amount),
            },
            "drift": {
                "base_drift": str(self.drift.base_drift),
                "quote_drift": str(self.drift.quote_drift),
            },
            "plan": plan,
            "error": None,
            "stranded": None,
            "details": self.details,
        }


def failure_report(error: RebalanceError) -> Dict[str, Any]:
    """Отчёт о неудачном цикле: стадия, причина и оставшиеся вне пула средства."""
    stranded = None
    if error.stranded is not None:
        stranded = {key: str(value) for key, value in error.stranded.items()}
    cause = error.__cause__
    return {
        "status": RebalanceState.FAILED.value,
        "rebalanced": False,
        "failed_stage": error.stage.value if error.stage is not None else None,
        "snapshot": None,
        "drift": None,
        "plan": None,
        "error": {
            "type": type(error).__name__,
            "message": error.message,
            "cause": repr(cause) if cause is not None else None,
        },
        "stranded": stranded,
        "details": str(error),
    }


def _optional_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


class RebalanceStateMachine:
    """State machine одного цикла ребалансировки.

    Хранит текущее состояние, историю переходов и стадию ошибки.
    Не выполняет внешних вызовов: их делает оркестратор.
    """

    def __init__(self):
        self._state = RebalanceState.IDLE
        self._failed_stage: Optional[RebalanceStage] = None
        self._history: List[Tuple[RebalanceState, RebalanceState]] = []

    @property
    def state(self) -> RebalanceState:
        return self._state

    @property
    def failed_stage(self) -> Optional[RebalanceStage]:
        return self._failed_stage

    @property
    def history(self) -> List[Tuple[RebalanceState, RebalanceState]]:
        return list(self._history)

    def current_stage(self) -> Optional[RebalanceStage]:
        """Стадия, соответствующая текущему рабочему состоянию."""
        return _STAGE_BY_STATE.get(self._state)

    def can_transition(self, target: RebalanceState) -> bool:
        return target in _ALLOWED_TRANSITIONS[self._state]

    def transition(self, target: RebalanceState) -> RebalanceState:
        """Переход в target.

        Returns:
            Предыдущее состояние

        Raises:
            InvalidTransitionError: Если переход не разрешён
        """
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Invalid transition {self._state.value} → {target.value}"
            )
        previous = self._state
        if target == RebalanceState.FAILED:
            self._failed_stage = _STAGE_BY_STATE.get(previous)
        self._history.append((previous, target))
        self._state = target
        return previous

    def fail(self) -> Optional[RebalanceStage]:
        """Переход в FAILED из текущего рабочего состояния.

        Returns:
            Стадия, на которой произошла ошибка
        """
        self.transition(RebalanceState.FAILED)
        return self._failed_stage

    def reset(self) -> None:
        """Возврат в IDLE перед новым циклом."""
        self._state = RebalanceState.IDLE
        self._failed_stage = None
        self._history = []
