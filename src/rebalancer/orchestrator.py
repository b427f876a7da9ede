"""Rebalancer — оркестратор цикла ребалансировки LP позиции.

Последовательность (строго последовательно, каждая операция зависит
от результата предыдущей):
1. fetch_pool → PoolSnapshot (None → PoolNotFoundError)
2. is_in_range → True: DONE без транзакций
3. withdraw_all → выведенные base/quote
4. compute_plan → направление и объём swap
5. swap → фактически полученное количество
6. settle_plan + deposit → DONE после подтверждения

Ошибка любой стадии переводит машину в FAILED, оставшиеся стадии
не выполняются, ошибка пробрасывается вызывающему с тегом стадии.
Нет автоматических retry и нет компенсирующего rollback: после ошибки
на swap/deposit средства остаются в кошельке как base/quote
(error.stranded) и сверяются оператором вручную.

Параллельные вызовы rebalance() для одной позиции небезопасны:
вызывающий код (scheduler) обязан сериализовать циклы.
"""

import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from src.core.domain.pool import PoolSnapshot
from src.core.domain.position import Position
from src.core.domain.states import RebalanceStage, RebalanceState
from src.core.errors import PoolNotFoundError, RebalanceError, TransactionError
from src.rebalancer.state_machine import RebalanceResult, RebalanceStateMachine
from src.rebalancer.strategy import compute_plan, settle_plan
from src.rebalancer.tracker import (
    DEFAULT_TOLERANCE,
    measure_drift,
    validate_position,
    validate_tolerance,
)
from src.venue.base import VenueAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Rebalancer:
    """Оркестратор ребалансировки одной LP позиции.

    Venue adapter передаётся через конструктор (dependency injection),
    поэтому логика решений тестируется без сети.
    """

    def __init__(
        self,
        adapter: VenueAdapter,
        position: Position,
        signer: Any = None,
        tolerance: Union[Decimal, str, float] = DEFAULT_TOLERANCE,
    ):
        """
        Args:
            adapter: venue adapter (запросы пула и транзакции)
            position: целевая позиция (не меняется за время жизни)
            signer: непрозрачный signer, передаётся адаптеру как есть
            tolerance: допустимое относительное отклонение ∈ (0, 1]

        Raises:
            ConfigurationError: нулевые targets или tolerance вне (0, 1]
        """
        self.adapter = adapter
        self.position = validate_position(position)
        self.signer = signer
        self.tolerance = validate_tolerance(tolerance)

        self._machine = RebalanceStateMachine()
        self.last_result: Optional[RebalanceResult] = None

    @property
    def state(self) -> RebalanceState:
        return self._machine.state

    @property
    def failed_stage(self) -> Optional[RebalanceStage]:
        return self._machine.failed_stage

    def rebalance(self) -> RebalanceResult:
        """Один цикл ребалансировки.

        Returns:
            RebalanceResult (rebalanced=False если позиция в диапазоне)

        Raises:
            PoolNotFoundError: адаптер не вернул данных по пулу (stage=range-check)
            TransactionError: ошибка withdraw/swap/deposit (stage соответствующий)
        """
        self._machine.reset()
        pool_id = self.position.pool_id

        # 1. Проверка диапазона
        self._enter(RebalanceState.CHECKING_RANGE)
        snapshot = self._run_stage(lambda: self._fetch_snapshot(pool_id))
        drift = measure_drift(snapshot, self.position)

        if drift.within(self.tolerance):
            logger.info(
                f"Position {pool_id} within range "
                f"(base drift {drift.base_drift:.4f}, quote drift {drift.quote_drift:.4f}, "
                f"tolerance {self.tolerance}); no rebalancing needed"
            )
            self._enter(RebalanceState.DONE)
            return self._finish(
                RebalanceResult(
                    final_state=RebalanceState.DONE,
                    rebalanced=False,
                    snapshot=snapshot,
                    drift=drift,
                    details="in_range",
                )
            )

        logger.info(
            f"Position {pool_id} out of range "
            f"(base drift {drift.base_drift:.4f}, quote drift {drift.quote_drift:.4f}, "
            f"tolerance {self.tolerance}); rebalancing"
        )

        # 2. Withdraw 100% позиции
        self._enter(RebalanceState.WITHDRAWING)
        withdrawn = self._run_stage(lambda: self.adapter.withdraw_all(pool_id, self.signer))
        logger.info(
            f"Withdrew {withdrawn.base_amount} {self.position.base_symbol} and "
            f"{withdrawn.quote_amount} {self.position.quote_symbol} (tx {withdrawn.tx_id})"
        )

        # 3. План swap
        plan = compute_plan(withdrawn, self.position)
        stranded = {"base": withdrawn.base_amount, "quote": withdrawn.quote_amount}

        # 4. Swap
        self._enter(RebalanceState.SWAPPING)
        if plan.is_noop:
            logger.warning(f"Swap amount is zero for {pool_id}; skipping swap")
            output_amount = Decimal("0")
        else:
            swap_result = self._run_stage(
                lambda: self.adapter.swap(pool_id, plan.direction, plan.swap_amount, self.signer),
                stranded=stranded,
            )
            output_amount = swap_result.output_amount
            logger.info(
                f"Swapped {plan.swap_amount} ({plan.direction.value}) → {output_amount} "
                f"(tx {swap_result.tx_id})"
            )

        settled = settle_plan(plan, withdrawn, output_amount)
        stranded = {
            "base": settled.resulting_base_amount,
            "quote": settled.resulting_quote_amount,
        }

        # 5. Deposit
        self._enter(RebalanceState.DEPOSITING)
        deposit = self._run_stage(
            lambda: self.adapter.deposit(
                pool_id,
                settled.resulting_base_amount,
                settled.resulting_quote_amount,
                self.signer,
            ),
            stranded=stranded,
        )

        self._enter(RebalanceState.DONE)
        logger.info(
            f"Deposited {settled.resulting_base_amount} {self.position.base_symbol} and "
            f"{settled.resulting_quote_amount} {self.position.quote_symbol} (tx {deposit.tx_id}); "
            f"liquidity rebalanced"
        )
        return self._finish(
            RebalanceResult(
                final_state=RebalanceState.DONE,
                rebalanced=True,
                snapshot=snapshot,
                drift=drift,
                plan=settled,
                withdrawn=withdrawn,
                deposit=deposit,
                details=f"rebalanced_{settled.direction.value}",
            )
        )

    def _fetch_snapshot(self, pool_id: str) -> PoolSnapshot:
        snapshot = self.adapter.fetch_pool(pool_id)
        if snapshot is None:
            raise PoolNotFoundError(pool_id)
        return snapshot

    def _enter(self, target: RebalanceState) -> None:
        previous = self._machine.transition(target)
        logger.debug(f"Rebalance state {previous.value} → {target.value}")

    def _finish(self, result: RebalanceResult) -> RebalanceResult:
        self.last_result = result
        return result

    def _run_stage(
        self,
        call: Callable[[], T],
        stranded: Optional[Dict[str, Decimal]] = None,
    ) -> T:
        """Выполнение внешней операции текущей стадии.

        Ошибки таксономии пробрасываются тем же объектом с тегом стадии;
        прочие исключения адаптера оборачиваются в TransactionError.
        """
        stage = self._machine.current_stage()
        try:
            return call()
        except RebalanceError as exc:
            self._fail(exc, stage, stranded)
            raise
        except Exception as exc:
            error = TransactionError(f"{stage.value} failed: {exc}")
            self._fail(error, stage, stranded)
            raise error from exc

    def _fail(
        self,
        error: RebalanceError,
        stage: RebalanceStage,
        stranded: Optional[Dict[str, Decimal]],
    ) -> None:
        self._machine.fail()
        self.last_result = None
        error.stage = stage
        error.stranded = stranded

        logger.error(f"Rebalance of {self.position.pool_id} failed at stage '{stage.value}': {error.message}")
        if stranded is not None:
            logger.error(
                f"Funds left outside the pool, reconcile manually: "
                f"{stranded['base']} {self.position.base_symbol}, "
                f"{stranded['quote']} {self.position.quote_symbol}"
            )
