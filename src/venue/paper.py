"""Paper Venue — in-memory симуляция venue для dry run.

Держит количества LP позиции в пуле и баланс кошелька:
- withdraw_all переносит всю позицию в кошелёк
- swap конвертирует по фиксированной цене (quote за 1 base) минус fee
- deposit переносит средства кошелька обратно в позицию

Ценообразование AMM не моделируется: цена фиксирована, slippage = fee.
Для тестов можно принудительно уронить операцию через fail_on.
"""

import itertools
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from src.core.domain.plan import SwapDirection
from src.core.domain.pool import PoolSnapshot
from src.core.domain.results import DepositResult, SwapResult, WithdrawResult
from src.core.errors import TransactionError
from src.venue.base import VenueAdapter

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, str, float]

OPERATIONS = ("withdraw", "swap", "deposit")


def bps_to_fraction(bps: Decimal) -> Decimal:
    """
    Конверсия basis points в дробь.

    Args:
        bps: Basis points (например, 25 bps = 0.25%)

    Returns:
        Дробь (например, 25 bps → 0.0025)
    """
    return bps / Decimal("10000")


def _dec(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


class PaperVenueAdapter(VenueAdapter):
    """Симулированный venue с одним пулом."""

    def __init__(
        self,
        pool_id: str,
        position_base: Number,
        position_quote: Number,
        price: Number,
        fee_bps: Number = 25,
        wallet_base: Number = 0,
        wallet_quote: Number = 0,
        fail_on: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            pool_id: идентификатор единственного пула
            position_base: количество base в LP позиции
            position_quote: количество quote в LP позиции
            price: цена 1 base в quote
            fee_bps: комиссия swap в basis points
            wallet_base: начальный баланс base в кошельке
            wallet_quote: начальный баланс quote в кошельке
            fail_on: операции (withdraw/swap/deposit), которые падают с TransactionError
        """
        self.pool_id = pool_id
        self.position_base = _dec(position_base)
        self.position_quote = _dec(position_quote)
        self.price = _dec(price)
        self.fee_bps = _dec(fee_bps)
        self.wallet_base = _dec(wallet_base)
        self.wallet_quote = _dec(wallet_quote)

        if self.price <= 0:
            raise ValueError(f"price must be positive, got {self.price}")
        if not Decimal("0") <= self.fee_bps < Decimal("10000"):
            raise ValueError(f"fee_bps must be in [0, 10000), got {self.fee_bps}")

        self.fail_on = set(fail_on or ())
        unknown = self.fail_on - set(OPERATIONS)
        if unknown:
            raise ValueError(f"Unknown operations in fail_on: {sorted(unknown)}")

        self._tx_counter = itertools.count(1)
        self.transactions: list = []

    def set_position(self, base: Number, quote: Number) -> None:
        """Подмена количеств позиции (симуляция движения рынка)."""
        self.position_base = _dec(base)
        self.position_quote = _dec(quote)

    def fetch_pool(self, pool_id: str) -> Optional[PoolSnapshot]:
        if pool_id != self.pool_id:
            return None
        return PoolSnapshot(base_amount=self.position_base, quote_amount=self.position_quote)

    def withdraw_all(self, pool_id: str, signer: Any) -> WithdrawResult:
        self._check("withdraw", pool_id)
        base, quote = self.position_base, self.position_quote
        self.wallet_base += base
        self.wallet_quote += quote
        self.position_base = Decimal("0")
        self.position_quote = Decimal("0")
        return WithdrawResult(base_amount=base, quote_amount=quote, tx_id=self._record("withdraw"))

    def swap(
        self,
        pool_id: str,
        direction: SwapDirection,
        input_amount: Decimal,
        signer: Any,
    ) -> SwapResult:
        self._check("swap", pool_id)
        if input_amount < 0:
            raise TransactionError(f"swap input must be non-negative, got {input_amount}")

        fee_multiplier = Decimal("1") - bps_to_fraction(self.fee_bps)
        if direction == SwapDirection.BASE_TO_QUOTE:
            if input_amount > self.wallet_base:
                raise TransactionError(
                    f"insufficient base: need {input_amount}, have {self.wallet_base}"
                )
            output = input_amount * self.price * fee_multiplier
            self.wallet_base -= input_amount
            self.wallet_quote += output
        else:
            if input_amount > self.wallet_quote:
                raise TransactionError(
                    f"insufficient quote: need {input_amount}, have {self.wallet_quote}"
                )
            output = input_amount / self.price * fee_multiplier
            self.wallet_quote -= input_amount
            self.wallet_base += output

        return SwapResult(output_amount=output, tx_id=self._record("swap"))

    def deposit(
        self,
        pool_id: str,
        base_amount: Decimal,
        quote_amount: Decimal,
        signer: Any,
    ) -> DepositResult:
        self._check("deposit", pool_id)
        if base_amount > self.wallet_base or quote_amount > self.wallet_quote:
            raise TransactionError(
                f"insufficient wallet balance for deposit: need {base_amount}/{quote_amount}, "
                f"have {self.wallet_base}/{self.wallet_quote}"
            )
        self.wallet_base -= base_amount
        self.wallet_quote -= quote_amount
        self.position_base += base_amount
        self.position_quote += quote_amount
        return DepositResult(tx_id=self._record("deposit"))

    def _check(self, operation: str, pool_id: str) -> None:
        if pool_id != self.pool_id:
            raise TransactionError(f"{operation}: unknown pool {pool_id}")
        if operation in self.fail_on:
            raise TransactionError(f"{operation}: simulated transaction failure")

    def _record(self, operation: str) -> str:
        tx_id = f"paper-{next(self._tx_counter)}"
        self.transactions.append((operation, tx_id))
        logger.debug(f"[PAPER] {operation} confirmed as {tx_id}")
        return tx_id
