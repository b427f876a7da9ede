"""Venue Adapter — интерфейс внешнего venue (AMM).

Адаптер выполняет запросы состояния пула и on-chain операции.
Подпись, отправка и подтверждение транзакций скрыты внутри адаптера:
для ядра это блокирующий вызов, который либо возвращает результат,
либо выбрасывает TransactionError.

Timeout и отмена — ответственность адаптера или вызывающего кода.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Optional

from src.core.domain.plan import SwapDirection
from src.core.domain.pool import PoolSnapshot
from src.core.domain.results import DepositResult, SwapResult, WithdrawResult


class VenueAdapter(ABC):
    """Абстрактный venue adapter.

    signer — непрозрачный объект (keypair, wallet handle), ядро его не читает.
    """

    @abstractmethod
    def fetch_pool(self, pool_id: str) -> Optional[PoolSnapshot]:
        """Текущие количества позиции в пуле; None если пул не найден."""
        raise NotImplementedError

    @abstractmethod
    def withdraw_all(self, pool_id: str, signer: Any) -> WithdrawResult:
        """Вывод 100% позиции. Raises TransactionError."""
        raise NotImplementedError

    @abstractmethod
    def swap(
        self,
        pool_id: str,
        direction: SwapDirection,
        input_amount: Decimal,
        signer: Any,
    ) -> SwapResult:
        """Swap input_amount source актива. Raises TransactionError."""
        raise NotImplementedError

    @abstractmethod
    def deposit(
        self,
        pool_id: str,
        base_amount: Decimal,
        quote_amount: Decimal,
        signer: Any,
    ) -> DepositResult:
        """Deposit base/quote в пул. Raises TransactionError."""
        raise NotImplementedError
