"""
Rebalance Errors — Таксономия ошибок ребалансировки

Все ошибки наследуют RebalanceError и несут:
- stage: стадия цикла (range-check / withdraw / swap / deposit), если известна
- stranded: последние известные суммы base/quote вне пула после неудачи
  на стадии после withdraw (для ручной сверки оператором)

ConfigurationError выбрасывается до любого сетевого вызова.
Ни одна ошибка не превращается в boolean флаг успеха.
"""

from decimal import Decimal
from typing import Dict, Optional

from src.core.domain.states import RebalanceStage


class RebalanceError(Exception):
    """Базовая ошибка цикла ребалансировки."""

    def __init__(
        self,
        message: str,
        stage: Optional[RebalanceStage] = None,
        stranded: Optional[Dict[str, Decimal]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.stranded = stranded

    def __str__(self) -> str:
        if self.stage is None:
            return self.message
        return f"[{self.stage.value}] {self.message}"


class ConfigurationError(RebalanceError):
    """
    Невалидная конфигурация: нулевые/отрицательные target amounts,
    tolerance вне (0, 1], битый файл конфигурации.
    """


class PoolNotFoundError(RebalanceError):
    """Адаптер не вернул данных для pool_id. Фатально для текущего цикла."""

    def __init__(self, pool_id: str, stage: Optional[RebalanceStage] = None):
        super().__init__(f"Pool not found: {pool_id}", stage=stage)
        self.pool_id = pool_id


class TransactionError(RebalanceError):
    """Ошибка отправки/подтверждения транзакции на стороне venue adapter."""


class InvalidTransitionError(RebalanceError):
    """Недопустимый переход state machine (ошибка программирования)."""
