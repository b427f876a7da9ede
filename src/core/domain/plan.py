"""
RebalancePlan — План ребалансировки позиции

Strategy заранее определяет направление и входное количество swap.
Итоговые количества для deposit известны только после исполнения swap
(slippage), поэтому resulting_* поля заполняются после swap.

Создаётся один раз за цикл и сразу потребляется оркестратором.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .position import coerce_decimal


# =============================================================================
# ENUMS
# =============================================================================


class SwapDirection(str, Enum):
    """Направление swap"""

    BASE_TO_QUOTE = "base_to_quote"  # Избыток base продаётся за quote
    QUOTE_TO_BASE = "quote_to_base"  # Избыток quote продаётся за base


# =============================================================================
# REBALANCE PLAN MODEL
# =============================================================================


class RebalancePlan(BaseModel):
    """
    План ребалансировки.

    Immutable модель (frozen=True). Заполнение итоговых количеств
    создаёт новый экземпляр (model_copy).
    """

    direction: SwapDirection = Field(..., description="Направление swap")
    swap_amount: Decimal = Field(..., ge=0, description="Входное количество swap (source asset)")

    # Заполняются после исполнения swap
    resulting_base_amount: Optional[Decimal] = Field(
        None, ge=0, description="Количество base для deposit"
    )
    resulting_quote_amount: Optional[Decimal] = Field(
        None, ge=0, description="Количество quote для deposit"
    )

    model_config = {"frozen": True}

    @field_validator(
        "swap_amount", "resulting_base_amount", "resulting_quote_amount", mode="before"
    )
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @property
    def is_noop(self) -> bool:
        """Swap с нулевым количеством (нечего менять)."""
        return self.swap_amount == 0

    @property
    def is_settled(self) -> bool:
        """Итоговые количества для deposit уже известны."""
        return self.resulting_base_amount is not None and self.resulting_quote_amount is not None
