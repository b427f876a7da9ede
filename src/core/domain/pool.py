"""
PoolSnapshot — Снапшот количеств позиции в пуле

Текущие on-chain количества base/quote в human-readable units.
Base актив нормализуется делителем наименьшей единицы
(lamports → SOL, 1 SOL = 1_000_000_000 lamports).

Создаётся заново на каждой проверке диапазона, не мутирует.
"""

from decimal import Decimal
from typing import Any, Final, Union

from pydantic import BaseModel, Field, field_validator

from .position import coerce_decimal


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Количество lamports в одном SOL
LAMPORTS_PER_SOL: Final[int] = 1_000_000_000


# =============================================================================
# POOL SNAPSHOT MODEL
# =============================================================================


class PoolSnapshot(BaseModel):
    """
    Снапшот текущих количеств base/quote позиции.

    Immutable модель (frozen=True). Количества неотрицательные.
    """

    base_amount: Decimal = Field(..., ge=0, description="Текущее количество base (human units)")
    quote_amount: Decimal = Field(..., ge=0, description="Текущее количество quote (human units)")

    model_config = {"frozen": True}

    @field_validator("base_amount", "quote_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @classmethod
    def from_raw_amounts(
        cls,
        base_raw: Union[int, str, Decimal],
        quote_raw: Union[int, str, Decimal],
        base_divisor: Union[int, Decimal] = LAMPORTS_PER_SOL,
        quote_divisor: Union[int, Decimal] = 1,
    ) -> "PoolSnapshot":
        """
        Построение снапшота из сырых on-chain количеств.

        Args:
            base_raw: Количество base в наименьших единицах (например, lamports)
            quote_raw: Количество quote (по умолчанию уже в human units)
            base_divisor: Делитель наименьшей единицы base (default: LAMPORTS_PER_SOL)
            quote_divisor: Делитель наименьшей единицы quote (default: 1)

        Returns:
            PoolSnapshot в human-readable units

        Raises:
            ValueError: Если делитель не положительный
        """
        base_div = Decimal(str(base_divisor))
        quote_div = Decimal(str(quote_divisor))
        if base_div <= 0 or quote_div <= 0:
            raise ValueError(
                f"divisors must be positive, got base={base_div}, quote={quote_div}"
            )

        return cls(
            base_amount=Decimal(str(base_raw)) / base_div,
            quote_amount=Decimal(str(quote_raw)) / quote_div,
        )
