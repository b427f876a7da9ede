"""
Position — Модель целевой LP позиции

Immutable Pydantic модель, описывающая LP позицию в двухактивном пуле:
целевые количества base/quote и идентификатор пула.

Создаётся один раз при конфигурации и дальше только читается.
Один Rebalancer управляет ровно одной парой Position/pool.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator


def coerce_decimal(value: Any) -> Any:
    """
    Конверсия float → Decimal через str.

    Decimal(0.1) даёт двоичный хвост; YAML и JSON отдают float,
    поэтому все денежные поля проходят через этот конвертер.
    """
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# POSITION MODEL
# =============================================================================


class Position(BaseModel):
    """
    Модель LP позиции с целевой аллокацией.

    Инварианты:
    - target_base_amount > 0, target_quote_amount > 0
    - pool_id непустой и неизменяемый (frozen=True)
    """

    # Идентификация
    pool_id: str = Field(..., min_length=1, description="Идентификатор пула на venue")
    base_symbol: str = Field("SOL", min_length=1, description="Символ base актива (для логов)")
    quote_symbol: str = Field("TOKEN", min_length=1, description="Символ quote актива (для логов)")

    # Целевая аллокация (human-readable units)
    target_base_amount: Decimal = Field(..., gt=0, description="Целевое количество base")
    target_quote_amount: Decimal = Field(..., gt=0, description="Целевое количество quote")

    model_config = {"frozen": True}  # Immutable

    @field_validator("target_base_amount", "target_quote_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)
