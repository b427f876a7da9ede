"""
Venue Results — Результаты операций venue adapter

Immutable модели ответов адаптера на withdraw / swap / deposit.
tx_id опционален: адаптер может не раскрывать идентификатор транзакции.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .position import coerce_decimal


class WithdrawResult(BaseModel):
    """Количества, выведенные из пула при полном withdraw."""

    base_amount: Decimal = Field(..., ge=0, description="Выведенное количество base")
    quote_amount: Decimal = Field(..., ge=0, description="Выведенное количество quote")
    tx_id: Optional[str] = Field(None, description="Идентификатор транзакции")

    model_config = {"frozen": True}

    @field_validator("base_amount", "quote_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)


class SwapResult(BaseModel):
    """Фактически полученное количество после swap."""

    output_amount: Decimal = Field(..., ge=0, description="Полученное количество target asset")
    tx_id: Optional[str] = Field(None, description="Идентификатор транзакции")

    model_config = {"frozen": True}

    @field_validator("output_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)


class DepositResult(BaseModel):
    """Подтверждение deposit."""

    tx_id: Optional[str] = Field(None, description="Идентификатор транзакции")

    model_config = {"frozen": True}
