"""
Position Tracker — Проверка отклонения позиции от целевой аллокации

Drift = |current - target| / target для каждого актива.
Позиция в диапазоне, только если drift <= tolerance по ОБОИМ активам.

Чистые функции без side effects. Нулевой target — ошибка конфигурации
(относительный drift не определён), а не "в диапазоне"/"вне диапазона".
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Final, Union

from src.core.domain.pool import PoolSnapshot
from src.core.domain.position import Position
from src.core.errors import ConfigurationError


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Допустимое относительное отклонение по умолчанию (10%)
DEFAULT_TOLERANCE: Final[Decimal] = Decimal("0.10")


@dataclass(frozen=True)
class DriftReport:
    """Относительный drift по каждому активу."""

    base_drift: Decimal
    quote_drift: Decimal

    @property
    def max_drift(self) -> Decimal:
        return max(self.base_drift, self.quote_drift)

    def within(self, tolerance: Decimal) -> bool:
        return self.base_drift <= tolerance and self.quote_drift <= tolerance


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_tolerance(tolerance: Union[Decimal, str, int, float]) -> Decimal:
    """
    Проверка tolerance ∈ (0, 1].

    Args:
        tolerance: Допустимое относительное отклонение (доля)

    Returns:
        tolerance как Decimal

    Raises:
        ConfigurationError: Если tolerance вне (0, 1]
    """
    try:
        value = tolerance if isinstance(tolerance, Decimal) else Decimal(str(tolerance))
    except InvalidOperation as e:
        raise ConfigurationError(f"tolerance must be a number, got {tolerance!r}") from e
    if not value.is_finite() or value <= 0 or value > 1:
        raise ConfigurationError(f"tolerance must be in (0, 1], got {tolerance}")
    return value


def validate_position(position: Position) -> Position:
    """
    Fail-fast проверка целевых количеств позиции.

    Pydantic уже запрещает нулевые targets при создании, но модель можно
    собрать в обход валидации (model_construct), поэтому проверка повторяется
    на границе расчётов.

    Raises:
        ConfigurationError: Если target_base_amount или target_quote_amount <= 0
    """
    if position.target_base_amount <= 0:
        raise ConfigurationError(
            f"target_base_amount must be positive, got {position.target_base_amount}"
        )
    if position.target_quote_amount <= 0:
        raise ConfigurationError(
            f"target_quote_amount must be positive, got {position.target_quote_amount}"
        )
    return position


# =============================================================================
# DRIFT
# =============================================================================


def relative_drift(current: Decimal, target: Decimal) -> Decimal:
    """
    Относительное отклонение |current - target| / target.

    Raises:
        ConfigurationError: Если target <= 0
    """
    if target <= 0:
        raise ConfigurationError(f"relative drift undefined for target {target}")
    return abs(current - target) / target


def measure_drift(snapshot: PoolSnapshot, position: Position) -> DriftReport:
    """Drift снапшота относительно целевой аллокации позиции."""
    validate_position(position)
    return DriftReport(
        base_drift=relative_drift(snapshot.base_amount, position.target_base_amount),
        quote_drift=relative_drift(snapshot.quote_amount, position.target_quote_amount),
    )


def is_in_range(
    snapshot: PoolSnapshot,
    position: Position,
    tolerance: Union[Decimal, str, int, float] = DEFAULT_TOLERANCE,
) -> bool:
    """
    Находится ли позиция в допустимом диапазоне.

    Args:
        snapshot: Текущие количества base/quote
        position: Целевая позиция
        tolerance: Допустимое относительное отклонение ∈ (0, 1] (default: 0.10)

    Returns:
        True если drift <= tolerance по base И по quote

    Raises:
        ConfigurationError: Нулевые targets или tolerance вне (0, 1]

    Examples:
        >>> target = Position(pool_id="p", target_base_amount=5, target_quote_amount=5)
        >>> is_in_range(PoolSnapshot(base_amount=6, quote_amount=4), target)
        False
    """
    return measure_drift(snapshot, position).within(validate_tolerance(tolerance))
