"""Тесты для Position Tracker.

Coverage:
- Конъюнктивная проверка drift по base и quote
- Граница tolerance (включительно)
- Fail-fast на нулевых targets и tolerance вне (0, 1]
"""

from decimal import Decimal

import pytest

from src.core.domain import PoolSnapshot, Position
from src.core.errors import ConfigurationError
from src.rebalancer.tracker import (
    DEFAULT_TOLERANCE,
    is_in_range,
    measure_drift,
    relative_drift,
    validate_tolerance,
)


@pytest.fixture
def position() -> Position:
    return Position(pool_id="pool", target_base_amount=Decimal("5"), target_quote_amount=Decimal("5"))


def snapshot(base: str, quote: str) -> PoolSnapshot:
    return PoolSnapshot(base_amount=Decimal(base), quote_amount=Decimal(quote))


class TestIsInRange:
    """Тесты is_in_range."""

    def test_exact_target_in_range(self, position):
        assert is_in_range(snapshot("5", "5"), position)

    def test_one_percent_drift_in_range(self, position):
        """5.05 / 4.95 при target 5/5 → 1% drift."""
        assert is_in_range(snapshot("5.05", "4.95"), position)

    def test_twenty_percent_drift_out_of_range(self, position):
        assert not is_in_range(snapshot("6", "4"), position)

    def test_drift_equal_to_tolerance_in_range(self, position):
        """Ровно 10% — ещё в диапазоне (<=)."""
        assert is_in_range(snapshot("5.5", "4.5"), position)

    def test_drift_just_above_tolerance_out_of_range(self, position):
        assert not is_in_range(snapshot("5.5000001", "5"), position)

    def test_only_quote_drifted_out_of_range(self, position):
        """Достаточно отклонения по одному активу."""
        assert not is_in_range(snapshot("5", "3"), position)

    def test_only_base_drifted_out_of_range(self, position):
        assert not is_in_range(snapshot("7", "5"), position)

    def test_custom_tolerance(self, position):
        assert is_in_range(snapshot("6", "4"), position, tolerance=Decimal("0.2"))
        assert not is_in_range(snapshot("6", "4"), position, tolerance=Decimal("0.19"))

    def test_tolerance_one_accepts_full_drift(self, position):
        assert is_in_range(snapshot("10", "0"), position, tolerance=Decimal("1"))

    def test_default_tolerance(self):
        assert DEFAULT_TOLERANCE == Decimal("0.10")

    @pytest.mark.parametrize(
        "base,quote",
        [("4.5", "5.5"), ("5.2", "4.8"), ("4.99", "5.01"), ("5.5", "5.5")],
    )
    def test_within_tolerance_on_both_assets(self, position, base, quote):
        assert is_in_range(snapshot(base, quote), position)

    @pytest.mark.parametrize(
        "base,quote",
        [("4.49", "5"), ("5", "5.51"), ("0", "5"), ("5", "100")],
    )
    def test_beyond_tolerance_on_either_asset(self, position, base, quote):
        assert not is_in_range(snapshot(base, quote), position)


class TestConfigurationErrors:
    """Fail-fast на невалидной конфигурации."""

    def test_zero_target_base_raises(self):
        position = Position.model_construct(
            pool_id="pool",
            target_base_amount=Decimal("0"),
            target_quote_amount=Decimal("5"),
        )
        with pytest.raises(ConfigurationError, match="target_base_amount"):
            is_in_range(snapshot("5", "5"), position)

    def test_zero_target_quote_raises(self):
        position = Position.model_construct(
            pool_id="pool",
            target_base_amount=Decimal("5"),
            target_quote_amount=Decimal("0"),
        )
        with pytest.raises(ConfigurationError, match="target_quote_amount"):
            is_in_range(snapshot("5", "5"), position)

    @pytest.mark.parametrize("tolerance", ["0", "-0.1", "1.01", "NaN"])
    def test_invalid_tolerance_raises(self, position, tolerance):
        with pytest.raises(ConfigurationError, match="tolerance"):
            is_in_range(snapshot("5", "5"), position, tolerance=Decimal(tolerance))

    def test_validate_tolerance_accepts_float(self):
        assert validate_tolerance(0.25) == Decimal("0.25")

    def test_relative_drift_zero_target_raises(self):
        with pytest.raises(ConfigurationError):
            relative_drift(Decimal("1"), Decimal("0"))


class TestMeasureDrift:
    """Тесты measure_drift."""

    def test_drift_values(self, position):
        drift = measure_drift(snapshot("6", "4"), position)
        assert drift.base_drift == Decimal("0.2")
        assert drift.quote_drift == Decimal("0.2")
        assert drift.max_drift == Decimal("0.2")

    def test_drift_is_absolute(self, position):
        drift = measure_drift(snapshot("4", "5.5"), position)
        assert drift.base_drift == Decimal("0.2")
        assert drift.quote_drift == Decimal("0.1")

    def test_within(self, position):
        drift = measure_drift(snapshot("5.05", "4.95"), position)
        assert drift.within(Decimal("0.01"))
        assert not drift.within(Decimal("0.009"))
