"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений constraints (min/max/enum/pattern)
- Интеграция с отчётами оркестратора
"""

from decimal import Decimal

import pytest
from jsonschema import Draft202012Validator, ValidationError

from src.core.contracts import (
    RebalanceConfigValidator,
    RebalanceReportValidator,
    SchemaLoader,
    validate_rebalance_config,
    validate_rebalance_report,
)
from src.core.domain import Position
from src.rebalancer.orchestrator import Rebalancer
from src.venue.paper import PaperVenueAdapter


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_config():
    """Валидная конфигурация ребалансера."""
    return {
        "pool_id": "pool-sol-token",
        "base_symbol": "SOL",
        "quote_symbol": "TOKEN",
        "target_base_amount": 5,
        "target_quote_amount": "5.0",
        "tolerance": 0.1,
        "interval_minutes": 30,
        "dry_run": True,
        "paper": {"position_base": 6, "position_quote": 4, "price": 1, "fee_bps": 25},
        "log_level": "INFO",
        "log_file": None,
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем."""

    @pytest.mark.parametrize("schema_name", ["rebalance_config", "rebalance_report"])
    def test_schemas_are_valid(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)
        Draft202012Validator.check_schema(schema)

    def test_schema_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("rebalance_config") is loader.load_schema("rebalance_config")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("no_such_schema")


# =============================================================================
# CONFIG CONTRACT
# =============================================================================


class TestRebalanceConfigContract:
    """Тесты контракта конфигурации."""

    def test_valid_config(self, valid_config):
        validate_rebalance_config(valid_config)

    def test_minimal_config(self):
        validate_rebalance_config(
            {"pool_id": "p", "target_base_amount": 1, "target_quote_amount": 1}
        )

    @pytest.mark.parametrize("field", ["pool_id", "target_base_amount", "target_quote_amount"])
    def test_missing_required_field(self, valid_config, field):
        del valid_config[field]
        with pytest.raises(ValidationError):
            validate_rebalance_config(valid_config)

    @pytest.mark.parametrize("value", [0, -1, "abc", "-5"])
    def test_invalid_target_amount(self, valid_config, value):
        valid_config["target_base_amount"] = value
        assert not RebalanceConfigValidator().is_valid(valid_config)

    @pytest.mark.parametrize("value", [0, 1.5])
    def test_tolerance_bounds(self, valid_config, value):
        valid_config["tolerance"] = value
        with pytest.raises(ValidationError):
            validate_rebalance_config(valid_config)

    def test_unknown_key_rejected(self, valid_config):
        valid_config["slippage"] = 0.01
        with pytest.raises(ValidationError):
            validate_rebalance_config(valid_config)

    def test_adapter_path_pattern(self, valid_config):
        valid_config["adapter"] = "my_venue.raydium:RaydiumVenueAdapter"
        validate_rebalance_config(valid_config)

        valid_config["adapter"] = "not a path"
        with pytest.raises(ValidationError):
            validate_rebalance_config(valid_config)

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"
        errors = list(RebalanceConfigValidator().iter_errors(valid_config))
        assert len(errors) == 1


# =============================================================================
# REPORT CONTRACT
# =============================================================================


class TestRebalanceReportContract:
    """Тесты контракта отчёта."""

    def test_report_from_paper_cycle(self):
        position = Position(pool_id="pool", target_base_amount=5, target_quote_amount=5)
        venue = PaperVenueAdapter(
            pool_id="pool", position_base=6, position_quote=4, price=1, fee_bps=25
        )

        report = Rebalancer(venue, position).rebalance().to_report()

        RebalanceReportValidator().validate(report)
        assert report["rebalanced"] is True
        assert Decimal(report["plan"]["resulting_quote_amount"]) == Decimal("4.9975")

    def test_invalid_status(self):
        report = {
            "status": "PENDING",
            "rebalanced": False,
            "failed_stage": None,
            "snapshot": None,
            "drift": None,
            "plan": None,
            "error": None,
            "stranded": None,
            "details": "",
        }
        with pytest.raises(ValidationError):
            validate_rebalance_report(report)

    def test_invalid_stage(self):
        report = {
            "status": "FAILED",
            "rebalanced": False,
            "failed_stage": "sign",
            "snapshot": None,
            "drift": None,
            "plan": None,
            "error": {"type": "TransactionError", "message": "x", "cause": None},
            "stranded": None,
            "details": "",
        }
        assert not RebalanceReportValidator().is_valid(report)
