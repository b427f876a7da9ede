"""
Contract Validation Module

Модуль для валидации JSON контрактов ребалансера: конфигурация и отчёт о цикле.
"""

from .validators import (
    ContractValidator,
    RebalanceConfigValidator,
    RebalanceReportValidator,
    SchemaLoader,
    validate_rebalance_config,
    validate_rebalance_report,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "RebalanceConfigValidator",
    "RebalanceReportValidator",
    # Functions
    "validate_rebalance_config",
    "validate_rebalance_report",
]
