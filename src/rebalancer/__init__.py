"""Rebalancer — ребалансировка LP позиции.

- Position Tracker: drift позиции против целевой аллокации
- Rebalance Strategy: направление и объём swap, количества для deposit
- State machine и оркестратор цикла check → withdraw → swap → deposit
"""

from .orchestrator import Rebalancer
from .state_machine import RebalanceResult, RebalanceStateMachine, failure_report
from .strategy import compute_plan, settle_plan
from .tracker import (
    DEFAULT_TOLERANCE,
    DriftReport,
    is_in_range,
    measure_drift,
    relative_drift,
    validate_position,
    validate_tolerance,
)

__all__ = [
    "Rebalancer",
    "RebalanceResult",
    "RebalanceStateMachine",
    "failure_report",
    "compute_plan",
    "settle_plan",
    "DEFAULT_TOLERANCE",
    "DriftReport",
    "is_in_range",
    "measure_drift",
    "relative_drift",
    "validate_position",
    "validate_tolerance",
]
