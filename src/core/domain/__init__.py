"""
Domain models and value objects.

Contains the LP position, pool snapshot, rebalance plan, venue results
and the rebalance cycle states.
"""

from src.core.domain.plan import RebalancePlan, SwapDirection
from src.core.domain.pool import LAMPORTS_PER_SOL, PoolSnapshot
from src.core.domain.position import Position, coerce_decimal
from src.core.domain.results import DepositResult, SwapResult, WithdrawResult
from src.core.domain.states import RebalanceStage, RebalanceState

__all__ = [
    # Position model
    "Position",
    "coerce_decimal",
    # Pool snapshot
    "PoolSnapshot",
    "LAMPORTS_PER_SOL",
    # Rebalance plan
    "RebalancePlan",
    "SwapDirection",
    # Venue results
    "WithdrawResult",
    "SwapResult",
    "DepositResult",
    # Cycle states
    "RebalanceState",
    "RebalanceStage",
]
