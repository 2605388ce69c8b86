"""
Weekly reward accounting.

This module provides:
- CheckpointLedger: Append-only weekly stake totals
- DepositGate: One-shot reward pool funding
- RewardCalculator: Pure pro-rata computation
- RewardsQueryService: Per-user weekly reward lookup
"""

from .calculator import RewardCalculator, calculate_ratio, calculate_reward_amount, weekly_pools
from .deposits import DepositGate
from .handlers import ledger_reducer, deposit_reducer
from .index import ActiveWeekIndex
from .ledger import CheckpointLedger
from .query import RewardsQueryService

__all__ = [
    "RewardCalculator",
    "calculate_ratio",
    "calculate_reward_amount",
    "weekly_pools",
    "DepositGate",
    "ledger_reducer",
    "deposit_reducer",
    "ActiveWeekIndex",
    "CheckpointLedger",
    "RewardsQueryService",
]
