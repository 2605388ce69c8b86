"""
Core deterministic primitives for the rewards engine.

This module provides:
- Types: checkpoints, projects, reward entries
- Event: Immutable records of accepted commands
- State: Ledger, deposit and claim state
- Reducer: Pure functions for state transitions
- Canonical: Deterministic serialization
- Clock: Week sources
"""

from .types import (
    Week,
    RewardsCheckpoint,
    Project,
    RewardEntry,
    WeeklyRewards,
    require_uint,
)
from .events import Event, CHECKPOINT_ADDED, REWARDS_DEPOSITED, LEDGER_AGG_ID
from .state import LedgerState, DepositState, ClaimFlags
from .reducer import Reducer
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str
from .clock import WeekClock, FixedWeekClock, EpochWeekClock, SECONDS_PER_WEEK
from .errors import (
    RewardsError,
    InvalidCheckpointOrderError,
    CheckpointOutOfRangeError,
    WeekNotCheckpointedError,
    AlreadyDepositedError,
    UnknownProjectError,
    TokenMismatchError,
    AmountMismatchError,
    InvalidTransitionError,
    IntegrityError,
    EventStoreError,
)

__all__ = [
    "Week",
    "RewardsCheckpoint",
    "Project",
    "RewardEntry",
    "WeeklyRewards",
    "require_uint",
    "Event",
    "CHECKPOINT_ADDED",
    "REWARDS_DEPOSITED",
    "LEDGER_AGG_ID",
    "LedgerState",
    "DepositState",
    "ClaimFlags",
    "Reducer",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "WeekClock",
    "FixedWeekClock",
    "EpochWeekClock",
    "SECONDS_PER_WEEK",
    "RewardsError",
    "InvalidCheckpointOrderError",
    "CheckpointOutOfRangeError",
    "WeekNotCheckpointedError",
    "AlreadyDepositedError",
    "UnknownProjectError",
    "TokenMismatchError",
    "AmountMismatchError",
    "InvalidTransitionError",
    "IntegrityError",
    "EventStoreError",
]
