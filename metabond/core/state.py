"""
Owned state for the checkpoint ledger and the deposit gate.

Each state object is immutable and derived purely by replaying its own event
log. Use the with_* helpers to build the next state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from .types import RewardsCheckpoint, Week


@dataclass(frozen=True)
class LedgerState:
    """
    Checkpoint ledger state.

    checkpoints[i] is the checkpoint for week i + 1.
    """
    checkpoints: Tuple[RewardsCheckpoint, ...] = ()

    @staticmethod
    def initial() -> "LedgerState":
        return LedgerState()

    @property
    def last_week(self) -> Week:
        return len(self.checkpoints)

    def with_checkpoint(self, checkpoint: RewardsCheckpoint) -> "LedgerState":
        return LedgerState(checkpoints=self.checkpoints + (checkpoint,))

    def to_dict(self) -> Dict[str, Any]:
        return {"checkpoints": [cp.to_dict() for cp in self.checkpoints]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "LedgerState":
        data = data or {}
        return LedgerState(
            checkpoints=tuple(RewardsCheckpoint.from_dict(d) for d in data.get("checkpoints", []))
        )


@dataclass(frozen=True)
class DepositState:
    """Set of project ids whose reward pool has been funded."""
    deposited: FrozenSet[str] = field(default_factory=frozenset)

    @staticmethod
    def initial() -> "DepositState":
        return DepositState()

    def is_deposited(self, project_id: str) -> bool:
        return project_id in self.deposited

    def with_deposit(self, project_id: str) -> "DepositState":
        return DepositState(deposited=self.deposited | {project_id})

    def to_dict(self) -> Dict[str, Any]:
        return {"deposited": sorted(self.deposited)}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "DepositState":
        data = data or {}
        return DepositState(deposited=frozenset(data.get("deposited", [])))


@dataclass(frozen=True)
class ClaimFlags:
    """
    Persisted per-(user, week) claimed flags.

    Nothing in this package sets a flag; the mapping is loaded as-is and only
    read. Rewards queries never consult it.
    """
    claimed: FrozenSet[Tuple[str, Week]] = field(default_factory=frozenset)

    def is_claimed(self, user: str, week: Week) -> bool:
        return (user, week) in self.claimed

    def to_dict(self) -> Dict[str, Any]:
        return {"claimed": [[user, week] for user, week in sorted(self.claimed)]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ClaimFlags":
        data = data or {}
        return ClaimFlags(
            claimed=frozenset((str(user), int(week)) for user, week in data.get("claimed", []))
        )
