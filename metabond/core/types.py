"""
Reward accounting data model.

All records are frozen. Amounts are unbounded Python ints; when persisted
they are written as base-10 strings (see encode_amount / decode_amount).
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

Week = int


def require_uint(value: Any, name: str) -> int:
    """
    Validate a non-negative integer amount.

    bool is rejected even though it is an int subclass.

    Raises:
        ValueError: If value is not an int or is negative
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def encode_amount(value: int) -> str:
    return str(require_uint(value, "amount"))


def decode_amount(raw: Any) -> int:
    """Parse a persisted amount (string or int) back to int."""
    if isinstance(raw, bool):
        raise ValueError("amount must not be a boolean")
    return require_uint(int(raw), "amount")


@dataclass(frozen=True)
class RewardsCheckpoint:
    """
    Global stake totals at a week boundary.

    Fields:
        total_delegation_supply: Sum of all delegation positions
        total_lkmex_staked: Sum of all locked-stake positions
    """
    total_delegation_supply: int
    total_lkmex_staked: int

    def __post_init__(self) -> None:
        require_uint(self.total_delegation_supply, "total_delegation_supply")
        require_uint(self.total_lkmex_staked, "total_lkmex_staked")

    def to_dict(self) -> Dict[str, str]:
        return {
            "total_delegation_supply": encode_amount(self.total_delegation_supply),
            "total_lkmex_staked": encode_amount(self.total_lkmex_staked),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "RewardsCheckpoint":
        return RewardsCheckpoint(
            total_delegation_supply=decode_amount(data["total_delegation_supply"]),
            total_lkmex_staked=decode_amount(data["total_lkmex_staked"]),
        )


@dataclass(frozen=True)
class Project:
    """
    Reward program descriptor owned by the project registry.

    A project pays out during the inclusive week range [start_week, end_week];
    each pool is spread evenly over that range.
    """
    id: str
    reward_token: str
    delegation_reward_supply: int
    lkmex_reward_supply: int
    start_week: Week
    end_week: Week

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("project id must be a non-empty string")
        if not isinstance(self.reward_token, str) or not self.reward_token:
            raise ValueError("reward_token must be a non-empty string")
        require_uint(self.delegation_reward_supply, "delegation_reward_supply")
        require_uint(self.lkmex_reward_supply, "lkmex_reward_supply")
        require_uint(self.start_week, "start_week")
        require_uint(self.end_week, "end_week")
        if self.start_week < 1:
            raise ValueError(f"start_week must be >= 1, got {self.start_week}")
        if self.start_week > self.end_week:
            raise ValueError(
                f"start_week ({self.start_week}) must not exceed end_week ({self.end_week})"
            )

    @property
    def duration_weeks(self) -> int:
        return self.end_week - self.start_week + 1

    @property
    def total_reward_supply(self) -> int:
        return self.delegation_reward_supply + self.lkmex_reward_supply

    def is_active(self, week: Week) -> bool:
        return self.start_week <= week <= self.end_week

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "reward_token": self.reward_token,
            "delegation_reward_supply": encode_amount(self.delegation_reward_supply),
            "lkmex_reward_supply": encode_amount(self.lkmex_reward_supply),
            "start_week": self.start_week,
            "end_week": self.end_week,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Project":
        return Project(
            id=data["id"],
            reward_token=data["reward_token"],
            delegation_reward_supply=decode_amount(data["delegation_reward_supply"]),
            lkmex_reward_supply=decode_amount(data["lkmex_reward_supply"]),
            start_week=int(data["start_week"]),
            end_week=int(data["end_week"]),
        )


@dataclass(frozen=True)
class RewardEntry:
    """One project's payout for a single (user, week) query."""
    project_id: str
    token: str
    amount: int

    def to_dict(self) -> Dict[str, str]:
        return {
            "project_id": self.project_id,
            "token": self.token,
            "amount": encode_amount(self.amount),
        }


@dataclass(frozen=True)
class WeeklyRewards:
    """
    Result set of one rewards query, in registry order.

    Entries always have amount > 0.
    """
    week: Week
    entries: Tuple[RewardEntry, ...] = ()

    def __iter__(self) -> Iterator[RewardEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries
