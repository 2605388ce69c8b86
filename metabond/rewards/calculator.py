"""
Pro-rata reward computation.

Pure integer arithmetic, no I/O. The two pools are divided by the project
duration separately and each share is floored on its own, so the same
inputs always reproduce the same amount. Remainders are dropped.
"""

from typing import Tuple

from ..core.types import Project, RewardsCheckpoint


def calculate_ratio(amount: int, part: int, total: int) -> int:
    """
    floor(amount * part / total), or 0 when total is 0.

    Multiplication happens before division to keep full precision.
    """
    if total == 0:
        return 0
    return (amount * part) // total


def weekly_pools(project: Project) -> Tuple[int, int]:
    """Return (weekly_delegation_pool, weekly_lkmex_pool) for a project."""
    duration = project.duration_weeks
    return (
        project.delegation_reward_supply // duration,
        project.lkmex_reward_supply // duration,
    )


def calculate_reward_amount(
    project: Project,
    user_delegation_amount: int,
    user_lkmex_staked_amount: int,
    checkpoint: RewardsCheckpoint,
) -> int:
    weekly_delegation, weekly_lkmex = weekly_pools(project)

    rewards_delegation = calculate_ratio(
        weekly_delegation,
        user_delegation_amount,
        checkpoint.total_delegation_supply,
    )
    rewards_lkmex = calculate_ratio(
        weekly_lkmex,
        user_lkmex_staked_amount,
        checkpoint.total_lkmex_staked,
    )

    return rewards_delegation + rewards_lkmex


class RewardCalculator:
    """Injectable wrapper around calculate_reward_amount."""

    def calculate(
        self,
        project: Project,
        user_delegation_amount: int,
        user_lkmex_staked_amount: int,
        checkpoint: RewardsCheckpoint,
    ) -> int:
        return calculate_reward_amount(
            project, user_delegation_amount, user_lkmex_staked_amount, checkpoint
        )
