"""
Rewards query service.

Answers "what does a user holding these stakes earn in week w?" by combining
the checkpoint for w, the registry and the deposit flags. Read-only: calling
it any number of times changes nothing.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..core.errors import CheckpointOutOfRangeError, WeekNotCheckpointedError
from ..core.state import ClaimFlags
from ..core.types import Project, RewardEntry, WeeklyRewards, Week, require_uint
from ..logging_config import get_logger
from ..metrics import track_query_duration, track_reward_entries
from ..registry import ProjectRegistry
from .calculator import RewardCalculator
from .deposits import DepositGate
from .index import ActiveWeekIndex
from .ledger import CheckpointLedger


class RewardsQueryService:
    """
    Orchestrates ledger lookup, registry scan and reward calculation.

    Args:
        registry: Project registry (iteration order = result order)
        ledger: Checkpoint ledger providing weekly totals
        deposits: Deposit gate; undeposited projects are skipped silently
        calculator: Reward calculator (default RewardCalculator())
        use_index: Reuse per-week active project lists between queries
        claims: Persisted claimed flags, exposed read-only via is_claimed()
    """

    def __init__(
        self,
        registry: ProjectRegistry,
        ledger: CheckpointLedger,
        deposits: DepositGate,
        calculator: Optional[RewardCalculator] = None,
        use_index: bool = False,
        claims: Optional[ClaimFlags] = None,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.deposits = deposits
        self.calculator = calculator or RewardCalculator()
        self.index = ActiveWeekIndex(registry) if use_index else None
        self.claims = claims or ClaimFlags()

    def _candidates(self, week: Week) -> Iterable[Tuple[str, Project]]:
        if self.index is not None:
            return self.index.active(week)
        return (
            (project_id, project)
            for project_id, project in self.registry.iterate()
            if project.is_active(week)
        )

    def get_rewards_for_week(
        self,
        week: Week,
        user_delegation_amount: int,
        user_lkmex_staked_amount: int,
    ) -> WeeklyRewards:
        """
        Compute a user's non-zero rewards for `week`.

        Raises:
            WeekNotCheckpointedError: If no checkpoint exists for week
            ValueError: If a user amount is not a non-negative integer
        """
        require_uint(user_delegation_amount, "user_delegation_amount")
        require_uint(user_lkmex_staked_amount, "user_lkmex_staked_amount")

        try:
            checkpoint = self.ledger.get(week)
        except CheckpointOutOfRangeError as ex:
            raise WeekNotCheckpointedError(f"No rewards checkpoint for week {week}") from ex

        entries: List[RewardEntry] = []
        with track_query_duration():
            for project_id, project in self._candidates(week):
                if not self.deposits.is_deposited(project_id):
                    continue

                amount = self.calculator.calculate(
                    project,
                    user_delegation_amount,
                    user_lkmex_staked_amount,
                    checkpoint,
                )
                if amount > 0:
                    entries.append(RewardEntry(project_id, project.reward_token, amount))

        track_reward_entries(len(entries))
        get_logger(__name__, trace_id=f"week-{week}").debug(
            "Rewards query returned %d entries", len(entries)
        )
        return WeeklyRewards(week=week, entries=tuple(entries))

    def get_rewards_table(
        self,
        week: Week,
        user_delegation_amount: int,
        user_lkmex_staked_amount: int,
    ) -> List[Dict[str, str]]:
        """Same as get_rewards_for_week, flattened to JSON-safe dicts."""
        rewards = self.get_rewards_for_week(week, user_delegation_amount, user_lkmex_staked_amount)
        return [entry.to_dict() for entry in rewards]

    def is_claimed(self, user: str, week: Week) -> bool:
        return self.claims.is_claimed(user, week)
