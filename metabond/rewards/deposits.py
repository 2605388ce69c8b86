"""
Deposit gate: one-shot funding of each project's reward pool.

A project only contributes to weekly rewards after its full reward supply has
been deposited, in its reward token, exactly once.
"""

from typing import Any, Dict, Optional, Tuple

from ..core.clock import WeekClock
from ..core.errors import (
    AlreadyDepositedError,
    AmountMismatchError,
    EventStoreError,
    RewardsError,
    TokenMismatchError,
    UnknownProjectError,
)
from ..core.events import Event, REWARDS_DEPOSITED
from ..core.state import DepositState
from ..core.types import Project, encode_amount, require_uint
from ..log.store import EventStore
from ..logging_config import get_logger
from ..metrics import track_command
from ..registry import ProjectRegistry
from ..replay import replay
from .handlers import deposit_reducer


class DepositGate:
    """
    Owned project_id -> deposited flag mapping.

    Flags only move from False to True. The payment itself is handled by the
    caller; the gate validates the (token, amount) it is told was paid.
    """

    def __init__(
        self,
        registry: ProjectRegistry,
        store: EventStore,
        clock: Optional[WeekClock] = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.clock = clock
        self._reducer = deposit_reducer()
        result = replay(store, self._reducer)
        self._state: DepositState = result.state
        self._head_hash: str = result.last_hash

    @property
    def state(self) -> DepositState:
        return self._state

    def head_hash(self) -> str:
        return self._head_hash

    def is_deposited(self, project_id: str) -> bool:
        return self._state.is_deposited(project_id)

    def deposited_projects(self) -> Tuple[str, ...]:
        return tuple(sorted(self._state.deposited))

    def _validate(self, project_id: str, paid_token: str, paid_amount: int) -> Project:
        if self.is_deposited(project_id):
            raise AlreadyDepositedError(f"Rewards already deposited for project {project_id}")
        require_uint(paid_amount, "paid_amount")

        project = self.registry.get(project_id)
        if project is None:
            raise UnknownProjectError(f"Invalid project ID: {project_id}")

        if paid_token != project.reward_token:
            raise TokenMismatchError(
                f"Invalid payment token for project {project_id}: "
                f"expected {project.reward_token}, got {paid_token}"
            )

        required = project.delegation_reward_supply + project.lkmex_reward_supply
        if paid_amount != required:
            raise AmountMismatchError(
                f"Invalid amount for project {project_id}: expected {required}, got {paid_amount}"
            )
        return project

    def deposit(
        self,
        project_id: str,
        paid_token: str,
        paid_amount: int,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Project:
        """
        Mark a project's reward pool as funded.

        Checks run in order: already deposited, amount type, unknown project,
        token, amount. The first failure is raised and nothing is written.

        Raises:
            AlreadyDepositedError, UnknownProjectError, TokenMismatchError,
            AmountMismatchError: Validation failures
            ValueError: If paid_amount is not a non-negative integer
            EventStoreError: If the write fails
        """
        log = get_logger(__name__, trace_id=project_id)

        try:
            project = self._validate(project_id, paid_token, paid_amount)
        except RewardsError as ex:
            track_command("deposit", type(ex).__name__)
            log.warning("Rejected deposit: %s", ex)
            raise

        event = Event(
            type=REWARDS_DEPOSITED,
            aggregate_id=project_id,
            ts=self.clock.current_week() if self.clock is not None else 0,
            payload={"token": paid_token, "amount": encode_amount(paid_amount)},
            meta=dict(meta or {}),
        )
        result = self.store.append(event, expected_prev_hash=self._head_hash)
        if not result.committed:
            track_command("deposit", EventStoreError.__name__)
            raise EventStoreError(
                f"Deposit log head moved (expected {self._head_hash[:16]}, "
                f"observed {(result.observed_prev_hash or '')[:16]}); reload the gate"
            )

        self._state = self._reducer.apply(self._state, result.event)
        self._head_hash = result.event_hash
        track_command("deposit", "ok")
        log.info("Rewards deposited: %s %s", paid_amount, paid_token)
        return project
