"""
Reducer handlers for ledger and deposit state.

All handlers are pure and deterministic. They re-check the ordering rules so
that a hand-edited log cannot replay into a state the commands would reject.
"""

from ..core.events import Event, CHECKPOINT_ADDED, REWARDS_DEPOSITED
from ..core.errors import InvalidTransitionError
from ..core.reducer import Reducer
from ..core.state import LedgerState, DepositState
from ..core.types import RewardsCheckpoint


def on_checkpoint_added(state: LedgerState, ev: Event) -> LedgerState:
    payload = ev.payload or {}
    week = payload.get("week")
    if week != state.last_week + 1:
        raise InvalidTransitionError(
            f"CheckpointAdded for week {week} at seq={ev.seq}, expected week {state.last_week + 1}"
        )
    try:
        checkpoint = RewardsCheckpoint.from_dict(payload)
    except (KeyError, TypeError, ValueError) as ex:
        raise InvalidTransitionError(f"Malformed CheckpointAdded at seq={ev.seq}: {ex}") from ex
    return state.with_checkpoint(checkpoint)


def on_rewards_deposited(state: DepositState, ev: Event) -> DepositState:
    project_id = ev.aggregate_id
    if state.is_deposited(project_id):
        raise InvalidTransitionError(
            f"RewardsDeposited for already funded project {project_id} at seq={ev.seq}"
        )
    return state.with_deposit(project_id)


def ledger_reducer() -> Reducer:
    reducer = Reducer(LedgerState.initial())
    reducer.register(CHECKPOINT_ADDED, on_checkpoint_added)
    return reducer


def deposit_reducer() -> Reducer:
    reducer = Reducer(DepositState.initial())
    reducer.register(REWARDS_DEPOSITED, on_rewards_deposited)
    return reducer
