"""
Replay runner: reconstruct state from event log.

Replay is pure: applies reducer to each event in sequence order.
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..core.reducer import Reducer
from ..log.store import EventStore
from ..log.integrity import ZERO_HASH, hash_event


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        state: Final state after applying events
        applied: Number of events applied
        last_hash: Chain hash of the last applied event
    """
    state: Any
    applied: int
    last_hash: str = ZERO_HASH


def replay(
    store: EventStore,
    reducer: Reducer,
    to_seq: Optional[int] = None,
) -> ReplayResult:
    """
    Replay events to reconstruct state.

    The hash chain is recomputed while folding, so the returned last_hash is
    derived from the events themselves rather than trusted from storage.

    Args:
        store: Event store to read from
        reducer: Reducer with registered handlers and an initial state
        to_seq: Stop at this sequence (inclusive, None = all)

    Returns:
        ReplayResult with final state, count and head hash
    """
    st = reducer.initial_state
    count = 0
    last_hash = ZERO_HASH

    for ev in store.read(from_seq=0):
        if to_seq is not None and ev.require_seq() > to_seq:
            break
        st = reducer.apply(st, ev)
        last_hash = hash_event(last_hash, ev)
        count += 1

    return ReplayResult(state=st, applied=count, last_hash=last_hash)
