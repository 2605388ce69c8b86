"""
Checkpoint ledger: append-only weekly stake totals.

Week w's checkpoint is the denominator basis for every reward paid in week w.
The ledger only grows, one week at a time, and never past the current week.
"""

from typing import Any, Dict, Iterator, Optional, Tuple

from ..core.clock import WeekClock
from ..core.errors import CheckpointOutOfRangeError, EventStoreError, InvalidCheckpointOrderError
from ..core.events import Event, CHECKPOINT_ADDED, LEDGER_AGG_ID
from ..core.state import LedgerState
from ..core.types import RewardsCheckpoint, Week
from ..log.store import EventStore
from ..logging_config import get_logger
from ..metrics import set_ledger_length, track_command
from ..replay import replay
from .handlers import ledger_reducer


class CheckpointLedger:
    """
    Owned, append-only sequence of RewardsCheckpoint records.

    State is rebuilt from the event store at construction and then kept in
    step with every successful append. A failed append leaves both the store
    and the in-memory state untouched.

    Usage:
        ledger = CheckpointLedger(FileEventStore(path), FixedWeekClock(3))
        ledger.append(1, total_delegation_supply=100, total_lkmex_staked=50)
        ledger.get(1)
    """

    def __init__(self, store: EventStore, clock: WeekClock) -> None:
        self.store = store
        self.clock = clock
        self._reducer = ledger_reducer()
        result = replay(store, self._reducer)
        self._state: LedgerState = result.state
        self._head_hash: str = result.last_hash
        set_ledger_length(self.length())

    @property
    def state(self) -> LedgerState:
        return self._state

    def length(self) -> int:
        return len(self._state.checkpoints)

    def last_checkpoint_week(self) -> Week:
        return self._state.last_week

    def head_hash(self) -> str:
        return self._head_hash

    def append(
        self,
        week: Week,
        total_delegation_supply: int,
        total_lkmex_staked: int,
        meta: Optional[Dict[str, Any]] = None,
    ) -> RewardsCheckpoint:
        """
        Append the checkpoint for `week`.

        Raises:
            InvalidCheckpointOrderError: Unless week == length() + 1 and
                week <= clock.current_week()
            ValueError: If a total is not a non-negative integer
            EventStoreError: If the write fails or another writer got there first
        """
        log = get_logger(__name__, trace_id=f"week-{week}")
        last_week = self.last_checkpoint_week()
        current_week = self.clock.current_week()

        if isinstance(week, bool) or not isinstance(week, int) or not (
            week == last_week + 1 and week <= current_week
        ):
            track_command("append_checkpoint", InvalidCheckpointOrderError.__name__)
            log.warning(
                "Rejected checkpoint: last week %s, current week %s", last_week, current_week
            )
            raise InvalidCheckpointOrderError(
                f"Invalid checkpoint week {week}: expected {last_week + 1}, "
                f"current week is {current_week}"
            )

        checkpoint = RewardsCheckpoint(
            total_delegation_supply=total_delegation_supply,
            total_lkmex_staked=total_lkmex_staked,
        )
        payload = {"week": week}
        payload.update(checkpoint.to_dict())
        event = Event(
            type=CHECKPOINT_ADDED,
            aggregate_id=LEDGER_AGG_ID,
            ts=current_week,
            payload=payload,
            meta=dict(meta or {}),
        )

        result = self.store.append(event, expected_prev_hash=self._head_hash)
        if not result.committed:
            track_command("append_checkpoint", EventStoreError.__name__)
            raise EventStoreError(
                f"Checkpoint log head moved (expected {self._head_hash[:16]}, "
                f"observed {(result.observed_prev_hash or '')[:16]}); reload the ledger"
            )

        self._state = self._reducer.apply(self._state, result.event)
        self._head_hash = result.event_hash
        track_command("append_checkpoint", "ok")
        set_ledger_length(self.length())
        log.info("Checkpoint appended at seq=%s hash=%s", result.seq, result.event_hash)
        return checkpoint

    def get(self, week: Week) -> RewardsCheckpoint:
        """
        Return the checkpoint appended as `week`.

        Raises:
            CheckpointOutOfRangeError: If week < 1 or week > length()
        """
        if isinstance(week, bool) or not isinstance(week, int) or not 1 <= week <= self.length():
            raise CheckpointOutOfRangeError(
                f"Week {week} out of range: ledger holds weeks 1..{self.length()}"
            )
        return self._state.checkpoints[week - 1]

    def checkpoints(self) -> Iterator[Tuple[Week, RewardsCheckpoint]]:
        for idx, checkpoint in enumerate(self._state.checkpoints):
            yield idx + 1, checkpoint
