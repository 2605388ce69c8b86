"""
Tests for the checkpoint ledger.

Critical: weeks are appended strictly in order, never past the current
week, and a rejected append changes nothing.
"""

import os
import tempfile

import pytest

from metabond.core.clock import FixedWeekClock
from metabond.core.errors import (
    CheckpointOutOfRangeError,
    EventStoreError,
    InvalidCheckpointOrderError,
    InvalidTransitionError,
)
from metabond.core.events import Event, CHECKPOINT_ADDED, LEDGER_AGG_ID
from metabond.core.types import RewardsCheckpoint
from metabond.log import FileEventStore, MemoryEventStore, ZERO_HASH
from metabond.rewards.ledger import CheckpointLedger


def test_empty_ledger():
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(5))

    assert ledger.length() == 0
    assert ledger.last_checkpoint_week() == 0
    assert ledger.head_hash() == ZERO_HASH
    assert list(ledger.checkpoints()) == []


def test_append_and_get_in_order():
    """get(w) returns exactly the record appended as week w."""
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(3))

    ledger.append(1, 100, 10)
    ledger.append(2, 200, 20)
    ledger.append(3, 300, 30)

    assert ledger.length() == 3
    assert ledger.get(1) == RewardsCheckpoint(100, 10)
    assert ledger.get(2) == RewardsCheckpoint(200, 20)
    assert ledger.get(3) == RewardsCheckpoint(300, 30)
    assert [w for w, _ in ledger.checkpoints()] == [1, 2, 3]


def test_append_must_be_next_week():
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(10))
    ledger.append(1, 100, 10)

    for bad_week in (0, 1, 3, 10, -1):
        with pytest.raises(InvalidCheckpointOrderError):
            ledger.append(bad_week, 100, 10)

    assert ledger.length() == 1


def test_append_cannot_exceed_current_week():
    """Week 3 cannot be checkpointed while the clock says week 2."""
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, FixedWeekClock(2))
    ledger.append(1, 100, 10)
    ledger.append(2, 100, 10)

    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append(3, 100, 10)

    assert ledger.length() == 2
    assert len(store) == 2


def test_append_before_first_week_rejected():
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(0))

    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append(1, 100, 10)


def test_rejected_append_leaves_state_unchanged():
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, FixedWeekClock(5))
    ledger.append(1, 100, 10)
    head = ledger.head_hash()
    state = ledger.state

    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append(5, 100, 10)

    assert ledger.head_hash() == head
    assert ledger.state is state
    assert len(store) == 1


def test_negative_totals_rejected_without_write():
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, FixedWeekClock(5))

    with pytest.raises(ValueError):
        ledger.append(1, -1, 10)

    assert ledger.length() == 0
    assert len(store) == 0


def test_non_integer_week_rejected():
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(5))

    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append(True, 1, 1)
    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append("1", 1, 1)


def test_get_out_of_range():
    ledger = CheckpointLedger(MemoryEventStore(), FixedWeekClock(5))
    ledger.append(1, 100, 10)

    for week in (0, -1, 2, 100):
        with pytest.raises(CheckpointOutOfRangeError):
            ledger.get(week)


def test_clock_advance_allows_next_week():
    clock = FixedWeekClock(1)
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, clock)
    ledger.append(1, 100, 10)

    with pytest.raises(InvalidCheckpointOrderError):
        ledger.append(2, 100, 10)

    ledger = CheckpointLedger(store, clock.advance())
    ledger.append(2, 150, 15)
    assert ledger.get(2) == RewardsCheckpoint(150, 15)


def test_ledger_survives_reopen():
    """State is rebuilt from the file log on construction."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        ledger = CheckpointLedger(FileEventStore(path), FixedWeekClock(4))
        ledger.append(1, 10**24, 5 * 10**23)
        ledger.append(2, 2 * 10**24, 6 * 10**23)
        head = ledger.head_hash()

        reopened = CheckpointLedger(FileEventStore(path), FixedWeekClock(4))

        assert reopened.length() == 2
        assert reopened.get(1) == RewardsCheckpoint(10**24, 5 * 10**23)
        assert reopened.head_hash() == head

        reopened.append(3, 1, 1)
        assert reopened.length() == 3


def test_foreign_writer_detected():
    """A write that bypassed this ledger instance must not be silently forked."""
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, FixedWeekClock(5))
    ledger.append(1, 100, 10)

    other = CheckpointLedger(store, FixedWeekClock(5))
    other.append(2, 200, 20)

    with pytest.raises(EventStoreError):
        ledger.append(2, 999, 99)

    assert ledger.length() == 1
    assert len(store) == 2


def test_amounts_persisted_as_strings():
    store = MemoryEventStore()
    ledger = CheckpointLedger(store, FixedWeekClock(1))
    ledger.append(1, 10**30, 7)

    events = list(store.read())
    assert events[0].type == CHECKPOINT_ADDED
    assert events[0].aggregate_id == LEDGER_AGG_ID
    assert events[0].payload == {
        "week": 1,
        "total_delegation_supply": str(10**30),
        "total_lkmex_staked": "7",
    }


def test_out_of_order_log_fails_replay():
    """A hand-written log that skips a week must not load."""
    store = MemoryEventStore()
    store.append(
        Event(
            type=CHECKPOINT_ADDED,
            aggregate_id=LEDGER_AGG_ID,
            ts=2,
            payload={"week": 2, "total_delegation_supply": "1", "total_lkmex_staked": "1"},
        )
    )

    with pytest.raises(InvalidTransitionError):
        CheckpointLedger(store, FixedWeekClock(5))
