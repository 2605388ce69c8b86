"""
Tests for hash chain integrity of the checkpoint and deposit logs.

Critical: rewriting any historical record must be detected.
"""

import json
import os
import tempfile

import pytest

from metabond.core.clock import FixedWeekClock
from metabond.core.errors import EventStoreError, IntegrityError
from metabond.core.events import Event
from metabond.log import FileEventStore, MemoryEventStore, ZERO_HASH, hash_event
from metabond.rewards.ledger import CheckpointLedger


def _fill(path, weeks=5):
    ledger = CheckpointLedger(FileEventStore(path), FixedWeekClock(weeks))
    for week in range(1, weeks + 1):
        ledger.append(week, 1000 * week, 100 * week)
    return ledger


def _rewrite(path, mutate):
    with open(path, "r") as f:
        records = [json.loads(line) for line in f if line.strip()]
    mutate(records)
    with open(path, "w") as f:
        for rec in records:
            f.write(json.dumps(rec) + "\n")


def test_genesis_record_has_zero_hash():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        _fill(path, weeks=1)

        with open(path, "r") as f:
            rec = json.loads(f.readline())

        assert rec["prev_hash"] == ZERO_HASH
        assert rec["event"]["seq"] == 0


def test_hash_chain_links():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        ledger = _fill(path)

        with open(path, "r") as f:
            records = [json.loads(line) for line in f]

        for prev_rec, curr_rec in zip(records, records[1:]):
            assert curr_rec["prev_hash"] == prev_rec["event_hash"]
        assert records[-1]["event_hash"] == ledger.head_hash()
        assert FileEventStore(path).verify() == ledger.head_hash()


def test_hash_determinism():
    e = Event(type="CheckpointAdded", aggregate_id="checkpoints", seq=0, ts=1, payload={"week": 1})

    h1 = hash_event(ZERO_HASH, e)
    h2 = hash_event(ZERO_HASH, e)

    assert h1 == h2
    assert len(h1) == 64


def test_payload_key_order_does_not_matter():
    e1 = Event(type="T", aggregate_id="A", seq=0, ts=1, payload={"a": "1", "b": "2"})
    e2 = Event(type="T", aggregate_id="A", seq=0, ts=1, payload={"b": "2", "a": "1"})

    assert hash_event(ZERO_HASH, e1) == hash_event(ZERO_HASH, e2)


def test_tampered_checkpoint_detected():
    """Raising a past week's total supply must break verification."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        _fill(path)

        def bump(records):
            records[2]["event"]["payload"]["total_delegation_supply"] = "1"

        _rewrite(path, bump)

        with pytest.raises(IntegrityError, match="Hash mismatch at seq=2"):
            FileEventStore(path).verify()


def test_deleted_record_detected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        _fill(path)

        _rewrite(path, lambda records: records.pop(1))

        with pytest.raises(IntegrityError, match="Sequence gap"):
            FileEventStore(path).verify()


def test_relinked_record_detected():
    """Recomputing a record's own hash is not enough; the next link breaks."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        _fill(path)

        def forge(records):
            rec = records[1]
            rec["event"]["payload"]["total_lkmex_staked"] = "0"
            rec["event_hash"] = hash_event(rec["prev_hash"], Event.from_dict(rec["event"]))

        _rewrite(path, forge)

        with pytest.raises(IntegrityError, match="Hash chain broken at seq=2"):
            FileEventStore(path).verify()


def test_memory_and_file_stores_agree():
    """Both stores produce the same chain for the same events."""
    with tempfile.TemporaryDirectory() as tmpdir:
        file_store = FileEventStore(os.path.join(tmpdir, "x.log"))
        mem_store = MemoryEventStore()
        for i in range(5):
            e = Event(type="T", aggregate_id="A", ts=i, payload={"i": str(i)})
            file_store.append(e)
            mem_store.append(e)

        assert list(file_store.records()) == list(mem_store.records())
        assert file_store.get_last_hash() == mem_store.get_last_hash()


def test_conflicting_append_does_not_write():
    store = MemoryEventStore()
    r1 = store.append(Event(type="T", aggregate_id="A", ts=1), expected_prev_hash=ZERO_HASH)
    assert r1.committed
    assert r1.seq == 0

    r2 = store.append(Event(type="T", aggregate_id="A", ts=2), expected_prev_hash=ZERO_HASH)
    assert r2.conflict
    assert not r2.committed
    assert r2.observed_prev_hash == r1.event_hash
    assert len(store) == 1


def test_record_missing_prev_hash_detected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        _fill(path, weeks=1)

        _rewrite(path, lambda records: records[0].pop("prev_hash"))

        with pytest.raises(IntegrityError, match="Malformed record at position 0"):
            FileEventStore(path).verify()


def test_record_missing_event_detected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "checkpoints.log")
        with open(path, "w") as f:
            f.write(json.dumps({"prev_hash": "x", "event_hash": "y"}) + "\n")

        with pytest.raises(IntegrityError, match="Malformed record"):
            FileEventStore(path).verify()
        with pytest.raises(EventStoreError, match="Malformed record"):
            CheckpointLedger(FileEventStore(path), FixedWeekClock(1))


def test_record_without_seq_rejected_on_read():
    store = MemoryEventStore()
    store.append(Event(type="T", aggregate_id="A", ts=1))
    del store._records[0]["event"]["seq"]

    with pytest.raises(EventStoreError, match="Malformed record"):
        list(store.read())
