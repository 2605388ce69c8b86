"""
Hash chain integrity for the checkpoint and deposit logs.

Each record carries the hash of the previous record, so rewriting any
historical checkpoint or deposit changes every later hash.
"""

import hashlib
from typing import Any, Dict, Iterable

from ..core.canonical import canonical_json_bytes
from ..core.errors import IntegrityError
from ..core.events import Event

ZERO_HASH = "0" * 64


def _event_dict_for_hash(event: Event) -> Dict[str, Any]:
    return {
        "type": event.type,
        "aggregate_id": event.aggregate_id,
        "seq": event.seq,
        "ts": event.ts,
        "payload": event.payload,
        "meta": event.meta,
    }


def hash_event(prev_hash: str, event: Event) -> str:
    """
    Compute hash of event chained to previous hash.

    Hash input: prev_hash + canonical_json(event_data)

    Args:
        prev_hash: Hash of previous event (or ZERO_HASH for genesis)
        event: Event to hash (seq must already be assigned)

    Returns:
        SHA-256 hash as hex string
    """
    data = _event_dict_for_hash(event)
    b = prev_hash.encode("utf-8") + canonical_json_bytes(data)
    return hashlib.sha256(b).hexdigest()


def chain_record(prev_hash: str, event: Event) -> Dict[str, Any]:
    """
    Create hash chain record for storage.

    Record includes:
    - prev_hash: Hash of previous event
    - event_hash: Hash of this event
    - event: Full event data
    """
    h = hash_event(prev_hash, event)
    return {
        "prev_hash": prev_hash,
        "event_hash": h,
        "event": _event_dict_for_hash(event),
    }


def verify_records(records: Iterable[Dict[str, Any]]) -> str:
    """
    Walk a sequence of chain records and check every link.

    Checks, per record:
    - prev_hash equals the previous record's event_hash (ZERO_HASH first)
    - seq is contiguous starting at 0
    - event_hash matches the recomputed hash

    Returns:
        Hash of the last record (ZERO_HASH for an empty log)

    Raises:
        IntegrityError: On the first broken link
    """
    prev_hash = ZERO_HASH
    expected_seq = 0
    for rec in records:
        try:
            event = Event.from_dict(rec["event"])
            rec_prev_hash = rec["prev_hash"]
            rec_event_hash = rec["event_hash"]
        except (KeyError, TypeError) as ex:
            raise IntegrityError(f"Malformed record at position {expected_seq}: {ex!r}") from ex
        if event.seq != expected_seq:
            raise IntegrityError(
                f"Sequence gap detected: expected seq={expected_seq}, got {event.seq}"
            )
        if rec_prev_hash != prev_hash:
            raise IntegrityError(
                f"Hash chain broken at seq={event.seq}: "
                f"expected prev_hash={prev_hash}, got {rec_prev_hash}"
            )
        recomputed = hash_event(prev_hash, event)
        if recomputed != rec_event_hash:
            raise IntegrityError(
                f"Hash mismatch at seq={event.seq}: "
                f"expected {rec_event_hash}, recomputed {recomputed}"
            )
        prev_hash = rec_event_hash
        expected_seq += 1
    return prev_hash
