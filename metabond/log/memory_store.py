"""
In-process event store.

Used by tests and by callers that persist elsewhere. Same chain format as
FileEventStore.
"""

from typing import Any, Dict, Iterator, List, Optional

from ..core.events import Event
from .integrity import ZERO_HASH, chain_record
from .store import AppendResult, EventStore


class MemoryEventStore(EventStore):
    """Append-only list of chain records."""

    def __init__(self) -> None:
        self._records: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._records)

    def append(self, event: Event, expected_prev_hash: Optional[str] = None) -> AppendResult:
        last_hash = self._records[-1]["event_hash"] if self._records else ZERO_HASH
        if expected_prev_hash is not None and expected_prev_hash != last_hash:
            return AppendResult(
                event=event,
                seq=None,
                event_hash=None,
                prev_hash=None,
                committed=False,
                conflict=True,
                observed_prev_hash=last_hash,
            )

        e2 = event.with_seq(len(self._records))
        rec = chain_record(last_hash, e2)
        self._records.append(rec)
        return AppendResult(
            event=e2,
            seq=e2.seq,
            event_hash=rec["event_hash"],
            prev_hash=last_hash,
            committed=True,
            conflict=False,
            observed_prev_hash=last_hash,
        )

    def records(self) -> Iterator[Dict[str, Any]]:
        for rec in list(self._records):
            yield rec

    def get_last_hash(self) -> str:
        return self._records[-1]["event_hash"] if self._records else ZERO_HASH
