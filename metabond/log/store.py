"""
EventStore abstract interface.

Defines contract for the append-only logs behind the checkpoint ledger and
the deposit gate.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from ..core.errors import EventStoreError
from ..core.events import Event
from .integrity import ZERO_HASH, verify_records


@dataclass(frozen=True)
class AppendResult:
    """
    Result of an append attempt.

    When committed is False and conflict is True, the event was not written.
    """

    event: Event
    seq: Optional[int]
    event_hash: Optional[str]
    prev_hash: Optional[str]
    committed: bool
    conflict: bool
    observed_prev_hash: Optional[str] = None


class EventStore(ABC):
    """
    Abstract event storage interface.

    All implementations must guarantee:
    - Append-only (no updates, no deletes)
    - Sequential ordering (events indexed by seq, starting at 0)
    - A single record per append (all-or-nothing)
    """

    @abstractmethod
    def append(self, event: Event, expected_prev_hash: Optional[str] = None) -> AppendResult:
        """
        Append event to log.

        Args:
            event: Event to append (seq will be assigned)
            expected_prev_hash: If given, only write when the current head
                hash matches (compare-and-swap)

        Returns:
            AppendResult with commit / conflict info

        Raises:
            EventStoreError: If append fails
        """
        ...

    @abstractmethod
    def records(self) -> Iterator[Dict[str, Any]]:
        """Yield raw chain records ({prev_hash, event_hash, event}) in seq order."""
        ...

    def read(self, aggregate_id: Optional[str] = None, from_seq: int = 0) -> Iterator[Event]:
        """
        Read events from log.

        Args:
            aggregate_id: Filter by aggregate ID (None = all)
            from_seq: Start from this sequence number (inclusive)

        Yields:
            Events in sequence order
        """
        for rec in self.records():
            try:
                ev = Event.from_dict(rec["event"])
                seq = ev.require_seq()
            except (KeyError, TypeError, ValueError) as ex:
                raise EventStoreError(f"Malformed record in event log: {ex!r}") from ex
            if seq < from_seq:
                continue
            if aggregate_id is not None and ev.aggregate_id != aggregate_id:
                continue
            yield ev

    def get_last_hash(self) -> str:
        """Return the head hash (ZERO_HASH for an empty log)."""
        last_hash = ZERO_HASH
        for rec in self.records():
            try:
                last_hash = rec["event_hash"]
            except (KeyError, TypeError) as ex:
                raise EventStoreError(f"Malformed record in event log: {ex!r}") from ex
        return last_hash

    def verify(self) -> str:
        """
        Verify the whole hash chain.

        Returns:
            Head hash

        Raises:
            IntegrityError: If any link is broken
        """
        return verify_records(self.records())
