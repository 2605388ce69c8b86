"""
File-based event store using append-only JSONL format.

Each line is a hash chain record with prev_hash, event_hash, and event data.
"""

import os
import json
from typing import Any, Dict, Iterator, Optional, Tuple

from ..core.events import Event
from ..core.canonical import canonical_json_str
from ..core.errors import EventStoreError
from .store import EventStore, AppendResult
from .integrity import ZERO_HASH, chain_record

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FileEventStore(EventStore):
    """
    File-based append-only event store.

    Storage format: JSONL (newline-delimited JSON)
    Each line: {"prev_hash": "...", "event_hash": "...", "event": {...}}

    Guarantees:
    - Append-only (no mutations)
    - Exclusive lock + fsync around each append
    - Hash chain integrity
    """

    def __init__(self, path: str) -> None:
        """
        Initialize file event store.

        Args:
            path: Path to JSONL file (created empty if missing)
        """
        self.path = path

        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        if not os.path.exists(path):
            with open(path, "wb") as f:
                f.write(b"")

    def _last_seq_and_hash(self, f) -> Tuple[int, str]:
        """
        Read last sequence number and hash from log.

        Returns:
            (last_seq, last_hash) tuple
            (-1, ZERO_HASH) if log is empty
        """
        last_seq = -1
        last_hash = ZERO_HASH

        f.seek(0)
        for line in f:
            if not line.strip():
                continue
            try:
                rec = json.loads(line)
                last_seq = rec["event"]["seq"]
                last_hash = rec["event_hash"]
            except (ValueError, KeyError, TypeError) as ex:
                raise EventStoreError(f"Malformed record in {self.path}: {ex}") from ex

        return last_seq, last_hash

    def append(self, event: Event, expected_prev_hash: Optional[str] = None) -> AppendResult:
        """
        Append event to log with hash chain.

        The record is written as one line and fsynced before the lock is
        released; a failed write raises without advancing the chain.

        Raises:
            EventStoreError: If append fails
        """
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    last_seq, last_hash = self._last_seq_and_hash(f)
                    return self._append_locked(f, event, expected_prev_hash, last_seq, last_hash)
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise EventStoreError(str(ex)) from ex

    def _append_locked(
        self,
        f,
        event: Event,
        expected_prev_hash: Optional[str],
        last_seq: int,
        last_hash: str,
    ) -> AppendResult:
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

        e2 = event.with_seq(last_seq + 1)
        rec = chain_record(last_hash, e2)
        line = canonical_json_str(rec) + "\n"

        f.seek(0, os.SEEK_END)
        f.write(line.encode("utf-8"))
        f.flush()
        os.fsync(f.fileno())

        return AppendResult(
            event=e2,
            seq=e2.seq,
            event_hash=rec.get("event_hash"),
            prev_hash=last_hash,
            committed=True,
            conflict=False,
            observed_prev_hash=last_hash,
        )

    def records(self) -> Iterator[Dict[str, Any]]:
        try:
            with open(self.path, "rb") as f:
                for line in f:
                    if not line.strip():
                        continue
                    try:
                        yield json.loads(line)
                    except ValueError as ex:
                        raise EventStoreError(f"Malformed record in {self.path}: {ex}") from ex
        except OSError as ex:
            raise EventStoreError(str(ex)) from ex

    def get_last_hash(self) -> str:
        with open(self.path, "rb") as f:
            _, last_hash = self._last_seq_and_hash(f)
        return last_hash
