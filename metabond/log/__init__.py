"""
Event storage and integrity verification.

This module provides:
- EventStore: Abstract interface for event persistence
- MemoryEventStore: In-process append-only storage
- FileEventStore: File-based append-only storage (JSONL)
- Integrity: Hash chain construction and verification
"""

from .store import EventStore, AppendResult
from .memory_store import MemoryEventStore
from .file_store import FileEventStore
from .integrity import ZERO_HASH, hash_event, chain_record, verify_records

__all__ = [
    "EventStore",
    "AppendResult",
    "MemoryEventStore",
    "FileEventStore",
    "ZERO_HASH",
    "hash_event",
    "chain_record",
    "verify_records",
]
