"""
Event model for the checkpoint and deposit logs.

Events are immutable records of accepted commands.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

CHECKPOINT_ADDED = "CheckpointAdded"
REWARDS_DEPOSITED = "RewardsDeposited"

LEDGER_AGG_ID = "checkpoints"


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        type: Event type (CHECKPOINT_ADDED, REWARDS_DEPOSITED)
        aggregate_id: Target aggregate (LEDGER_AGG_ID or a project id)
        ts: Logical timestamp (the week the command was accepted in)
        payload: Event-specific data
        meta: Metadata (operator, source, ...), excluded from state
        seq: Sequence number (assigned by EventStore)
    """
    type: str
    aggregate_id: str
    ts: int
    payload: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    seq: Optional[int] = None

    def require_seq(self) -> int:
        """
        Get sequence number or raise error if not assigned.

        Raises:
            ValueError: If seq is None
        """
        if self.seq is None:
            raise ValueError("Event.seq is required but None")
        return self.seq

    def with_seq(self, seq: int) -> "Event":
        return Event(
            type=self.type,
            aggregate_id=self.aggregate_id,
            ts=self.ts,
            payload=self.payload,
            meta=self.meta,
            seq=seq,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "aggregate_id": self.aggregate_id,
            "seq": self.seq,
            "ts": self.ts,
            "payload": self.payload,
            "meta": self.meta,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Event":
        return Event(
            type=data["type"],
            aggregate_id=data["aggregate_id"],
            seq=data.get("seq"),
            ts=data["ts"],
            payload=data.get("payload", {}),
            meta=data.get("meta", {}),
        )
