"""
Audit snapshot model.

A snapshot binds the ledger and deposit state to the heads of both hash
chains and signs the result, so a third party can later confirm that the
weekly totals and funding flags used for payouts were never rewritten.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict

SNAPSHOT_VERSION = 1


@dataclass
class AuditSnapshot:
    """
    Signed snapshot record.

    Fields:
        version: Format version
        ledger_length: Number of checkpoints covered
        ledger_head_hash: Checkpoint chain hash after the last covered week
        deposit_count: Number of deposit events covered
        deposit_head_hash: Deposit chain hash after the last covered deposit
        state_hash: SHA-256 of canonical state bytes
        state_bytes: Canonical serialized state (base64)
        created_at_week: Week the snapshot was taken in
        pubkey_id: SHA-256 hash of public key (first 16 chars)
        signature: Ed25519 signature (base64)
        meta: Optional metadata (not signed)
    """
    version: int
    ledger_length: int
    ledger_head_hash: str
    deposit_count: int
    deposit_head_hash: str
    state_hash: str
    state_bytes: str
    created_at_week: int
    pubkey_id: str
    signature: str
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "ledger_length": self.ledger_length,
            "ledger_head_hash": self.ledger_head_hash,
            "deposit_count": self.deposit_count,
            "deposit_head_hash": self.deposit_head_hash,
            "state_hash": self.state_hash,
            "state_bytes": self.state_bytes,
            "created_at_week": self.created_at_week,
            "pubkey_id": self.pubkey_id,
            "signature": self.signature,
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditSnapshot":
        return cls(
            version=data["version"],
            ledger_length=data["ledger_length"],
            ledger_head_hash=data["ledger_head_hash"],
            deposit_count=data["deposit_count"],
            deposit_head_hash=data["deposit_head_hash"],
            state_hash=data["state_hash"],
            state_bytes=data["state_bytes"],
            created_at_week=data["created_at_week"],
            pubkey_id=data["pubkey_id"],
            signature=data["signature"],
            meta=data.get("meta", {}),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "AuditSnapshot":
        return cls.from_dict(json.loads(json_str))

    def signing_payload(self) -> Dict[str, Any]:
        """Everything except signature and meta."""
        return {
            "version": self.version,
            "ledger_length": self.ledger_length,
            "ledger_head_hash": self.ledger_head_hash,
            "deposit_count": self.deposit_count,
            "deposit_head_hash": self.deposit_head_hash,
            "state_hash": self.state_hash,
            "created_at_week": self.created_at_week,
            "pubkey_id": self.pubkey_id,
        }
