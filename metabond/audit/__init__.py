"""
Signed audit snapshots of ledger and deposit state.

Provides:
- AuditSnapshot model with canonical serialization
- Ed25519 signing and verification
- Deterministic state snapshots
- Snapshot file storage
"""

from .model import AuditSnapshot
from .snapshot import (
    serialize_state,
    compute_state_hash,
    state_to_base64,
    state_from_base64,
    create_snapshot,
)
from .signer import SigningKey, VerifyingKey, ensure_keypair
from .verify import verify_snapshot, verify_signature, verify_full, VerificationResult
from .store import AuditStore

__all__ = [
    "AuditSnapshot",
    "serialize_state",
    "compute_state_hash",
    "state_to_base64",
    "state_from_base64",
    "create_snapshot",
    "SigningKey",
    "VerifyingKey",
    "ensure_keypair",
    "verify_snapshot",
    "verify_signature",
    "verify_full",
    "VerificationResult",
    "AuditStore",
]
