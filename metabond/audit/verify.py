"""
Audit snapshot verification.

Verification levels:
- signature: Fast signature-only verification
- full: Signature + state hash + replay of both logs
"""

import base64
import binascii
import hashlib
from dataclasses import dataclass
from typing import Optional

from ..core.errors import EventStoreError, IntegrityError, InvalidTransitionError
from ..log.store import EventStore
from ..replay.runner import replay
from ..rewards.handlers import deposit_reducer, ledger_reducer
from .model import AuditSnapshot
from .signer import VerifyingKey
from .snapshot import compute_state_hash


@dataclass
class VerificationResult:
    """
    Result of snapshot verification.

    Fields:
        valid: Overall validity (all checks passed)
        signature_valid: Signature verification passed
        state_hash_valid: State hash matches state_bytes
        chain_valid: Both logs verify and their heads match the snapshot
        replay_state_valid: Replayed state matches snapshot state
        error: Error message if verification failed
    """
    valid: bool
    signature_valid: bool = False
    state_hash_valid: bool = False
    chain_valid: bool = False
    replay_state_valid: bool = False
    error: Optional[str] = None


def verify_signature(snapshot: AuditSnapshot, verifying_key: VerifyingKey) -> VerificationResult:
    expected_pubkey_id = verifying_key.get_pubkey_id()
    if snapshot.pubkey_id != expected_pubkey_id:
        return VerificationResult(
            valid=False,
            error=f"Public key ID mismatch: expected {expected_pubkey_id}, got {snapshot.pubkey_id}",
        )

    if not verifying_key.verify_base64(snapshot.signing_payload(), snapshot.signature):
        return VerificationResult(valid=False, error="Invalid signature")

    return VerificationResult(valid=True, signature_valid=True)


def verify_full(
    snapshot: AuditSnapshot,
    verifying_key: VerifyingKey,
    checkpoint_store: EventStore,
    deposit_store: EventStore,
) -> VerificationResult:
    """
    Full snapshot verification.

    Verifies:
    1. Signature is valid
    2. state_hash matches state_bytes
    3. Both hash chains are intact
    4. Replaying the logs up to the covered lengths reproduces the state and
       the chain heads recorded in the snapshot
    """
    sig_result = verify_signature(snapshot, verifying_key)
    if not sig_result.signature_valid:
        return sig_result

    try:
        state_bytes = base64.b64decode(snapshot.state_bytes, validate=True)
    except (binascii.Error, ValueError) as ex:
        return VerificationResult(valid=False, signature_valid=True, error=f"Bad state_bytes: {ex}")

    computed_state_hash = hashlib.sha256(state_bytes).hexdigest()
    if computed_state_hash != snapshot.state_hash:
        return VerificationResult(
            valid=False,
            signature_valid=True,
            error=f"State hash mismatch: computed {computed_state_hash}, expected {snapshot.state_hash}",
        )

    try:
        checkpoint_store.verify()
        deposit_store.verify()
        ledger_result = replay(checkpoint_store, ledger_reducer(), to_seq=snapshot.ledger_length - 1)
        deposit_result = replay(deposit_store, deposit_reducer(), to_seq=snapshot.deposit_count - 1)
    except (IntegrityError, EventStoreError, InvalidTransitionError) as ex:
        return VerificationResult(
            valid=False,
            signature_valid=True,
            state_hash_valid=True,
            error=f"Log verification failed: {ex}",
        )

    if (
        ledger_result.applied != snapshot.ledger_length
        or deposit_result.applied != snapshot.deposit_count
        or ledger_result.last_hash != snapshot.ledger_head_hash
        or deposit_result.last_hash != snapshot.deposit_head_hash
    ):
        return VerificationResult(
            valid=False,
            signature_valid=True,
            state_hash_valid=True,
            error=(
                "Log heads do not match snapshot: "
                f"ledger {ledger_result.applied}/{snapshot.ledger_length}, "
                f"deposits {deposit_result.applied}/{snapshot.deposit_count}"
            ),
        )

    replayed_hash = compute_state_hash(ledger_result.state, deposit_result.state)
    if replayed_hash != snapshot.state_hash:
        return VerificationResult(
            valid=False,
            signature_valid=True,
            state_hash_valid=True,
            chain_valid=True,
            error=f"Replayed state hash mismatch: computed {replayed_hash}, expected {snapshot.state_hash}",
        )

    return VerificationResult(
        valid=True,
        signature_valid=True,
        state_hash_valid=True,
        chain_valid=True,
        replay_state_valid=True,
    )


def verify_snapshot(
    snapshot: AuditSnapshot,
    verifying_key: VerifyingKey,
    checkpoint_store: Optional[EventStore] = None,
    deposit_store: Optional[EventStore] = None,
    mode: str = "signature",
) -> VerificationResult:
    """
    Verify snapshot with configurable verification level.

    Raises:
        ValueError: If mode is unknown, or "full" without both stores
    """
    if mode == "signature":
        return verify_signature(snapshot, verifying_key)
    if mode == "full":
        if checkpoint_store is None or deposit_store is None:
            raise ValueError("Full verification requires checkpoint_store and deposit_store")
        return verify_full(snapshot, verifying_key, checkpoint_store, deposit_store)
    raise ValueError(f"Unknown verification mode: {mode}")
