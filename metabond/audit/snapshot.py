"""
Deterministic snapshot utilities.

Same ledger and deposit state always produce the same bytes.
"""

import base64
import hashlib
import json
from typing import Any, Dict, Optional, Tuple

from ..core.canonical import canonical_json_bytes
from ..core.state import DepositState, LedgerState
from .model import AuditSnapshot, SNAPSHOT_VERSION
from .signer import SigningKey


def _state_dict(ledger_state: LedgerState, deposit_state: DepositState) -> Dict[str, Any]:
    return {
        "ledger": ledger_state.to_dict(),
        "deposits": deposit_state.to_dict(),
    }


def serialize_state(ledger_state: LedgerState, deposit_state: DepositState) -> bytes:
    """Canonical bytes of the combined ledger + deposit state."""
    return canonical_json_bytes(_state_dict(ledger_state, deposit_state))


def compute_state_hash(ledger_state: LedgerState, deposit_state: DepositState) -> str:
    return hashlib.sha256(serialize_state(ledger_state, deposit_state)).hexdigest()


def state_to_base64(ledger_state: LedgerState, deposit_state: DepositState) -> str:
    return base64.b64encode(serialize_state(ledger_state, deposit_state)).decode("ascii")


def state_from_base64(b64_str: str) -> Tuple[LedgerState, DepositState]:
    state_dict = json.loads(base64.b64decode(b64_str))
    return (
        LedgerState.from_dict(state_dict["ledger"]),
        DepositState.from_dict(state_dict["deposits"]),
    )


def create_snapshot(
    ledger,
    deposits,
    signing_key: SigningKey,
    meta: Optional[Dict[str, Any]] = None,
) -> AuditSnapshot:
    """
    Snapshot and sign the current state of a ledger and deposit gate.

    Args:
        ledger: CheckpointLedger
        deposits: DepositGate
        signing_key: Key used to sign the snapshot
        meta: Unsigned metadata to attach
    """
    ledger_state = ledger.state
    deposit_state = deposits.state

    snapshot = AuditSnapshot(
        version=SNAPSHOT_VERSION,
        ledger_length=len(ledger_state.checkpoints),
        ledger_head_hash=ledger.head_hash(),
        deposit_count=len(deposit_state.deposited),
        deposit_head_hash=deposits.head_hash(),
        state_hash=compute_state_hash(ledger_state, deposit_state),
        state_bytes=state_to_base64(ledger_state, deposit_state),
        created_at_week=ledger.clock.current_week(),
        pubkey_id=signing_key.get_pubkey_id(),
        signature="",
        meta=dict(meta or {}),
    )
    snapshot.signature = signing_key.sign_base64(snapshot.signing_payload())
    return snapshot
