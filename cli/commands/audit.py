"""
Audit commands: create, verify
"""

from typing import Optional

import typer

from metabond.audit import (
    AuditStore,
    SigningKey,
    VerifyingKey,
    create_snapshot,
    ensure_keypair,
    verify_snapshot,
)
from metabond.core.errors import EventStoreError

from ._common import (
    CURRENT_WEEK_OPTION,
    DATA_DIR_OPTION,
    JSON_OPTION,
    console,
    emit_json,
    engine_from_options,
    fail,
)

app = typer.Typer()


@app.command()
def create(
    key_path: Optional[str] = typer.Option(
        None,
        "--key",
        "-k",
        help="Ed25519 private key PEM (default: METABOND_SIGNING_KEY)",
    ),
    generate_key: bool = typer.Option(
        False,
        "--generate-key",
        help="Create KEY and KEY.pub if missing (default: ~/.metabond/keys/audit_ed25519)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--out",
        "-o",
        help="Output file (default: <data-dir>/audit/audit_<weeks>_<deposits>_<hash>.json)",
    ),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Create a signed snapshot of the checkpoint ledger and deposit flags.

    Examples:
        metabond audit create --key audit.pem --current-week 4
        metabond audit create --key audit.pem --generate-key --current-week 4
    """
    try:
        engine = engine_from_options(data_dir, current_week)
        key_path = key_path or engine.settings.signing_key
        public_key_path = None
        if generate_key:
            key_path, public_key_path = ensure_keypair(key_path)
        if not key_path:
            fail(
                "No signing key: pass --key, --generate-key or set METABOND_SIGNING_KEY",
                json_output,
                1,
            )
        signing_key = SigningKey.load_from_file(key_path)
        snapshot = create_snapshot(
            engine.ledger,
            engine.deposits,
            signing_key,
            meta={"source": "metabond audit create"},
        )
        if output:
            with open(output, "w") as f:
                f.write(snapshot.to_json())
            snapshot_path = output
        else:
            snapshot_path = AuditStore(engine.audit_dir).save(snapshot)
    except ValueError as e:
        fail(str(e), json_output, 1)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        emit_json(
            {
                "success": True,
                "snapshot_path": snapshot_path,
                "ledger_length": snapshot.ledger_length,
                "deposit_count": snapshot.deposit_count,
                "state_hash": snapshot.state_hash,
                "pubkey_id": snapshot.pubkey_id,
                "public_key_path": public_key_path,
            }
        )
    else:
        console.print("[green]✓ Audit snapshot created[/green]")
        console.print(f"  File: [cyan]{snapshot_path}[/cyan]")
        console.print(f"  Weeks covered: {snapshot.ledger_length}")
        console.print(f"  Deposits covered: {snapshot.deposit_count}")
        console.print(f"  State hash: {snapshot.state_hash[:16]}...")
        console.print(f"  Public key ID: {snapshot.pubkey_id}")
        if public_key_path:
            console.print(f"  Public key: [cyan]{public_key_path}[/cyan]")


@app.command()
def verify(
    snapshot_path: str = typer.Argument(..., help="Path to audit snapshot file"),
    key_path: str = typer.Option(..., "--key", "-k", help="Ed25519 public key PEM"),
    full: bool = typer.Option(False, "--full", help="Also replay both logs against the snapshot"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Verify an audit snapshot.

    Examples:
        metabond audit verify snapshot.json --key audit.pem.pub
        metabond audit verify snapshot.json --key audit.pem.pub --full --current-week 4
    """
    try:
        verifying_key = VerifyingKey.load_from_file(key_path)
        snapshot = AuditStore.load_path(snapshot_path)
        if full:
            engine = engine_from_options(data_dir, current_week, needs_week=False)
            result = verify_snapshot(
                snapshot,
                verifying_key,
                engine.ledger.store,
                engine.deposits.store,
                mode="full",
            )
        else:
            result = verify_snapshot(snapshot, verifying_key)
    except (ValueError, KeyError) as e:
        fail(str(e), json_output, 1)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if not result.valid:
        fail(f"Verification failed: {result.error}", json_output, 1)

    if json_output:
        emit_json(
            {
                "success": True,
                "verification": "full" if full else "signature",
                "signature": "valid",
                "state_hash": "match" if full else "unchecked",
                "replay": "consistent" if full else "unchecked",
            }
        )
    else:
        console.print(f"[green]✓ {'Full' if full else 'Signature'} verification passed[/green]")
        if full:
            console.print("  [green]✓[/green] State hash match")
            console.print("  [green]✓[/green] Hash chains intact")
            console.print("  [green]✓[/green] Replay consistent")
