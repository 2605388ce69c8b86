"""
Verify command: check both event logs' hash chains
"""

from typing import Optional

import typer

from metabond.core.errors import EventStoreError, IntegrityError
from metabond.log import FileEventStore

from ._common import DATA_DIR_OPTION, JSON_OPTION, console, emit_json, fail, load_settings


def verify_command(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Verify the hash chains of the checkpoint and deposit logs.

    Examples:
        metabond verify
        metabond verify --data-dir /var/lib/metabond --json
    """
    settings = load_settings(data_dir)
    heads = {}
    try:
        for name, path in (
            ("checkpoints", settings.checkpoint_log_path),
            ("deposits", settings.deposit_log_path),
        ):
            heads[name] = FileEventStore(path).verify()
    except IntegrityError as e:
        fail(str(e), json_output, 1)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        emit_json({"success": True, "heads": heads})
    else:
        console.print("[green]✓ Hash chains intact[/green]")
        for name, head in heads.items():
            console.print(f"  {name}: {head[:16]}...")
