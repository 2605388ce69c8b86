"""
Checkpoint commands: add, list, show
"""

from typing import Optional

import typer
from rich.table import Table

from metabond.core.errors import EventStoreError, RewardsError

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
def add(
    week: int = typer.Argument(..., help="Week to checkpoint (must be last week + 1)"),
    total_delegation_supply: int = typer.Argument(..., help="Total delegation supply"),
    total_lkmex_staked: int = typer.Argument(..., help="Total locked-stake supply"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Append the rewards checkpoint for a week.

    Examples:
        metabond checkpoint add 1 1000000 250000 --current-week 1
        metabond checkpoint add 2 1200000 260000 --json
    """
    try:
        engine = engine_from_options(data_dir, current_week)
        checkpoint = engine.ledger.append(
            week,
            total_delegation_supply,
            total_lkmex_staked,
            meta={"source": "metabond checkpoint add"},
        )
    except (RewardsError, ValueError) as e:
        fail(str(e), json_output, 1, kind=type(e).__name__)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        out = {"success": True, "week": week, "head_hash": engine.ledger.head_hash()}
        out.update(checkpoint.to_dict())
        emit_json(out)
    else:
        console.print(f"[green]✓ Checkpoint for week {week} appended[/green]")
        console.print(f"  Delegation supply: {checkpoint.total_delegation_supply}")
        console.print(f"  LKMEX staked: {checkpoint.total_lkmex_staked}")
        console.print(f"  Head hash: {engine.ledger.head_hash()[:16]}...")


@app.command("list")
def list_checkpoints(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """List all checkpoints in week order."""
    try:
        engine = engine_from_options(data_dir, current_week, needs_week=False)
    except ValueError as e:
        fail(str(e), json_output, 1)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    rows = list(engine.ledger.checkpoints())
    if json_output:
        emit_json(
            {
                "checkpoints": [dict(week=w, **cp.to_dict()) for w, cp in rows],
                "count": len(rows),
            }
        )
        return

    if not rows:
        console.print("[yellow]No checkpoints yet[/yellow]")
        return

    table = Table(title="Rewards checkpoints")
    table.add_column("Week", style="cyan")
    table.add_column("Delegation supply", style="green", justify="right")
    table.add_column("LKMEX staked", style="yellow", justify="right")
    for w, cp in rows:
        table.add_row(str(w), str(cp.total_delegation_supply), str(cp.total_lkmex_staked))
    console.print(table)
    console.print(f"\n[bold]Total checkpoints:[/bold] {len(rows)}")


@app.command()
def show(
    week: int = typer.Argument(..., help="Week to show"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """Show the checkpoint for one week."""
    try:
        engine = engine_from_options(data_dir, current_week, needs_week=False)
        checkpoint = engine.ledger.get(week)
    except (RewardsError, ValueError) as e:
        fail(str(e), json_output, 1, kind=type(e).__name__)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        emit_json(dict(week=week, **checkpoint.to_dict()))
    else:
        console.print(f"[bold]Week {week}[/bold]")
        console.print(f"  Delegation supply: {checkpoint.total_delegation_supply}")
        console.print(f"  LKMEX staked: {checkpoint.total_lkmex_staked}")
