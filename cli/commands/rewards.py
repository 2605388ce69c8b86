"""
Rewards command: compute a user's rewards for one week
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


def rewards_command(
    week: int = typer.Argument(..., help="Checkpointed week to query"),
    user_delegation_amount: int = typer.Argument(..., help="User delegation amount"),
    user_lkmex_staked_amount: int = typer.Argument(..., help="User locked-stake amount"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Show the rewards a user earns in a week.

    Examples:
        metabond rewards 3 1000 0 --current-week 5
        metabond rewards 3 1000 250 --json
    """
    try:
        engine = engine_from_options(data_dir, current_week, needs_week=False)
        rows = engine.query.get_rewards_table(week, user_delegation_amount, user_lkmex_staked_amount)
    except (RewardsError, ValueError) as e:
        fail(str(e), json_output, 1, kind=type(e).__name__)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        emit_json({"week": week, "rewards": rows, "count": len(rows)})
        return

    if not rows:
        console.print(f"[yellow]No rewards for week {week}[/yellow]")
        return

    table = Table(title=f"Rewards for week {week}")
    table.add_column("Project", style="cyan")
    table.add_column("Token", style="yellow")
    table.add_column("Amount", style="green", justify="right")
    for row in rows:
        table.add_row(row["project_id"], row["token"], row["amount"])
    console.print(table)
