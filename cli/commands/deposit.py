"""
Deposit commands: pay, status
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
def pay(
    project_id: str = typer.Argument(..., help="Project identifier"),
    token: str = typer.Argument(..., help="Token the pool is paid in"),
    amount: int = typer.Argument(..., help="Amount paid (delegation + lkmex supply)"),
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Record the one-time reward pool deposit of a project.

    Examples:
        metabond deposit pay alpha ALPHA-1a2b3c 5000000 --current-week 1
    """
    try:
        engine = engine_from_options(data_dir, current_week)
        project = engine.deposits.deposit(
            project_id, token, amount, meta={"source": "metabond deposit pay"}
        )
    except (RewardsError, ValueError) as e:
        fail(str(e), json_output, 1, kind=type(e).__name__)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    if json_output:
        emit_json(
            {
                "success": True,
                "project_id": project.id,
                "token": project.reward_token,
                "amount": str(amount),
                "head_hash": engine.deposits.head_hash(),
            }
        )
    else:
        console.print(f"[green]✓ Rewards deposited for {project.id}[/green]")
        console.print(f"  {amount} {project.reward_token}")
        console.print(f"  Active weeks: {project.start_week}..{project.end_week}")


@app.command()
def status(
    data_dir: Optional[str] = DATA_DIR_OPTION,
    current_week: Optional[int] = CURRENT_WEEK_OPTION,
    json_output: bool = JSON_OPTION,
):
    """Show the deposit flag of every registered project."""
    try:
        engine = engine_from_options(data_dir, current_week, needs_week=False)
    except ValueError as e:
        fail(str(e), json_output, 1)
    except (EventStoreError, OSError) as e:
        fail(str(e), json_output, 2)

    rows = [
        (project_id, project, engine.deposits.is_deposited(project_id))
        for project_id, project in engine.registry.iterate()
    ]

    if json_output:
        emit_json(
            {
                "projects": [
                    {
                        "project_id": project_id,
                        "token": project.reward_token,
                        "required": str(project.total_reward_supply),
                        "start_week": project.start_week,
                        "end_week": project.end_week,
                        "deposited": deposited,
                    }
                    for project_id, project, deposited in rows
                ]
            }
        )
        return

    table = Table(title="Project deposits")
    table.add_column("Project", style="cyan")
    table.add_column("Token", style="yellow")
    table.add_column("Required", justify="right")
    table.add_column("Weeks")
    table.add_column("Deposited")
    for project_id, project, deposited in rows:
        table.add_row(
            project_id,
            project.reward_token,
            str(project.total_reward_supply),
            f"{project.start_week}..{project.end_week}",
            "[green]yes[/green]" if deposited else "[dim]no[/dim]",
        )
    console.print(table)
