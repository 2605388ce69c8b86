#!/usr/bin/env python3
"""
Metabond CLI - Weekly reward accounting

Main entrypoint for the metabond command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import audit, checkpoint, deposit, rewards, verify

app = typer.Typer(
    name="metabond",
    help="Weekly reward accounting for delegation and locked-stake programs",
    add_completion=False,
)

console = Console()

# Command groups
app.add_typer(checkpoint.app, name="checkpoint", help="Rewards checkpoint ledger")
app.add_typer(deposit.app, name="deposit", help="Project reward pool deposits")
app.add_typer(audit.app, name="audit", help="Signed audit snapshots")

# Standalone commands
app.command("rewards")(rewards.rewards_command)
app.command("verify")(verify.verify_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from metabond import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Metabond CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
