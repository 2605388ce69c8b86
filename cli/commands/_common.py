"""
Shared option handling for CLI commands.
"""

import json
from typing import Any, NoReturn, Optional

import typer
from rich.console import Console

from metabond.bootstrap import RewardsEngine, make_clock, open_engine
from metabond.config import Settings
from metabond.logging_config import setup_logging
from metabond.metrics import init_metrics, start_metrics_server

console = Console()

DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    "-d",
    help="Data directory (default: METABOND_DATA_DIR or ./metabond-data)",
)
CURRENT_WEEK_OPTION = typer.Option(
    None,
    "--current-week",
    "-w",
    help="Pin the current week instead of deriving it from METABOND_GENESIS_TS",
)
JSON_OPTION = typer.Option(False, "--json", help="Output as JSON")


def load_settings(data_dir: Optional[str]) -> Settings:
    settings = Settings.from_env().with_data_dir(data_dir)
    setup_logging(settings.log_level, settings.log_format)
    if settings.metrics_enabled:
        start_metrics_server(True, settings.metrics_port)
    else:
        init_metrics()
    return settings


def engine_from_options(
    data_dir: Optional[str],
    current_week: Optional[int],
    needs_week: bool = True,
) -> RewardsEngine:
    """
    Build the engine for a command.

    Commands that only read state pass needs_week=False.

    Raises:
        ValueError: If needs_week is set and no week source is configured
    """
    settings = load_settings(data_dir)
    return open_engine(settings, make_clock(settings, current_week, required=needs_week))


def emit_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def fail(message: str, json_output: bool, code: int, **extra: Any) -> NoReturn:
    """Report an error and exit with `code`."""
    if json_output:
        payload = {"success": False, "error": message}
        payload.update(extra)
        emit_json(payload)
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)
