"""
Wiring for file-backed deployments.

Layout of a data directory:
    checkpoints.log  - checkpoint event log (JSONL hash chain)
    deposits.log     - deposit event log (JSONL hash chain)
    projects.json    - project registry
    claims.json      - claimed flags (optional, read-only)
    audit/           - signed audit snapshots
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import Settings
from .core.clock import EpochWeekClock, FixedWeekClock, WeekClock
from .core.state import ClaimFlags
from .log.file_store import FileEventStore
from .registry import InMemoryProjectRegistry, ProjectRegistry, load_registry
from .rewards.deposits import DepositGate
from .rewards.ledger import CheckpointLedger
from .rewards.query import RewardsQueryService


@dataclass
class RewardsEngine:
    settings: Settings
    registry: ProjectRegistry
    ledger: CheckpointLedger
    deposits: DepositGate
    query: RewardsQueryService

    @property
    def audit_dir(self) -> str:
        return str(Path(self.settings.data_dir) / "audit")


def make_clock(
    settings: Settings,
    current_week: Optional[int] = None,
    required: bool = True,
) -> WeekClock:
    """
    Pick the week source.

    An explicit current_week wins; otherwise METABOND_GENESIS_TS drives a
    wall-clock source. Read-only callers pass required=False and get a clock
    pinned at week 0 when neither is set.

    Raises:
        ValueError: If neither is available and required is True
    """
    if current_week is not None:
        return FixedWeekClock(current_week)
    if settings.genesis_ts is not None:
        return EpochWeekClock(settings.genesis_ts, settings.week_seconds)
    if not required:
        return FixedWeekClock(0)
    raise ValueError("No week source: pass --current-week or set METABOND_GENESIS_TS")


def load_claims(path: str) -> ClaimFlags:
    if not os.path.exists(path):
        return ClaimFlags()
    with open(path, "r") as f:
        return ClaimFlags.from_dict(json.load(f))


def open_engine(
    settings: Settings,
    clock: WeekClock,
    use_index: bool = True,
) -> RewardsEngine:
    """Open (or create) the stores under settings.data_dir and wire the services."""
    os.makedirs(settings.data_dir, exist_ok=True)

    if os.path.exists(settings.registry_path):
        registry: ProjectRegistry = load_registry(settings.registry_path)
    else:
        registry = InMemoryProjectRegistry()

    ledger = CheckpointLedger(FileEventStore(settings.checkpoint_log_path), clock)
    deposits = DepositGate(registry, FileEventStore(settings.deposit_log_path), clock)
    query = RewardsQueryService(
        registry,
        ledger,
        deposits,
        use_index=use_index,
        claims=load_claims(settings.claims_path),
    )
    return RewardsEngine(
        settings=settings,
        registry=registry,
        ledger=ledger,
        deposits=deposits,
        query=query,
    )
