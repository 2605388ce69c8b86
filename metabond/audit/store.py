"""
Audit snapshot storage.

Snapshots are stored as separate JSON files in one directory.
Naming: audit_{ledger_length}_{deposit_count}_{state_hash_prefix}.json
"""

import os
from pathlib import Path
from typing import List, Optional

from .model import AuditSnapshot


class AuditStore:

    def __init__(self, directory: str = "audit"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, snapshot: AuditSnapshot) -> str:
        """Write snapshot JSON and return its path."""
        filename = (
            f"audit_{snapshot.ledger_length}_{snapshot.deposit_count}_"
            f"{snapshot.state_hash[:8]}.json"
        )
        filepath = self.directory / filename
        with open(filepath, "w") as f:
            f.write(snapshot.to_json())
        return str(filepath)

    @staticmethod
    def load_path(filepath: str) -> AuditSnapshot:
        with open(filepath, "r") as f:
            return AuditSnapshot.from_json(f.read())

    def list_snapshots(self) -> List[str]:
        """Snapshot paths sorted by (ledger_length, deposit_count)."""

        def sort_key(path: str):
            # audit_{ledger}_{deposits}_{hash}.json
            parts = os.path.basename(path).split("_")
            return int(parts[1]), int(parts[2])

        return sorted((str(p) for p in self.directory.glob("audit_*.json")), key=sort_key)

    def find_latest(self) -> Optional[str]:
        snapshots = self.list_snapshots()
        if not snapshots:
            return None
        return snapshots[-1]
