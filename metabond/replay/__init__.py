"""
Replay system for deterministic state reconstruction.

Replay applies a reducer to an event stream to rebuild ledger or deposit
state. Same events -> same state.
"""

from .runner import ReplayResult, replay

__all__ = [
    "ReplayResult",
    "replay",
]
