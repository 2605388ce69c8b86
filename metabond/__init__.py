"""
Metabond Rewards Engine

Deterministic weekly reward accounting for multi-project delegation and
locked-stake programs. Every result can be re-derived from the append-only
checkpoint and deposit logs.
"""

__version__ = "0.1.0"
