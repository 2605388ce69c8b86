"""
Metabond CLI - Weekly reward accounting

Commands:
- metabond checkpoint add/list/show - Rewards checkpoint ledger
- metabond deposit pay/status - Project reward pool deposits
- metabond rewards - Rewards a user earns in a week
- metabond audit create/verify - Signed audit snapshots
- metabond verify - Hash chain integrity of both logs
"""

__version__ = "0.1.0"
