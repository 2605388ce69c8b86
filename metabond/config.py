"""
Runtime configuration from environment variables.

Environment Variables:
    METABOND_DATA_DIR: Directory holding the logs and registry - default: ./metabond-data
    METABOND_GENESIS_TS: Unix timestamp where week 1 starts - default: unset
    METABOND_WEEK_SECONDS: Length of a reward week - default: 604800
    METABOND_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    METABOND_LOG_FORMAT: json, text - default: json
    METABOND_METRICS_ENABLED: true/false - default: false
    METABOND_METRICS_PORT: Prometheus port - default: 9108
    METABOND_SIGNING_KEY: Ed25519 PEM used for audit snapshots - default: unset
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .core.clock import SECONDS_PER_WEEK

CHECKPOINT_LOG = "checkpoints.log"
DEPOSIT_LOG = "deposits.log"
REGISTRY_FILE = "projects.json"
CLAIMS_FILE = "claims.json"


def _env_int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    val = env.get(key)
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    val = env.get(key)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    data_dir: str = "./metabond-data"
    genesis_ts: Optional[int] = None
    week_seconds: int = SECONDS_PER_WEEK
    log_level: str = "INFO"
    log_format: str = "json"
    metrics_enabled: bool = False
    metrics_port: int = 9108
    signing_key: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings once; malformed integers fall back to defaults."""
        env = os.environ if env is None else env
        week_seconds = _env_int(env, "METABOND_WEEK_SECONDS", SECONDS_PER_WEEK)
        if not week_seconds or week_seconds <= 0:
            week_seconds = SECONDS_PER_WEEK
        return cls(
            data_dir=env.get("METABOND_DATA_DIR", cls.data_dir),
            genesis_ts=_env_int(env, "METABOND_GENESIS_TS", None),
            week_seconds=week_seconds,
            log_level=env.get("METABOND_LOG_LEVEL", cls.log_level).upper(),
            log_format=env.get("METABOND_LOG_FORMAT", cls.log_format).lower(),
            metrics_enabled=_env_bool(env, "METABOND_METRICS_ENABLED", False),
            metrics_port=_env_int(env, "METABOND_METRICS_PORT", 9108) or 9108,
            signing_key=env.get("METABOND_SIGNING_KEY") or None,
        )

    def with_data_dir(self, data_dir: Optional[str]) -> "Settings":
        return replace(self, data_dir=data_dir) if data_dir else self

    @property
    def checkpoint_log_path(self) -> str:
        return str(Path(self.data_dir) / CHECKPOINT_LOG)

    @property
    def deposit_log_path(self) -> str:
        return str(Path(self.data_dir) / DEPOSIT_LOG)

    @property
    def registry_path(self) -> str:
        return str(Path(self.data_dir) / REGISTRY_FILE)

    @property
    def claims_path(self) -> str:
        return str(Path(self.data_dir) / CLAIMS_FILE)
