"""
Tests for week clocks, settings and engine wiring.
"""

import json
import os
import tempfile

import pytest

from metabond.bootstrap import load_claims, make_clock, open_engine
from metabond.config import Settings
from metabond.core.clock import SECONDS_PER_WEEK, EpochWeekClock, FixedWeekClock


def test_fixed_clock_advance_returns_new_clock():
    clock = FixedWeekClock(3)

    later = clock.advance()

    assert clock.current_week() == 3
    assert later.current_week() == 4
    assert clock.advance(5).current_week() == 8


def test_epoch_clock_weeks_are_one_based():
    now = [1000.0]
    clock = EpochWeekClock(genesis_ts=1000, week_seconds=100, now=lambda: now[0])

    assert clock.current_week() == 1
    now[0] = 1099
    assert clock.current_week() == 1
    now[0] = 1100
    assert clock.current_week() == 2
    now[0] = 999
    assert clock.current_week() == 0


def test_epoch_clock_rejects_bad_week_length():
    with pytest.raises(ValueError):
        EpochWeekClock(genesis_ts=0, week_seconds=0)


def test_settings_defaults():
    s = Settings.from_env({})

    assert s.data_dir == "./metabond-data"
    assert s.genesis_ts is None
    assert s.week_seconds == SECONDS_PER_WEEK
    assert s.log_level == "INFO"
    assert s.log_format == "json"
    assert s.metrics_enabled is False
    assert s.metrics_port == 9108
    assert s.signing_key is None


def test_settings_from_env():
    s = Settings.from_env(
        {
            "METABOND_DATA_DIR": "/var/lib/metabond",
            "METABOND_GENESIS_TS": "1650000000",
            "METABOND_WEEK_SECONDS": "3600",
            "METABOND_LOG_LEVEL": "debug",
            "METABOND_LOG_FORMAT": "TEXT",
            "METABOND_METRICS_ENABLED": "true",
            "METABOND_METRICS_PORT": "9200",
            "METABOND_SIGNING_KEY": "/etc/metabond/audit.pem",
        }
    )

    assert s.data_dir == "/var/lib/metabond"
    assert s.genesis_ts == 1650000000
    assert s.week_seconds == 3600
    assert s.log_level == "DEBUG"
    assert s.log_format == "text"
    assert s.metrics_enabled is True
    assert s.metrics_port == 9200
    assert s.signing_key == "/etc/metabond/audit.pem"
    assert s.checkpoint_log_path == os.path.join("/var/lib/metabond", "checkpoints.log")


def test_settings_bad_ints_fall_back():
    s = Settings.from_env(
        {
            "METABOND_GENESIS_TS": "soon",
            "METABOND_WEEK_SECONDS": "-5",
            "METABOND_METRICS_PORT": "http",
        }
    )

    assert s.genesis_ts is None
    assert s.week_seconds == SECONDS_PER_WEEK
    assert s.metrics_port == 9108


def test_with_data_dir():
    s = Settings()

    assert s.with_data_dir(None) is s
    assert s.with_data_dir("/tmp/x").data_dir == "/tmp/x"


def test_make_clock_prefers_explicit_week():
    s = Settings(genesis_ts=0)

    assert make_clock(s, 7).current_week() == 7
    assert isinstance(make_clock(s), EpochWeekClock)

    with pytest.raises(ValueError, match="No week source"):
        make_clock(Settings())


def test_open_engine_without_registry_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        engine = open_engine(Settings(data_dir=tmpdir), FixedWeekClock(1))

        assert len(engine.registry) == 0
        assert engine.ledger.length() == 0
        assert os.path.exists(engine.settings.checkpoint_log_path)
        assert engine.audit_dir == os.path.join(tmpdir, "audit")


def test_open_engine_reads_registry_and_claims():
    with tempfile.TemporaryDirectory() as tmpdir:
        settings = Settings(data_dir=tmpdir)
        with open(settings.registry_path, "w") as f:
            json.dump(
                {
                    "projects": [
                        {
                            "id": "alpha",
                            "reward_token": "ALPHA-1a2b3c",
                            "delegation_reward_supply": "1000",
                            "lkmex_reward_supply": "0",
                            "start_week": 1,
                            "end_week": 4,
                        }
                    ]
                },
                f,
            )
        with open(settings.claims_path, "w") as f:
            json.dump({"claimed": [["erd1alice", 2]]}, f)

        engine = open_engine(settings, FixedWeekClock(2))

        assert engine.registry.get("alpha").end_week == 4
        assert engine.query.is_claimed("erd1alice", 2)
        assert not engine.query.is_claimed("erd1alice", 1)


def test_load_claims_missing_file():
    assert load_claims("/nonexistent/claims.json").claimed == frozenset()
