"""
Tests for the deposit gate.

Critical: a project can be funded exactly once, with the exact total supply
in its reward token; every rejection leaves the flags untouched.
"""

import os
import tempfile

import pytest

from metabond.core.clock import FixedWeekClock
from metabond.core.errors import (
    AlreadyDepositedError,
    AmountMismatchError,
    RewardsError,
    TokenMismatchError,
    UnknownProjectError,
)
from metabond.core.events import REWARDS_DEPOSITED
from metabond.core.types import Project
from metabond.log import FileEventStore, MemoryEventStore
from metabond.registry import InMemoryProjectRegistry
from metabond.rewards.deposits import DepositGate

TOKEN = "ALPHA-1a2b3c"


def _registry():
    return InMemoryProjectRegistry(
        [
            Project(
                id="alpha",
                reward_token=TOKEN,
                delegation_reward_supply=1000,
                lkmex_reward_supply=500,
                start_week=1,
                end_week=4,
            ),
            Project(
                id="beta",
                reward_token="BETA-4d5e6f",
                delegation_reward_supply=0,
                lkmex_reward_supply=800,
                start_week=2,
                end_week=3,
            ),
        ]
    )


def test_default_not_deposited():
    gate = DepositGate(_registry(), MemoryEventStore())

    assert not gate.is_deposited("alpha")
    assert not gate.is_deposited("unknown")
    assert gate.deposited_projects() == ()


def test_deposit_sets_flag():
    store = MemoryEventStore()
    gate = DepositGate(_registry(), store, FixedWeekClock(1))

    project = gate.deposit("alpha", TOKEN, 1500)

    assert project.id == "alpha"
    assert gate.is_deposited("alpha")
    assert not gate.is_deposited("beta")

    events = list(store.read())
    assert len(events) == 1
    assert events[0].type == REWARDS_DEPOSITED
    assert events[0].aggregate_id == "alpha"
    assert events[0].payload == {"token": TOKEN, "amount": "1500"}
    assert events[0].ts == 1


def test_second_deposit_fails_and_flag_stays():
    store = MemoryEventStore()
    gate = DepositGate(_registry(), store)
    gate.deposit("alpha", TOKEN, 1500)

    with pytest.raises(AlreadyDepositedError):
        gate.deposit("alpha", TOKEN, 1500)

    assert gate.is_deposited("alpha")
    assert len(store) == 1


def test_already_deposited_checked_before_payment():
    """A funded project reports AlreadyDeposited even for a wrong token or amount."""
    gate = DepositGate(_registry(), MemoryEventStore())
    gate.deposit("alpha", TOKEN, 1500)

    with pytest.raises(AlreadyDepositedError):
        gate.deposit("alpha", "OTHER-000000", 1)


def test_unknown_project_is_typed_error():
    store = MemoryEventStore()
    gate = DepositGate(_registry(), store)

    with pytest.raises(UnknownProjectError):
        gate.deposit("gamma", TOKEN, 1500)

    assert len(store) == 0


def test_token_mismatch():
    gate = DepositGate(_registry(), MemoryEventStore())

    with pytest.raises(TokenMismatchError):
        gate.deposit("alpha", "BETA-4d5e6f", 1500)

    assert not gate.is_deposited("alpha")


def test_amount_must_equal_total_supply():
    """Depositing anything but delegation + lkmex supply fails even with the right token."""
    gate = DepositGate(_registry(), MemoryEventStore())

    for amount in (0, 1000, 500, 1499, 1501):
        with pytest.raises(AmountMismatchError):
            gate.deposit("alpha", TOKEN, amount)

    assert not gate.is_deposited("alpha")
    gate.deposit("alpha", TOKEN, 1500)
    assert gate.is_deposited("alpha")


def test_validation_errors_share_base_class():
    gate = DepositGate(_registry(), MemoryEventStore())

    with pytest.raises(RewardsError):
        gate.deposit("missing", TOKEN, 1)


def test_negative_amount_rejected():
    gate = DepositGate(_registry(), MemoryEventStore())

    with pytest.raises(ValueError):
        gate.deposit("alpha", TOKEN, -1500)


def test_already_deposited_checked_before_amount_type():
    gate = DepositGate(_registry(), MemoryEventStore())
    gate.deposit("alpha", TOKEN, 1500)

    with pytest.raises(AlreadyDepositedError):
        gate.deposit("alpha", TOKEN, -1)
    with pytest.raises(AlreadyDepositedError):
        gate.deposit("alpha", TOKEN, "1500")


def test_flags_survive_reopen():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "deposits.log")
        gate = DepositGate(_registry(), FileEventStore(path))
        gate.deposit("beta", "BETA-4d5e6f", 800)

        reopened = DepositGate(_registry(), FileEventStore(path))

        assert reopened.is_deposited("beta")
        assert not reopened.is_deposited("alpha")
        assert reopened.head_hash() == gate.head_hash()

        with pytest.raises(AlreadyDepositedError):
            reopened.deposit("beta", "BETA-4d5e6f", 800)
