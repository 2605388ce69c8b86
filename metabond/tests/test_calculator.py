"""
Tests for the pro-rata reward calculator.

Critical: results must be integer-exact and reproducible forever.
"""

from metabond.core.types import Project, RewardsCheckpoint
from metabond.rewards.calculator import (
    RewardCalculator,
    calculate_ratio,
    calculate_reward_amount,
    weekly_pools,
)


def _project(delegation=1000, lkmex=0, start=1, end=4):
    return Project(
        id="alpha",
        reward_token="ALPHA-1a2b3c",
        delegation_reward_supply=delegation,
        lkmex_reward_supply=lkmex,
        start_week=start,
        end_week=end,
    )


def test_reference_example():
    """1000 over 4 weeks, user holds 10 of 100 -> floor(250 * 10 / 100) = 25."""
    project = _project()
    checkpoint = RewardsCheckpoint(total_delegation_supply=100, total_lkmex_staked=0)

    assert calculate_reward_amount(project, 10, 0, checkpoint) == 25


def test_zero_total_supply_yields_zero():
    """Zero totals short-circuit to 0 instead of dividing by zero."""
    project = _project(lkmex=500)
    checkpoint = RewardsCheckpoint(total_delegation_supply=0, total_lkmex_staked=0)

    assert calculate_reward_amount(project, 10**30, 10**30, checkpoint) == 0
    assert calculate_ratio(1000, 5, 0) == 0


def test_pools_divided_independently():
    """Each pool is floored by duration on its own before the shares are added."""
    project = _project(delegation=10, lkmex=10, start=1, end=3)

    assert weekly_pools(project) == (3, 3)

    project = _project(delegation=5, lkmex=5, start=1, end=2)
    checkpoint = RewardsCheckpoint(total_delegation_supply=1, total_lkmex_staked=1)
    # 5 // 2 + 5 // 2 = 4, whereas (5 + 5) // 2 = 5
    assert calculate_reward_amount(project, 1, 1, checkpoint) == 4


def test_multiply_before_divide():
    """Ratio keeps precision by multiplying before dividing."""
    assert calculate_ratio(250, 1, 3) == 83
    assert calculate_ratio(7, 3, 2) == 10


def test_dust_is_dropped():
    """Three equal holders of a 100 pool get 33 each; the remaining 1 is lost."""
    project = _project(delegation=100, start=1, end=1)
    checkpoint = RewardsCheckpoint(total_delegation_supply=3, total_lkmex_staked=0)

    shares = [calculate_reward_amount(project, 1, 0, checkpoint) for _ in range(3)]
    assert shares == [33, 33, 33]
    assert sum(shares) == 99


def test_both_dimensions_add_up():
    project = _project(delegation=400, lkmex=800, start=1, end=4)
    checkpoint = RewardsCheckpoint(total_delegation_supply=10, total_lkmex_staked=40)

    # delegation: 100 * 5 / 10 = 50; lkmex: 200 * 10 / 40 = 50
    assert calculate_reward_amount(project, 5, 10, checkpoint) == 100


def test_big_integer_amounts_exact():
    """Token amounts with 18 decimals must not lose precision."""
    supply = 1_000_000 * 10**18
    project = _project(delegation=supply, start=1, end=52)
    checkpoint = RewardsCheckpoint(total_delegation_supply=3 * 10**24, total_lkmex_staked=0)
    user = 7 * 10**21

    expected = ((supply // 52) * user) // (3 * 10**24)
    assert calculate_reward_amount(project, user, 0, checkpoint) == expected


def test_calculator_is_deterministic_100_runs():
    """Same arguments must produce the same integer every time."""
    calc = RewardCalculator()
    project = _project(delegation=123456789, lkmex=987654321, start=3, end=17)
    checkpoint = RewardsCheckpoint(total_delegation_supply=99991, total_lkmex_staked=77773)

    results = {calc.calculate(project, 1234, 5678, checkpoint) for _ in range(100)}
    assert len(results) == 1
