"""Tests for the yield derivation engine."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from zec_staking import yields
from zec_staking.params import DEFAULT_PARAMS, ParameterSet

CONSTANTS = yields.StakingConstants(total_shielded_zec=3_000_000.0)


def test_compute_default_scenario():
    metrics = yields.compute(DEFAULT_PARAMS, constants=CONSTANTS)

    assert metrics.total_staked_zec == pytest.approx(1_500_000.0)
    assert metrics.reference_pool_zec == pytest.approx(1_500_000.0)
    assert metrics.delegator_share == pytest.approx(0.00004)
    assert metrics.reward_per_round == pytest.approx(0.625)
    assert metrics.reward_per_day == pytest.approx(720.0)
    assert metrics.net_factor == pytest.approx(0.9)
    assert metrics.per_day_zec == pytest.approx(0.02592)
    assert metrics.per_year_zec == pytest.approx(0.02592 * 365)
    assert metrics.annualized_pct == pytest.approx(0.02592 * 365 / 60 * 100)
    assert metrics.per_round_zec == pytest.approx(0.02592 / 1152)
    assert metrics.saturated is False


def test_compute_is_deterministic():
    first = yields.compute(DEFAULT_PARAMS, constants=CONSTANTS)
    second = yields.compute(DEFAULT_PARAMS, constants=CONSTANTS)
    assert first == second


def test_zero_staked_pool_yields_nothing():
    params = ParameterSet(pct_shielded_staked=0.0)
    metrics = yields.compute(params, constants=CONSTANTS)

    assert metrics.total_staked_zec == 0.0
    assert metrics.delegator_share == 0.0
    assert metrics.per_day_zec == 0.0
    assert metrics.annualized_pct == 0.0
    assert metrics.saturated is False


def test_full_commission_zeroes_rewards():
    params = ParameterSet(commission_pct=100.0, delegator_zec=5_000.0)
    metrics = yields.compute(params, constants=CONSTANTS)

    assert metrics.net_factor == 0.0
    assert metrics.per_day_zec == 0.0
    assert metrics.annualized_pct == 0.0


def test_zero_delegator_has_zero_apy():
    metrics = yields.compute(ParameterSet(delegator_zec=0.0), constants=CONSTANTS)

    assert metrics.annualized_pct == 0.0
    assert not math.isnan(metrics.annualized_pct)


def test_share_saturates_when_delegator_covers_pool():
    params = ParameterSet(delegator_zec=2_000_000.0)
    metrics = yields.compute(params, constants=CONSTANTS)

    assert metrics.delegator_share == 1.0
    assert metrics.saturated is True
    assert metrics.per_day_zec == pytest.approx(720.0 * 0.9)
    assert math.isfinite(metrics.annualized_pct)


@pytest.mark.parametrize(
    "params",
    [
        ParameterSet(),
        ParameterSet(commission_pct=0.0, delegator_zec=1e12),
        ParameterSet(pct_shielded_staked=100.0, finalizer_weight=0.0),
        ParameterSet(pct_shielded_staked=0.01, delegator_zec=1e-8),
    ],
)
def test_annualized_pct_is_finite_and_non_negative(params):
    for variant in yields.YieldVariant:
        metrics = yields.compute(params, constants=CONSTANTS, variant=variant)
        assert math.isfinite(metrics.annualized_pct)
        assert metrics.annualized_pct >= 0
        assert 0.0 <= metrics.delegator_share <= 1.0


def test_finalizer_variant_matches_pooled_when_unsaturated():
    params = ParameterSet(finalizer_weight=0.5)
    pooled = yields.compute(params, constants=CONSTANTS)
    weighted = yields.compute(params, constants=CONSTANTS, variant="finalizer")

    assert weighted.reference_pool_zec == pytest.approx(750_000.0)
    assert weighted.reward_per_day == pytest.approx(360.0)
    assert weighted.delegator_share == pytest.approx(0.00008)
    assert weighted.per_day_zec == pytest.approx(pooled.per_day_zec)
    assert pooled.finalizer_stake_zec == pytest.approx(750_000.0)


def test_finalizer_variant_saturates_on_smaller_pool():
    params = ParameterSet(finalizer_weight=0.01, delegator_zec=20_000.0)
    metrics = yields.compute(params, constants=CONSTANTS, variant=yields.YieldVariant.FINALIZER)

    assert metrics.reference_pool_zec == pytest.approx(15_000.0)
    assert metrics.saturated is True
    assert metrics.delegator_share == 1.0


def test_unknown_variant_raises():
    with pytest.raises(ValueError):
        yields.compute(DEFAULT_PARAMS, variant="weekly")


def test_projection_is_finite_and_restartable():
    projection = yields.project_yield(DEFAULT_PARAMS, constants=CONSTANTS)

    first = list(projection)
    second = list(projection)

    assert len(projection) == 12
    assert len(first) == 12
    assert first == second
    assert [sample.month for sample in first] == list(range(1, 13))


def test_projection_compounds_rewards():
    projection = yields.project_yield(DEFAULT_PARAMS, 3, constants=CONSTANTS)
    samples = list(projection)

    assert samples[0].monthly_reward_zec == pytest.approx(0.02592 * 30)
    assert samples[0].delegator_zec == pytest.approx(60 + 0.02592 * 30)
    # Balance compounds, so every month earns a little more than the last.
    assert samples[1].monthly_reward_zec > samples[0].monthly_reward_zec
    assert samples[2].cumulative_reward_zec == pytest.approx(
        sum(s.monthly_reward_zec for s in samples)
    )
    assert samples[2].delegator_zec == pytest.approx(60 + samples[2].cumulative_reward_zec)


def test_projection_pool_growth_dilutes_share():
    params = ParameterSet(pool_growth_pct=10.0)
    samples = list(yields.project_yield(params, 6, constants=CONSTANTS))

    shares = [sample.delegator_share for sample in samples]
    assert all(later < earlier for earlier, later in zip(shares, shares[1:]))
    assert samples[0].reference_pool_zec == pytest.approx(
        (1_500_000.0 - 60.0) * 1.1 + samples[0].delegator_zec
    )


def test_projection_does_not_mutate_params():
    params = ParameterSet(pool_growth_pct=5.0)
    list(yields.project_yield(params, constants=CONSTANTS))
    assert params == ParameterSet(pool_growth_pct=5.0)


def test_projection_with_empty_pool():
    params = ParameterSet(pct_shielded_staked=0.0)
    samples = list(yields.project_yield(params, 2, constants=CONSTANTS))

    assert all(sample.monthly_reward_zec == 0.0 for sample in samples)
    assert all(sample.delegator_share == 0.0 for sample in samples)
    assert all(math.isfinite(sample.annualized_pct) for sample in samples)


def test_projection_to_frame():
    frame = yields.project_yield(DEFAULT_PARAMS, 4, constants=CONSTANTS).to_frame()

    assert isinstance(frame, pd.DataFrame)
    assert len(frame) == 4
    assert list(frame["month"]) == [1, 2, 3, 4]
    assert {"delegator_zec", "annualized_pct", "cumulative_reward_zec"}.issubset(frame.columns)


def test_projection_zero_months_is_empty():
    projection = yields.project_yield(DEFAULT_PARAMS, 0, constants=CONSTANTS)
    assert list(projection) == []
    assert projection.to_frame().empty


def test_projection_rejects_negative_months():
    with pytest.raises(ValueError):
        yields.project_yield(DEFAULT_PARAMS, -1)
