"""Scenario analysis utilities for delegator yields."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from .params import ParameterSet, merge
from .yields import StakingConstants, YieldVariant, compute

DEFAULT_PCT_STAKED_STEPS: tuple[float, ...] = (10.0, 25.0, 50.0, 75.0, 100.0)
DEFAULT_COMMISSION_STEPS: tuple[float, ...] = (0.0, 5.0, 10.0, 20.0)


def build_yield_sensitivity(
    params: ParameterSet,
    pct_staked_values: Iterable[float] = DEFAULT_PCT_STAKED_STEPS,
    commission_values: Iterable[float] = DEFAULT_COMMISSION_STEPS,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> pd.DataFrame:
    """Model how delegator APY changes with pool participation and commission.

    Every other field of ``params`` is held constant. Grid values go through the
    same clamping as form input, so out-of-range steps collapse onto the
    boundary.

    Returns:
        DataFrame with columns:
        - pct_shielded_staked: Share of the shielded pool staked (%)
        - commission_pct: Operator commission (%)
        - total_staked_zec: Resulting staked pool (ZEC)
        - per_day_zec: Delegator reward per day (ZEC)
        - annualized_pct: Delegator APY (%)
        - apy_delta: Change vs. the APY of ``params`` (percentage points)
    """
    commission_steps = list(commission_values)
    baseline = compute(params, constants=constants, variant=variant)

    records = []
    for pct_staked in pct_staked_values:
        for commission in commission_steps:
            scenario = merge(
                params, {"pct_shielded_staked": pct_staked, "commission_pct": commission}
            )
            metrics = compute(scenario, constants=constants, variant=variant)
            records.append(
                {
                    "pct_shielded_staked": scenario.pct_shielded_staked,
                    "commission_pct": scenario.commission_pct,
                    "total_staked_zec": metrics.total_staked_zec,
                    "per_day_zec": metrics.per_day_zec,
                    "annualized_pct": round(metrics.annualized_pct, 4),
                    "apy_delta": round(metrics.annualized_pct - baseline.annualized_pct, 4),
                }
            )

    columns = [
        "pct_shielded_staked",
        "commission_pct",
        "total_staked_zec",
        "per_day_zec",
        "annualized_pct",
        "apy_delta",
    ]
    return pd.DataFrame(records, columns=columns)
