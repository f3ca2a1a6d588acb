"""Staking yield derivation for ZEC delegators.

Provides:
- ``compute``: pure mapping from a ParameterSet to DerivedMetrics
- ``project_yield``: lazy monthly projection with auto-compounded rewards
- ``reference_pool_zec``: the pool a delegator's share is measured against

Two formula variants exist. POOLED is canonical: the delegator earns the
stakers' share of every round in proportion to their slice of the whole staked
pool. FINALIZER measures the delegator against a single finalizer's stake and
only credits the rounds that finalizer is selected for.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import pandas as pd

from . import config as cfg
from . import zec_constants as const
from .params import ParameterSet


class YieldVariant(str, Enum):
    POOLED = "pooled"
    FINALIZER = "finalizer"


@dataclass(frozen=True)
class StakingConstants:
    block_reward_zec: float = const.BLOCK_REWARD_ZEC
    rounds_per_day: int = const.ROUNDS_PER_DAY
    share_dev: float = const.SHARE_DEV
    share_miners: float = const.SHARE_MINERS
    share_stakers: float = const.SHARE_STAKERS
    total_shielded_zec: float = cfg.TOTAL_SHIELDED_ZEC
    days_per_year: int = const.DAYS_PER_YEAR
    days_per_month: int = const.DAYS_PER_MONTH


DEFAULT_CONSTANTS = StakingConstants()


@dataclass(frozen=True)
class DerivedMetrics:
    total_staked_zec: float
    reference_pool_zec: float
    finalizer_stake_zec: float
    delegator_share: float
    saturated: bool
    net_factor: float
    reward_per_round: float
    reward_per_day: float
    per_round_zec: float
    per_day_zec: float
    per_year_zec: float
    annualized_pct: float


@dataclass(frozen=True)
class ProjectionSample:
    month: int
    delegator_zec: float
    reference_pool_zec: float
    delegator_share: float
    monthly_reward_zec: float
    cumulative_reward_zec: float
    per_day_zec: float
    annualized_pct: float


def _resolve_variant(variant: YieldVariant | str) -> YieldVariant:
    try:
        return YieldVariant(variant)
    except ValueError:
        raise ValueError(f"Unknown yield variant: {variant!r}") from None


def total_staked_zec(params: ParameterSet, constants: StakingConstants | None = None) -> float:
    consts = constants or DEFAULT_CONSTANTS
    return consts.total_shielded_zec * params.pct_shielded_staked / 100.0


def reference_pool_zec(
    params: ParameterSet,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> float:
    """Return the stake a delegator's share is measured against."""
    staked = total_staked_zec(params, constants)
    if _resolve_variant(variant) is YieldVariant.FINALIZER:
        return staked * params.finalizer_weight
    return staked


def _reward_per_day(
    params: ParameterSet, consts: StakingConstants, variant: YieldVariant
) -> float:
    reward_per_round = consts.block_reward_zec * consts.share_stakers
    if variant is YieldVariant.FINALIZER:
        return reward_per_round * params.finalizer_weight * consts.rounds_per_day
    return reward_per_round * consts.rounds_per_day


def _delegator_share(delegator_zec: float, pool_zec: float) -> float:
    if pool_zec <= 0:
        return 0.0
    return max(0.0, min(1.0, delegator_zec / pool_zec))


def _annualized_pct(per_day_zec: float, delegator_zec: float, days_per_year: int) -> float:
    if delegator_zec <= 0:
        return 0.0
    return per_day_zec * days_per_year / delegator_zec * 100.0


def compute(
    params: ParameterSet,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> DerivedMetrics:
    """Derive yield metrics for a clamped ParameterSet.

    Total over the normalized domain: zero pools and zero stakes produce zero
    rewards rather than errors.
    """
    consts = constants or DEFAULT_CONSTANTS
    resolved = _resolve_variant(variant)

    staked = total_staked_zec(params, consts)
    pool = reference_pool_zec(params, constants=consts, variant=resolved)
    share = _delegator_share(params.delegator_zec, pool)
    net_factor = 1.0 - params.commission_pct / 100.0
    reward_per_round = consts.block_reward_zec * consts.share_stakers
    reward_per_day = _reward_per_day(params, consts, resolved)

    per_day = reward_per_day * share * net_factor
    per_round = per_day / consts.rounds_per_day if consts.rounds_per_day else 0.0
    per_year = per_day * consts.days_per_year

    return DerivedMetrics(
        total_staked_zec=staked,
        reference_pool_zec=pool,
        finalizer_stake_zec=staked * params.finalizer_weight,
        delegator_share=share,
        saturated=pool > 0 and params.delegator_zec >= pool,
        net_factor=net_factor,
        reward_per_round=reward_per_round,
        reward_per_day=reward_per_day,
        per_round_zec=per_round,
        per_day_zec=per_day,
        per_year_zec=per_year,
        annualized_pct=_annualized_pct(per_day, params.delegator_zec, consts.days_per_year),
    )


class YieldProjection:
    """Finite, restartable sequence of monthly ProjectionSample values.

    Samples are generated on iteration; iterating again replays the same
    sequence from the starting ParameterSet.
    """

    def __init__(
        self,
        params: ParameterSet,
        months: int,
        *,
        constants: StakingConstants | None = None,
        variant: YieldVariant | str = YieldVariant.POOLED,
    ) -> None:
        if months < 0:
            raise ValueError(f"months must be non-negative, got {months}")
        self.params = params
        self.months = int(months)
        self.constants = constants or DEFAULT_CONSTANTS
        self.variant = _resolve_variant(variant)

    def __len__(self) -> int:
        return self.months

    def __iter__(self) -> Iterator[ProjectionSample]:
        consts = self.constants
        params = self.params
        reward_per_day = _reward_per_day(params, consts, self.variant)
        net_factor = 1.0 - params.commission_pct / 100.0
        growth = 1.0 + params.pool_growth_pct / 100.0

        balance = params.delegator_zec
        pool = reference_pool_zec(params, constants=consts, variant=self.variant)
        # An empty pool earns nothing for the whole horizon
        staking_open = pool > 0
        rest_of_pool = max(pool - balance, 0.0)
        per_day = reward_per_day * _delegator_share(balance, pool) * net_factor
        cumulative = 0.0

        for month in range(1, self.months + 1):
            monthly_reward = per_day * consts.days_per_month
            cumulative += monthly_reward
            balance += monthly_reward
            rest_of_pool *= growth
            pool = rest_of_pool + balance if staking_open else 0.0
            share = _delegator_share(balance, pool)
            per_day = reward_per_day * share * net_factor
            yield ProjectionSample(
                month=month,
                delegator_zec=balance,
                reference_pool_zec=pool,
                delegator_share=share,
                monthly_reward_zec=monthly_reward,
                cumulative_reward_zec=cumulative,
                per_day_zec=per_day,
                annualized_pct=_annualized_pct(per_day, balance, consts.days_per_year),
            )

    def to_frame(self) -> pd.DataFrame:
        columns = [
            "month",
            "delegator_zec",
            "reference_pool_zec",
            "delegator_share",
            "monthly_reward_zec",
            "cumulative_reward_zec",
            "per_day_zec",
            "annualized_pct",
        ]
        records = [
            {column: getattr(sample, column) for column in columns} for sample in self
        ]
        return pd.DataFrame(records, columns=columns)


def project_yield(
    params: ParameterSet,
    months: int = const.DEFAULT_PROJECTION_MONTHS,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> YieldProjection:
    """Project monthly auto-compounded rewards for ``months`` months."""
    return YieldProjection(params, months, constants=constants, variant=variant)
