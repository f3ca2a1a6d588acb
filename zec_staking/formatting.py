"""Locale-agnostic number formatting for calculator output."""

from __future__ import annotations

from .params import ParameterSet, ScaleMode
from .yields import DerivedMetrics

SCALE_LABELS: dict[ScaleMode, str] = {
    ScaleMode.BLOCK: "per block",
    ScaleMode.DAY: "per day",
}


def format_number(value: float | int | None, *, decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:,.{decimals}f}"


def format_zec(value: float | None, *, decimals: int = 4) -> str:
    base = format_number(value, decimals=decimals)
    if base == "—":
        return base
    return f"{base} ZEC"


def format_pct(value: float | None, *, decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:.{decimals}f}%"


def headline_reward(params: ParameterSet, metrics: DerivedMetrics) -> tuple[str, float]:
    """Reward shown in the headline for the selected display scale."""
    if params.scale_mode is ScaleMode.BLOCK:
        return SCALE_LABELS[ScaleMode.BLOCK], metrics.per_round_zec
    return SCALE_LABELS[ScaleMode.DAY], metrics.per_day_zec


def summary_rows(params: ParameterSet, metrics: DerivedMetrics) -> list[tuple[str, str]]:
    """Label/value pairs shared by the terminal table and the HTML page."""
    scale_label, headline = headline_reward(params, metrics)
    share_text = format_pct(metrics.delegator_share * 100, decimals=6)
    if metrics.saturated:
        share_text += " (covers pool)"
    return [
        ("Total staked", format_zec(metrics.total_staked_zec, decimals=0)),
        ("Finalizer stake", format_zec(metrics.finalizer_stake_zec, decimals=0)),
        ("Delegator share", share_text),
        ("Net factor", format_number(metrics.net_factor, decimals=4)),
        ("Stakers' reward per round", format_zec(metrics.reward_per_round)),
        ("Stakers' reward per day", format_zec(metrics.reward_per_day, decimals=2)),
        (f"Your reward {scale_label}", format_zec(headline, decimals=8)),
        ("Your reward per year", format_zec(metrics.per_year_zec)),
        ("Annualized yield", format_pct(metrics.annualized_pct)),
    ]
