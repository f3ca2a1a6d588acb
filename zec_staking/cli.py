"""Terminal front-end for the staking yield calculator."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import codec
from . import config as cfg
from . import formatting as fmt
from . import params as params_mod
from .session import CalculatorSession
from .share import copy_link
from .yields import YieldProjection, YieldVariant, project_yield

LOGGER = logging.getLogger(__name__)

FIELD_FLAGS: dict[str, str] = {
    "finalizer_weight": "finalizer_weight",
    "pct_staked": "pct_shielded_staked",
    "commission": "commission_pct",
    "delegator_zec": "delegator_zec",
    "pool_growth": "pool_growth_pct",
    "scale": "scale_mode",
}


def build_parser() -> argparse.ArgumentParser:
    def non_negative_int(value: str) -> int:
        val = int(value)
        if val < 0:
            raise argparse.ArgumentTypeError("Value must be >= 0")
        return val

    parser = argparse.ArgumentParser(description="Compute ZEC delegator staking yields.")
    parser.add_argument(
        "--url",
        "--query",
        dest="url",
        help="Calculator link or bare query string to start from (e.g. 'ps=50&c=10&dz=60').",
    )
    parser.add_argument("--reset", action="store_true", help="Ignore --url and start from defaults.")
    parser.add_argument("--finalizer-weight", help="Finalizer selection weight in [0, 1].")
    parser.add_argument("--pct-staked", help="Percent of the shielded pool staked [0, 100].")
    parser.add_argument("--commission", help="Operator commission percent [0, 100].")
    parser.add_argument("--delegator-zec", help="Delegated amount in ZEC.")
    parser.add_argument("--pool-growth", help="Monthly pool growth percent [0, 30].")
    parser.add_argument("--scale", help="Display scale: block or day.")
    parser.add_argument(
        "--legacy-share",
        help="Delegator share of the pool in percent (legacy 'd'); ignored when --delegator-zec is set.",
    )
    parser.add_argument(
        "--variant",
        choices=[variant.value for variant in YieldVariant],
        default=YieldVariant.POOLED.value,
        help="Reward formula variant (default: pooled).",
    )
    parser.add_argument(
        "--months",
        type=non_negative_int,
        default=cfg.default_projection_months(),
        help="Projection horizon in months (0 disables the projection).",
    )
    parser.add_argument("--base-url", default=cfg.SHARE_BASE_URL, help="Base URL for share links.")
    parser.add_argument("--copy", action="store_true", help="Copy the share link to the clipboard.")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON instead of tables.")
    parser.add_argument("--verbose", action="store_true", help="Log rejected inputs.")
    return parser


def build_session(args: argparse.Namespace) -> CalculatorSession:
    """Apply CLI inputs in the same order a page load and form edits would."""
    session = CalculatorSession(base_url=args.base_url, variant=args.variant)
    if args.url and not args.reset:
        session.load_url(args.url)

    overrides = {
        field: getattr(args, flag)
        for flag, field in FIELD_FLAGS.items()
        if getattr(args, flag) is not None
    }
    if overrides:
        session.set(overrides)

    if args.legacy_share is not None and args.delegator_zec is None:
        share = params_mod.parse_number(args.legacy_share)
        if share is None:
            LOGGER.debug("Ignoring unparsable legacy share %r", args.legacy_share)
        else:
            session.set(
                delegator_zec=codec.delegator_from_share(
                    session.params, share, variant=session.variant
                )
            )
    return session


def render_summary(session: CalculatorSession) -> Table:
    table = Table(title="ZEC staking yield", box=box.SIMPLE_HEAVY)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for label, value in fmt.summary_rows(session.params, session.metrics):
        table.add_row(label, value)
    return table


def render_projection(projection: YieldProjection) -> Table:
    table = Table(title=f"{len(projection)}-month projection", box=box.SIMPLE)
    table.add_column("Month", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Reward", justify="right")
    table.add_column("Cumulative", justify="right")
    table.add_column("APY", justify="right")
    for sample in projection:
        table.add_row(
            str(sample.month),
            fmt.format_number(sample.delegator_zec, decimals=6),
            fmt.format_number(sample.monthly_reward_zec, decimals=6),
            fmt.format_number(sample.cumulative_reward_zec, decimals=6),
            fmt.format_pct(sample.annualized_pct, decimals=3),
        )
    return table


def _json_payload(session: CalculatorSession, projection: YieldProjection) -> dict:
    metrics = session.metrics
    return {
        "params": params_mod.to_dict(session.params),
        "metrics": {
            "total_staked_zec": metrics.total_staked_zec,
            "reference_pool_zec": metrics.reference_pool_zec,
            "finalizer_stake_zec": metrics.finalizer_stake_zec,
            "delegator_share": metrics.delegator_share,
            "saturated": metrics.saturated,
            "net_factor": metrics.net_factor,
            "reward_per_round": metrics.reward_per_round,
            "reward_per_day": metrics.reward_per_day,
            "per_round_zec": metrics.per_round_zec,
            "per_day_zec": metrics.per_day_zec,
            "per_year_zec": metrics.per_year_zec,
            "annualized_pct": metrics.annualized_pct,
        },
        "projection": projection.to_frame().to_dict(orient="records"),
        "share_url": session.share_url,
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    session = build_session(args)
    projection = project_yield(session.params, args.months, variant=session.variant)
    result = copy_link(session.share_url) if args.copy else None

    if args.json:
        payload = _json_payload(session, projection)
        if result is not None:
            payload["copy"] = {
                "ok": result.ok,
                "method": result.method,
                "message": result.message,
                "fallback_path": str(result.fallback_path) if result.fallback_path else None,
            }
        print(json.dumps(payload, indent=2))
        return 0

    console = Console()
    console.print(render_summary(session))
    if len(projection):
        console.print(render_projection(projection))
    console.print(Panel(session.share_url, title="Share link", expand=False))
    if result is not None:
        style = "green" if result.ok else "yellow"
        console.print(f"[{style}]{result.message}[/]")
    return 0
