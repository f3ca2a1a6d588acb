"""Bookmarkable query-string codec for calculator parameters.

Keys are part of the public link format and must stay stable:

    scale  display scale (block|day)
    p      finalizer selection weight [0, 1]
    ps     percent of the shielded pool staked [0, 100]
    c      commission percent [0, 100]
    pg     monthly pool growth percent [0, 30]
    dz     delegator amount in ZEC (canonical)
    d      delegator share of the reference pool in percent (legacy alias)

``encode`` always writes ``d`` next to ``dz`` so links still open in readers
that only understand the legacy key. ``decode`` prefers ``dz``.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit

from . import config as cfg
from . import zec_constants as const
from .params import DEFAULT_PARAMS, ParameterSet, merge, parse_number
from .yields import StakingConstants, YieldVariant, reference_pool_zec

LOGGER = logging.getLogger(__name__)

QUERY_FIELDS: dict[str, str] = {
    "scale": "scale_mode",
    "p": "finalizer_weight",
    "ps": "pct_shielded_staked",
    "c": "commission_pct",
    "pg": "pool_growth_pct",
    "dz": "delegator_zec",
}
LEGACY_SHARE_KEY = "d"


def format_number(value: float) -> str:
    """Shortest text that parses back to exactly ``value``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _extract_query(text: str) -> str:
    text = text.strip()
    if "?" in text or "://" in text:
        return urlsplit(text).query
    return text.lstrip("?")


def legacy_share_pct(
    params: ParameterSet,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> float:
    """Delegator amount expressed as a percentage of the reference pool."""
    pool = reference_pool_zec(params, constants=constants, variant=variant)
    if pool <= 0:
        return 0.0
    share_pct = params.delegator_zec / pool * 100.0
    return round(min(const.MAX_PCT, max(const.MIN_PCT, share_pct)), const.ZEC_DECIMALS)


def delegator_from_share(
    params: ParameterSet,
    share_pct: float,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> float:
    """Convert a legacy share percentage into an absolute ZEC amount."""
    share_pct = min(const.MAX_PCT, max(const.MIN_PCT, share_pct))
    pool = reference_pool_zec(params, constants=constants, variant=variant)
    return pool * share_pct / 100.0


def encode(
    params: ParameterSet,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> str:
    pairs = [
        ("scale", params.scale_mode.value),
        ("p", format_number(params.finalizer_weight)),
        ("ps", format_number(params.pct_shielded_staked)),
        ("c", format_number(params.commission_pct)),
        ("pg", format_number(params.pool_growth_pct)),
        ("dz", format_number(params.delegator_zec)),
        (
            LEGACY_SHARE_KEY,
            format_number(legacy_share_pct(params, constants=constants, variant=variant)),
        ),
    ]
    return urlencode(pairs)


def decode(
    query: str,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> ParameterSet:
    """Decode a query string (or full URL) into a normalized ParameterSet.

    Missing or garbage fields fall back to defaults one field at a time. The
    legacy ``d`` share converts to an absolute amount only when ``dz`` is absent.
    """
    raw: dict[str, str] = {}
    for key, value in parse_qsl(_extract_query(query or ""), keep_blank_values=True):
        raw[key] = value

    partial: dict[str, Any] = {
        field: raw[key] for key, field in QUERY_FIELDS.items() if key in raw
    }
    params = merge(DEFAULT_PARAMS, partial)

    has_canonical = parse_number(raw.get("dz")) is not None
    legacy_share = parse_number(raw.get(LEGACY_SHARE_KEY))
    if not has_canonical and legacy_share is not None:
        LOGGER.debug("Migrating legacy share d=%s", legacy_share)
        delegator_zec = delegator_from_share(
            params, legacy_share, constants=constants, variant=variant
        )
        params = merge(params, {"delegator_zec": delegator_zec})
    return params


def build_share_url(
    params: ParameterSet,
    base_url: str | None = None,
    *,
    constants: StakingConstants | None = None,
    variant: YieldVariant | str = YieldVariant.POOLED,
) -> str:
    base = (base_url if base_url is not None else cfg.SHARE_BASE_URL).split("?", 1)[0]
    return f"{base}?{encode(params, constants=constants, variant=variant)}"
