"""Typed calculator parameters and the normalization applied at every entry point."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping

from . import zec_constants as const

LOGGER = logging.getLogger(__name__)


class ScaleMode(str, Enum):
    """Display scale for headline rewards. Does not affect the math."""

    BLOCK = "block"
    DAY = "day"


_SCALE_ALIASES: dict[str, ScaleMode] = {
    "block": ScaleMode.BLOCK,
    "per-block": ScaleMode.BLOCK,
    "day": ScaleMode.DAY,
    "per-day": ScaleMode.DAY,
}


@dataclass(frozen=True)
class ParameterSet:
    scale_mode: ScaleMode = ScaleMode.DAY
    finalizer_weight: float = 1.0
    pct_shielded_staked: float = 50.0
    commission_pct: float = 10.0
    delegator_zec: float = 60.0
    pool_growth_pct: float = 0.0


@dataclass(frozen=True)
class FieldBounds:
    lower: float
    upper: float | None
    decimals: int

    def clamp(self, value: float) -> float:
        value = max(self.lower, value)
        if self.upper is not None:
            value = min(self.upper, value)
        # round() can yield -0.0 for tiny negatives; normalize to 0.0
        return round(value, self.decimals) + 0.0


FIELD_BOUNDS: dict[str, FieldBounds] = {
    "finalizer_weight": FieldBounds(const.MIN_FRACTION, const.MAX_FRACTION, const.FRACTION_DECIMALS),
    "pct_shielded_staked": FieldBounds(const.MIN_PCT, const.MAX_PCT, const.PCT_DECIMALS),
    "commission_pct": FieldBounds(const.MIN_PCT, const.MAX_PCT, const.PCT_DECIMALS),
    "delegator_zec": FieldBounds(const.MIN_DELEGATOR_ZEC, None, const.ZEC_DECIMALS),
    "pool_growth_pct": FieldBounds(
        const.MIN_POOL_GROWTH_PCT, const.MAX_POOL_GROWTH_PCT, const.PCT_DECIMALS
    ),
}

FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(ParameterSet))

DEFAULT_PARAMS = ParameterSet()


def parse_number(value: Any) -> float | None:
    """Best-effort, locale-agnostic numeric parse.

    Accepts ints/floats and strings with surrounding whitespace and ``,``/``_``
    digit grouping. Returns None for anything that is not a finite number
    (empty text, a lone sign or dot, NaN, infinities, booleans).
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip().replace(",", "").replace("_", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_scale_mode(value: Any) -> ScaleMode | None:
    if isinstance(value, ScaleMode):
        return value
    if isinstance(value, str):
        return _SCALE_ALIASES.get(value.strip().lower())
    return None


def clamp_field(name: str, value: float) -> float:
    return FIELD_BOUNDS[name].clamp(value)


def normalize(params: ParameterSet) -> ParameterSet:
    """Clamp and quantize every field of ``params`` to its documented domain."""
    scale_mode = parse_scale_mode(params.scale_mode) or DEFAULT_PARAMS.scale_mode
    numeric: dict[str, float] = {}
    for name, bounds in FIELD_BOUNDS.items():
        number = parse_number(getattr(params, name))
        if number is None:
            number = getattr(DEFAULT_PARAMS, name)
        numeric[name] = bounds.clamp(number)
    return ParameterSet(scale_mode=scale_mode, **numeric)


def merge(current: ParameterSet, partial: Mapping[str, Any]) -> ParameterSet:
    """Apply a partial update onto ``current`` and return the normalized result.

    Unknown field names and unparsable values are ignored; the current value of
    the field is kept.
    """
    updates: dict[str, Any] = {}
    for name, raw in partial.items():
        if name not in FIELD_NAMES:
            LOGGER.debug("Ignoring unknown parameter %r", name)
            continue
        if name == "scale_mode":
            mode = parse_scale_mode(raw)
            if mode is None:
                LOGGER.debug("Ignoring invalid scale mode %r", raw)
                continue
            updates[name] = mode
            continue
        number = parse_number(raw)
        if number is None:
            LOGGER.debug("Ignoring unparsable value %r for %s", raw, name)
            continue
        updates[name] = number
    return normalize(replace(current, **updates))


def to_dict(params: ParameterSet) -> dict[str, Any]:
    return {
        "scale_mode": params.scale_mode.value,
        "finalizer_weight": params.finalizer_weight,
        "pct_shielded_staked": params.pct_shielded_staked,
        "commission_pct": params.commission_pct,
        "delegator_zec": params.delegator_zec,
        "pool_growth_pct": params.pool_growth_pct,
    }
