"""Configuration helpers for the ZEC staking yield calculator."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from . import zec_constants as const

load_dotenv()

OUT_DIR = Path(os.getenv("ZEC_CALC_OUT_DIR", "out"))
PUBLIC_DIR = Path(os.getenv("ZEC_CALC_PUBLIC_DIR", "public"))
CALCULATOR_OUT_DIR = OUT_DIR / "calculator"

SHARE_BASE_URL = os.getenv("ZEC_CALC_BASE_URL", "https://zec-staking.example.org/calculator/")


def _env_float(name: str, default: float) -> float:
    env_value = os.getenv(name)
    if env_value:
        try:
            value = float(env_value)
        except ValueError:
            return default
        if math.isfinite(value):
            return value
    return default


TOTAL_SHIELDED_ZEC = max(
    _env_float("ZEC_TOTAL_SHIELDED", const.DEFAULT_TOTAL_SHIELDED_ZEC), 0.0
)


@dataclass(frozen=True)
class ClipboardConfig:
    """Clipboard commands tried in order by the copy-link helper."""

    commands: tuple[tuple[str, ...], ...] = field(
        default_factory=lambda: (
            ("pbcopy",),
            ("wl-copy",),
            ("xclip", "-selection", "clipboard"),
            ("xsel", "--clipboard", "--input"),
            ("clip",),
        )
    )
    timeout_seconds: float = 2.0
    fallback_filename: str = "share_link.txt"


DEFAULT_CLIPBOARD_CONFIG = ClipboardConfig()


def default_projection_months() -> int:
    """Default number of months projected when no explicit horizon supplied."""
    env_value = os.getenv("ZEC_PROJECTION_MONTHS")
    if env_value:
        try:
            months = int(env_value)
        except ValueError:
            pass
        else:
            if months > 0:
                return months
    return const.DEFAULT_PROJECTION_MONTHS
