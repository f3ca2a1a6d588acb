#!/usr/bin/env python3
"""Print ZEC staking yield metrics, a monthly projection and a share link."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from zec_staking import cli


if __name__ == "__main__":
    raise SystemExit(cli.main())
