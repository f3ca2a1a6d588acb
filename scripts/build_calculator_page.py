#!/usr/bin/env python3
"""Generate the standalone HTML page for the ZEC staking yield calculator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from zec_staking import config as cfg
from zec_staking import page
from zec_staking import scenarios
from zec_staking.session import CalculatorSession
from zec_staking.yields import YieldVariant, project_yield

LOGGER = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--url",
        help="Calculator link or query string whose parameters seed the page (defaults otherwise).",
    )
    parser.add_argument(
        "--variant",
        choices=[variant.value for variant in YieldVariant],
        default=YieldVariant.POOLED.value,
        help="Reward formula variant (default: pooled).",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=cfg.default_projection_months(),
        help="Projection horizon in months.",
    )
    parser.add_argument("--base-url", default=cfg.SHARE_BASE_URL, help="Base URL for share links.")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=cfg.CALCULATOR_OUT_DIR,
        help="Directory to write the standalone HTML file.",
    )
    parser.add_argument(
        "--public-dir",
        type=Path,
        default=cfg.PUBLIC_DIR,
        help="Directory for static deployment assets.",
    )
    parser.add_argument(
        "--no-public",
        action="store_true",
        help="Skip mirroring the page into the public directory.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.months < 0:
        parser.error("--months must be >= 0")

    session = CalculatorSession(base_url=args.base_url, variant=args.variant)
    if args.url:
        session.load_url(args.url)
    projection = project_yield(session.params, args.months, variant=session.variant)
    sensitivity = scenarios.build_yield_sensitivity(session.params, variant=session.variant)
    document = page.render_page(
        session.params,
        session.metrics,
        projection,
        session.share_url,
        sensitivity=sensitivity,
    )

    output_path = page.write_page(args.out_dir / "index.html", document)
    LOGGER.info("Wrote %s", output_path)

    if not args.no_public:
        public_path = page.write_page(args.public_dir / "calculator" / "index.html", document)
        LOGGER.info("Copied %s -> %s", output_path, public_path)


if __name__ == "__main__":
    main()
