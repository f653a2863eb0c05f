#!/usr/bin/env python3
"""Build the KHK (King + Hawk vs King) tablebase by retrograde analysis.

Usage:
    python scripts/build_tablebase.py --config configs/tablebase.yaml
    python scripts/build_tablebase.py --store data/khk --depth 7
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hawkbase.config import TablebaseConfig, load_config
from hawkbase.data.storage import PositionStore, StoreError
from hawkbase.engine.solver import compute_depth, next_depth, solve

logger = logging.getLogger("hawkbase.build")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build the KHK tablebase")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML config with a 'tablebase' section")
    parser.add_argument("--store", type=str, default=None,
                        help="Directory holding the position collections")
    parser.add_argument("--prefix", type=str, default=None,
                        help="File name prefix of the collections")
    parser.add_argument("--depth", type=int, default=None,
                        help="Compute exactly this depth and stop")
    parser.add_argument("--max-depth", type=int, default=None,
                        help="Stop after this depth even if not finished")
    parser.add_argument("--log-level", type=str, default=None)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    cfg = load_config(args.config) if args.config else TablebaseConfig()
    store_dir = args.store or cfg.store_dir
    prefix = args.prefix or cfg.prefix
    max_depth = args.max_depth if args.max_depth is not None else cfg.max_depth

    logging.basicConfig(level=(args.log_level or cfg.log_level).upper(),
                        format="%(asctime)s [%(name)s] %(message)s")

    store = PositionStore(store_dir, prefix=prefix)

    try:
        if args.depth is not None:
            result = compute_depth(store, args.depth)
            if result is not None and result.removed == 0:
                logger.info(f"Depth {args.depth} is empty; run without --depth "
                            f"to finish the tablebase")
        else:
            summary = solve(store, max_depth=max_depth)
            for depth, count in summary.counts.items():
                logger.info(f"  depth {depth:3d}: {count} positions")
            if summary.complete:
                logger.info(f"  draws    : {summary.draws} positions")
            else:
                logger.info(f"Stopped before the fixed point; next depth is "
                            f"{next_depth(store)}")
    except (StoreError, ValueError) as e:
        logger.error(f"Build failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
