#!/usr/bin/env python3
"""Look up a position in a finished KHK tablebase.

Usage:
    python scripts/probe_position.py "Kc2 ka1 Hc3 b" [--store data/khk]
    python scripts/probe_position.py --stats [--store data/khk]
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hawkbase.config import TablebaseConfig, load_config
from hawkbase.data.storage import PositionStore, StoreError
from hawkbase.engine.probe import Tablebase
from hawkbase.game.notation import text_to_position


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Probe the KHK tablebase")
    parser.add_argument("position", nargs="?", default=None,
                        help="Position such as 'Kc2 ka1 Hc3 b'")
    parser.add_argument("--config", type=str, default=None)
    parser.add_argument("--store", type=str, default=None)
    parser.add_argument("--show", action="store_true", help="Print the board")
    parser.add_argument("--stats", action="store_true",
                        help="Print the number of positions per depth")
    args = parser.parse_args(argv)

    if args.position is None and not args.stats:
        parser.error("give a position or --stats")

    logging.basicConfig(level=logging.WARNING, format="%(message)s")

    cfg = load_config(args.config) if args.config else TablebaseConfig()
    store = PositionStore(args.store or cfg.store_dir, prefix=cfg.prefix)

    try:
        pos = text_to_position(args.position) if args.position else None
        tablebase = Tablebase.load(store)
        result = tablebase.probe(pos) if pos else None
    except (ValueError, RuntimeError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.stats:
        counts, draws = tablebase.stats()
        for depth, count in sorted(counts.items()):
            print(f"depth {depth:3d}: {count}")
        print(f"draws    : {draws}")

    if result is not None:
        if args.show:
            print(pos.render())
            print()
        print(result.describe())
    return 0


if __name__ == "__main__":
    sys.exit(main())
