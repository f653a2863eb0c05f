"""Drive the enumerator and retrograde passes to the fixed point."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from hawkbase.data.generator import create_positions
from hawkbase.data.storage import DRAW, UNDECIDED, PositionStore
from hawkbase.engine.retrograde import PassResult, run_pass

logger = logging.getLogger("hawkbase.solver")


@dataclass
class SolveSummary:
    """Per-depth counts of a (possibly partial) solve."""
    counts: dict[int, int] = field(default_factory=dict)
    undecided: int = 0
    draws: Optional[int] = None
    complete: bool = False

    @property
    def longest_mate(self) -> int:
        """Largest depth with at least one position, in plies."""
        nonempty = [d for d, n in self.counts.items() if n > 0]
        return max(nonempty) if nonempty else -1

    @property
    def total_wins(self) -> int:
        return sum(self.counts.values())


def next_depth(store: PositionStore) -> int:
    """Depth the next call to compute_depth should produce.

    Finishes any interrupted commit first.
    """
    store.recover()
    return store.load_progress().completed_depth + 1


def compute_depth(store: PositionStore, depth: int) -> Optional[PassResult]:
    """Compute exactly one depth: the enumeration for 0, one pass otherwise.

    Depth 0 restarts the whole tablebase. Any other depth must be the next
    one; published depths are never recomputed, since the undecided set
    they were computed from no longer exists.
    """
    if depth == 0:
        create_positions(store)
        return None

    expected = next_depth(store)
    if depth != expected:
        raise ValueError(f"Cannot compute depth {depth}: the next depth to "
                         f"compute is {expected}")
    if store.load_progress().complete:
        raise ValueError(f"Tablebase is already complete at depth "
                         f"{expected - 1}")
    return run_pass(store, depth)


def _finish(store: PositionStore):
    progress = store.load_progress()
    progress.draws = store.replace(DRAW, store.read_all(UNDECIDED))
    progress.complete = True
    store.save_progress(progress)
    logger.info(f"Fixed point reached after depth {progress.completed_depth}: "
                f"{progress.draws} drawn positions")


def summarize(store: PositionStore) -> SolveSummary:
    progress = store.load_progress()
    return SolveSummary(
        counts=dict(sorted(progress.counts.items())),
        undecided=progress.undecided,
        draws=progress.draws,
        complete=progress.complete,
    )


def solve(store: PositionStore, max_depth: Optional[int] = None) -> SolveSummary:
    """Run passes until one classifies nothing, or max_depth is reached.

    Resumes from the store's manifest. A pass that adds nothing means the
    next pass of the other colour has nothing new to look at either, so
    the remaining undecided positions are draws.
    """
    start = time.time()
    depth = next_depth(store)

    if store.load_progress().complete:
        logger.info("Tablebase already complete")
        return summarize(store)

    if depth == 0:
        compute_depth(store, 0)
        depth = 1

    while max_depth is None or depth <= max_depth:
        result = compute_depth(store, depth)
        if result.removed == 0:
            _finish(store)
            break
        depth += 1

    summary = summarize(store)
    logger.info(f"Solve finished in {time.time() - start:.1f}s: "
                f"{summary.total_wins} won positions, longest mate "
                f"{summary.longest_mate} plies")
    return summary
