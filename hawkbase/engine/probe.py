"""Look up finished tablebase results for arbitrary KHK positions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from hawkbase.game.state import Position
from hawkbase.data.index import DRAW_DEPTH, UNKNOWN, PositionIndex
from hawkbase.data.storage import DRAW, PositionStore

logger = logging.getLogger("hawkbase.probe")


@dataclass
class ProbeResult:
    position: Position
    depth: Optional[int]  # None for a draw

    @property
    def is_draw(self) -> bool:
        return self.depth is None

    @property
    def mate_in(self) -> Optional[int]:
        """White's moves to mate (0 when Black is already mated)."""
        if self.depth is None:
            return None
        return (self.depth + 1) // 2

    def describe(self) -> str:
        if self.depth is None:
            return "Draw"
        if self.depth == 0:
            return "Black is checkmated"
        plies = "ply" if self.depth == 1 else "plies"
        return f"White mates in {self.mate_in} ({self.depth} {plies})"


class Tablebase:
    """All published depth-sets and the draw set of a finished store."""

    def __init__(self, index: PositionIndex):
        self.index = index

    @classmethod
    def load(cls, store: PositionStore) -> Tablebase:
        progress = store.load_progress()
        if not progress.complete:
            raise RuntimeError(f"Tablebase in {store.root} is not finished "
                               f"(last depth {progress.completed_depth})")
        index = PositionIndex.from_store(store, range(progress.completed_depth + 1))
        index.add_all(store.read_all(DRAW), DRAW_DEPTH)
        logger.info(f"Loaded {len(index)} positions from {store.root}")
        return cls(index)

    def stats(self) -> tuple[dict[int, int], int]:
        """Positions per non-empty depth, and the number of drawn positions."""
        histogram = self.index.depth_histogram()
        draws = histogram.pop(DRAW_DEPTH, 0)
        return histogram, draws

    def probe(self, pos: Position) -> ProbeResult:
        """Result for any legal position, whatever square the White King is on.

        Raises:
            ValueError: If the position cannot occur (for instance White to
                move with the Black King in check).
        """
        pos.validate()
        depth = self.index.depth_of(*pos.canonical().key)
        if depth == UNKNOWN:
            raise ValueError(f"Position {pos.key} is not a legal KHK position")
        return ProbeResult(pos, None if depth == DRAW_DEPTH else depth)
