"""In-memory lookup table from (white king, black king, hawk, side) to depth."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from hawkbase.game.board import NUM_SQUARES
from hawkbase.game.state import Position
from hawkbase.data.storage import PositionStore, depth_collection

logger = logging.getLogger("hawkbase.index")

UNKNOWN = -1
DRAW_DEPTH = -2


class PositionIndex:
    """Direct-address table over 0x88 squares, one int16 cell per position key.

    128 * 128 * 128 * 2 cells is 8 MB, small enough to hold every depth of
    the ending in a single table.
    """

    def __init__(self):
        self.table = np.full((NUM_SQUARES, NUM_SQUARES, NUM_SQUARES, 2), UNKNOWN,
                             dtype=np.int16)
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def add(self, pos: Position, depth: int):
        cell = (pos.white_king, pos.black_king, pos.hawk, int(pos.white_to_move))
        if self.table[cell] == UNKNOWN:
            self._size += 1
        self.table[cell] = depth

    def add_all(self, positions: Iterable[Position], depth: int) -> int:
        n = 0
        for pos in positions:
            self.add(pos, depth)
            n += 1
        return n

    def depth_of(self, white_king: int, black_king: int, hawk: int,
                 white_to_move: bool) -> int:
        """Stored depth, DRAW_DEPTH for draws, or UNKNOWN."""
        return int(self.table[white_king, black_king, hawk, int(white_to_move)])

    def depth_histogram(self) -> dict[int, int]:
        """Number of indexed positions per depth (draws under DRAW_DEPTH)."""
        values = self.table[self.table != UNKNOWN]
        depths, counts = np.unique(values, return_counts=True)
        return {int(d): int(c) for d, c in zip(depths, counts)}

    @classmethod
    def from_store(cls, store: PositionStore, depths: Iterable[int]) -> PositionIndex:
        """Load the given depth-sets. Missing collections raise MissingCollectionError."""
        index = cls()
        for depth in depths:
            n = index.add_all(store.read_all(depth_collection(depth)), depth)
            logger.debug(f"Indexed {n} positions at depth {depth}")
        return index
