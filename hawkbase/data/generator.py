"""Enumerate every KHK position and split off the immediate mates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from hawkbase.game.board import ON_BOARD_SQUARES, SPECIAL_SQUARES, adjacent
from hawkbase.game.rules import hawk_attacks, is_checkmate
from hawkbase.game.state import Position
from hawkbase.data.storage import (
    DRAW, UNDECIDED, Progress, PositionStore, depth_collection,
)

logger = logging.getLogger("hawkbase.generator")


@dataclass
class EnumerationResult:
    mates: int
    undecided: int


def generate_positions() -> Iterator[tuple[Position, bool]]:
    """Yield (position, is_mate) for every legal position.

    The White King only visits the special squares; the other two pieces
    visit every remaining square. Each placement is yielded with Black to
    move, then with White to move unless the Black King is already in
    check (White cannot be on move with the enemy king attacked).
    """
    for wk in ON_BOARD_SQUARES:
        if wk not in SPECIAL_SQUARES:
            continue
        for bk in ON_BOARD_SQUARES:
            if bk == wk or adjacent(wk, bk):
                continue
            for hawk in ON_BOARD_SQUARES:
                if hawk == wk or hawk == bk:
                    continue

                yield Position(wk, bk, hawk, False), is_checkmate(wk, bk, hawk, False)

                if not hawk_attacks(wk, hawk, bk):
                    yield Position(wk, bk, hawk, True), False


def create_positions(store: PositionStore) -> EnumerationResult:
    """Write the depth-0 (mate) collection and the initial undecided collection.

    Any earlier contents of the store are discarded, along with its manifest.
    """
    mates: list[Position] = []
    undecided: list[Position] = []

    for pos, is_mate in generate_positions():
        if is_mate:
            mates.append(pos)
        else:
            undecided.append(pos)

    for depth in store.depths():
        store.clear(depth_collection(depth))
    store.clear(DRAW)
    store.replace(depth_collection(0), mates)
    store.replace(UNDECIDED, undecided)
    store.save_progress(Progress(completed_depth=0, counts={0: len(mates)},
                                 undecided=len(undecided)))

    logger.info(f"Enumerated {len(mates) + len(undecided)} positions: "
                f"{len(mates)} mates, {len(undecided)} undecided")
    return EnumerationResult(mates=len(mates), undecided=len(undecided))
