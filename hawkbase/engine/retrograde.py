"""Retrograde passes: extend the solved frontier backward by one ply.

Depth convention: depth 0 holds the mates (Black to move). Odd depths hold
White-to-move positions where White mates in (depth + 1) / 2 moves; even
depths hold Black-to-move positions where every Black reply reaches one of
the odd depths already published.

A pass reads the undecided collection and snapshots the depth-sets it needs
into a PositionIndex. Nothing is written until the whole pass is done;
run_pass then publishes the new depth-set and the shrunk undecided set
together.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from hawkbase.game.board import canonicalize
from hawkbase.game.rules import (
    black_king_destinations, hawk_targets, is_stalemate, white_king_destinations,
)
from hawkbase.game.state import Position
from hawkbase.data.index import UNKNOWN, PositionIndex
from hawkbase.data.storage import UNDECIDED, PositionStore, StoreError

logger = logging.getLogger("hawkbase.retrograde")


@dataclass
class PassResult:
    """Outcome of one pass, before it is committed to the store."""
    depth: int
    solved: list[Position] = field(default_factory=list)
    remaining: list[Position] = field(default_factory=list)

    @property
    def removed(self) -> int:
        return len(self.solved)


def white_can_reach(index: PositionIndex, target_depth: int, pos: Position) -> bool:
    """Does White have a move from pos into a Black-to-move position at target_depth?

    Hawk moves are tried first, then King moves. Stored positions keep the
    White King on a special square, so a King move elsewhere is looked up
    through the symmetry that brings it back.
    """
    wk, bk, hawk = pos.white_king, pos.black_king, pos.hawk

    for dest in hawk_targets(wk, hawk):
        if dest == wk or dest == bk:
            continue
        if index.depth_of(wk, bk, dest, False) == target_depth:
            return True

    for dest in white_king_destinations(wk, bk, hawk):
        if index.depth_of(*canonicalize(dest, bk, hawk), False) == target_depth:
            return True

    return False


def black_cannot_escape(index: PositionIndex, pos: Position) -> bool:
    """Does every legal Black King move land in an indexed White win?

    True when Black has no legal move at all; the caller tells stalemate apart.
    """
    wk, bk, hawk = pos.white_king, pos.black_king, pos.hawk

    for dest in black_king_destinations(wk, bk, hawk):
        if dest == hawk:
            # Bare kings: no position of this ending follows.
            return False
        if index.depth_of(wk, dest, hawk, True) == UNKNOWN:
            return False

    return True


def white_one_ply_more(store: PositionStore, depth: int) -> PassResult:
    """Classify White-to-move positions that reach depth - 1 in one move."""
    if depth < 1 or depth % 2 == 0:
        raise ValueError(f"White passes compute odd depths, got {depth}")

    previous = PositionIndex.from_store(store, [depth - 1])
    result = PassResult(depth)

    for pos in store.read_all(UNDECIDED):
        if pos.white_to_move and white_can_reach(previous, depth - 1, pos):
            result.solved.append(pos)
        else:
            result.remaining.append(pos)

    return result


def black_one_ply_more(store: PositionStore, depth: int) -> PassResult:
    """Classify Black-to-move positions whose every move reaches an odd depth < depth.

    Stalemates satisfy the move test vacuously and are left undecided; they
    end up in the draw set.
    """
    if depth < 2 or depth % 2 == 1:
        raise ValueError(f"Black passes compute even depths, got {depth}")

    wins = PositionIndex.from_store(store, range(1, depth, 2))
    result = PassResult(depth)

    for pos in store.read_all(UNDECIDED):
        if (not pos.white_to_move
                and black_cannot_escape(wins, pos)
                and not is_stalemate(pos.white_king, pos.black_king, pos.hawk, False)):
            result.solved.append(pos)
        else:
            result.remaining.append(pos)

    return result


def run_pass(store: PositionStore, depth: int) -> PassResult:
    """Compute depth with the pass matching its parity and publish the result."""
    if depth < 1:
        raise ValueError(f"Passes compute depths >= 1, got {depth}")

    side = "White" if depth % 2 == 1 else "Black"
    start = time.time()
    try:
        if depth % 2 == 1:
            result = white_one_ply_more(store, depth)
        else:
            result = black_one_ply_more(store, depth)
    except StoreError as e:
        logger.error(f"{side} pass for depth {depth} aborted: {e}")
        raise

    store.commit_pass(depth, result.solved, result.remaining)
    logger.info(f"{side} pass depth {depth}: {result.removed} solved, "
                f"{len(result.remaining)} undecided ({time.time() - start:.1f}s)")
    return result
