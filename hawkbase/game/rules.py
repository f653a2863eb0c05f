"""Attack tests, Black King mobility, mate and stalemate for KHK.

The Hawk (Seirawan chess) moves like a knight or a bishop. With only the
two kings on the board besides it, the White King is the only piece that
can block its diagonals: the Black King never blocks, since a square
behind it stays attacked once it steps along the line.
"""

from __future__ import annotations

from typing import Iterator

from hawkbase.game.board import KING_OFFSETS, adjacent, king_neighbors, on_board

# 0x88 knight steps
KNIGHT_OFFSETS = (-33, -31, -18, -14, 14, 18, 31, 33)
# 0x88 diagonal steps (up-right, up-left, down-left, down-right)
DIAGONAL_OFFSETS = (17, 15, -17, -15)


def _on_diagonal_unblocked(white_king: int, hawk: int, target: int) -> bool:
    for step in DIAGONAL_OFFSETS:
        sq = hawk + step
        while on_board(sq):
            if sq == target:
                return True
            if sq == white_king:
                break
            sq += step
    return False


def hawk_attacks(white_king: int, hawk: int, target: int) -> bool:
    """With the White King on white_king, does a Hawk on hawk attack target?"""
    if target == hawk:
        return False
    if (target - hawk) in KNIGHT_OFFSETS:
        return True
    return _on_diagonal_unblocked(white_king, hawk, target)


def hawk_targets(white_king: int, hawk: int) -> Iterator[int]:
    """Yield every on-board square the Hawk attacks: knight jumps, then diagonals.

    A diagonal ray ends on the White King's square (included, it is attacked
    in the sense of being defended).
    """
    for step in KNIGHT_OFFSETS:
        sq = hawk + step
        if on_board(sq):
            yield sq
    for step in DIAGONAL_OFFSETS:
        sq = hawk + step
        while on_board(sq):
            yield sq
            if sq == white_king:
                break
            sq += step


def king_attacks(a: int, b: int) -> bool:
    return adjacent(a, b)


def square_covered(white_king: int, hawk: int, square: int) -> bool:
    """Is square forbidden to the Black King?"""
    return hawk_attacks(white_king, hawk, square) or king_attacks(white_king, square)


def is_in_check(white_king: int, black_king: int, hawk: int) -> bool:
    return hawk_attacks(white_king, hawk, black_king)


def black_king_destinations(white_king: int, black_king: int, hawk: int) -> list[int]:
    """Legal Black King moves, in rank-then-file offset order.

    Taking an unguarded Hawk is legal; it leaves bare kings.
    """
    return [sq for sq in king_neighbors(black_king)
            if not square_covered(white_king, hawk, sq)]


def white_king_destinations(white_king: int, black_king: int, hawk: int) -> list[int]:
    """Legal White King moves, in rank-then-file offset order."""
    return [sq for sq in king_neighbors(white_king)
            if sq != black_king and sq != hawk and not adjacent(sq, black_king)]


def is_checkmate(white_king: int, black_king: int, hawk: int, white_to_move: bool) -> bool:
    """Given a KHK position, determine whether Black is mated.

    Every square of the 3x3 block around the Black King, its own square
    included, must be covered. Covering the king's own square is what
    separates mate from stalemate; check is not tested separately.
    """
    if white_to_move:
        return False

    for step in (0,) + KING_OFFSETS:
        sq = black_king + step
        if on_board(sq) and not square_covered(white_king, hawk, sq):
            return False
    return True


def is_stalemate(white_king: int, black_king: int, hawk: int, white_to_move: bool) -> bool:
    """Given a KHK position, determine whether Black is stalemated."""
    if white_to_move:
        return False

    for sq in king_neighbors(black_king):
        if not square_covered(white_king, hawk, sq):
            return False
    return not hawk_attacks(white_king, hawk, black_king)
