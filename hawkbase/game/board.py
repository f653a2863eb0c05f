"""Board geometry: 0x88 squares, adjacency, symmetries, text rendering.

Squares are 0x88 integers (rank * 16 + file). Off-board detection is a
single mask test and every king or knight step is a constant offset.
"""

from __future__ import annotations

from enum import IntEnum

BOARD_SIZE = 8
NUM_SQUARES = 128  # 0x00..0x7f; half of them are on the board

# Only squares the White King may occupy in stored positions.
# a1 b1 c1 d1 / b2 c2 d2 / c3 d3 / d4 -- the triangle rank <= file <= 3.
SPECIAL_SQUARES: frozenset[int] = frozenset({0, 1, 2, 3, 17, 18, 19, 34, 35, 51})

KING_OFFSETS = (-17, -16, -15, -1, 1, 15, 16, 17)

# Column labels for notation
COL_LABELS = "abcdefgh"
# Row labels for notation (rank 0 = "1")
ROW_LABELS = "12345678"


class SymmetryError(RuntimeError):
    """A symmetry lookup left the board. Always a bug, never bad input."""


class Symmetry(IntEnum):
    IDENTITY = 0
    REFLECT_RANK = 1  # across the x axis: rank r -> 7 - r
    REFLECT_FILE = 2  # across the y axis: file f -> 7 - f
    REFLECT_A1H8 = 3
    REFLECT_A8H1 = 4
    ROTATE_90 = 5  # clockwise
    ROTATE_180 = 6
    ROTATE_270 = 7


def on_board(square: int) -> bool:
    return (square & 0x88) == 0


ON_BOARD_SQUARES: tuple[int, ...] = tuple(sq for sq in range(NUM_SQUARES) if on_board(sq))


def square_rank(square: int) -> int:
    return square >> 4


def square_file(square: int) -> int:
    return square & 7


def make_square(rank: int, file: int) -> int:
    return (rank << 4) | file


def is_special_square(square: int) -> bool:
    """True if the White King may stand on this square in a stored position."""
    return square in SPECIAL_SQUARES


def adjacent(a: int, b: int) -> bool:
    """Test whether squares a and b are one king step apart."""
    return (b - a) in KING_OFFSETS


def king_neighbors(square: int) -> list[int]:
    """On-board squares one king step away, ordered by rank then file offset."""
    result = []
    for dr in (-1, 0, 1):
        for df in (-1, 0, 1):
            if dr == 0 and df == 0:
                continue
            target = square + dr * 16 + df
            if on_board(target):
                result.append(target)
    return result


def _transform(sym: Symmetry, rank: int, file: int) -> tuple[int, int]:
    if sym == Symmetry.IDENTITY:
        return rank, file
    if sym == Symmetry.REFLECT_RANK:
        return 7 - rank, file
    if sym == Symmetry.REFLECT_FILE:
        return rank, 7 - file
    if sym == Symmetry.REFLECT_A1H8:
        return file, rank
    if sym == Symmetry.REFLECT_A8H1:
        return 7 - file, 7 - rank
    if sym == Symmetry.ROTATE_90:
        return 7 - file, rank
    if sym == Symmetry.ROTATE_180:
        return 7 - rank, 7 - file
    if sym == Symmetry.ROTATE_270:
        return file, 7 - rank
    raise ValueError(f"Unknown symmetry: {sym!r}")


# _IMAGES[sym][square] -> image square (-1 for off-board input)
_IMAGES: list[list[int]] = []
for _sym in Symmetry:
    _row = [-1] * NUM_SQUARES
    for _sq in ON_BOARD_SQUARES:
        _row[_sq] = make_square(*_transform(_sym, square_rank(_sq), square_file(_sq)))
    _IMAGES.append(_row)


def apply_symmetry(sym: Symmetry, square: int) -> int:
    """Image of an on-board square under one of the eight board symmetries."""
    if not on_board(square):
        raise SymmetryError(f"Cannot transform off-board square {square:#04x}")
    return _IMAGES[sym][square]


def _build_composition() -> dict[tuple[Symmetry, Symmetry], Symmetry]:
    table = {}
    for g in Symmetry:
        for h in Symmetry:
            images = [_IMAGES[g][_IMAGES[h][sq]] for sq in ON_BOARD_SQUARES]
            for k in Symmetry:
                if images == [_IMAGES[k][sq] for sq in ON_BOARD_SQUARES]:
                    table[(g, h)] = k
                    break
    return table


_COMPOSITION = _build_composition()


def compose(g: Symmetry, h: Symmetry) -> Symmetry:
    """The symmetry equal to applying h first, then g."""
    return _COMPOSITION[(g, h)]


def inverse(g: Symmetry) -> Symmetry:
    for k in Symmetry:
        if _COMPOSITION[(k, g)] == Symmetry.IDENTITY:
            return k
    raise SymmetryError(f"{g!r} has no inverse")


def _build_canonical_table() -> list[Symmetry | None]:
    table: list[Symmetry | None] = [None] * NUM_SQUARES
    for sq in ON_BOARD_SQUARES:
        for sym in Symmetry:
            if _IMAGES[sym][sq] in SPECIAL_SQUARES:
                table[sq] = sym
                break
    return table


# For every on-board square, a symmetry taking it into the special triangle.
# Identity comes first, so special squares map to themselves.
CANONICAL_SYMMETRY = _build_canonical_table()


def canonical_symmetry(square: int) -> Symmetry:
    sym = CANONICAL_SYMMETRY[square] if 0 <= square < NUM_SQUARES else None
    if sym is None:
        raise SymmetryError(f"No canonical symmetry for square {square:#04x}")
    return sym


def canonicalize(white_king: int, black_king: int, hawk: int) -> tuple[int, int, int]:
    """Move the White King into the special triangle, carrying the other pieces along."""
    sym = canonical_symmetry(white_king)
    if sym == Symmetry.IDENTITY:
        return white_king, black_king, hawk
    return (
        _IMAGES[sym][white_king],
        apply_symmetry(sym, black_king),
        apply_symmetry(sym, hawk),
    )


def square_to_notation(square: int) -> str:
    """Convert a 0x88 square to algebraic notation like 'a1'."""
    if not on_board(square):
        raise ValueError(f"Square {square} is not on the board")
    return COL_LABELS[square_file(square)] + ROW_LABELS[square_rank(square)]


def notation_to_square(sq: str) -> int:
    """Convert algebraic notation like 'a1' to a 0x88 square."""
    if len(sq) != 2 or sq[0] not in COL_LABELS or sq[1] not in ROW_LABELS:
        raise ValueError(f"Invalid square: {sq!r}")
    return make_square(ROW_LABELS.index(sq[1]), COL_LABELS.index(sq[0]))


def render_board(white_king: int, black_king: int, hawk: int,
                 white_to_move: bool | None = None) -> str:
    """Render a KHK position as a text diagram.

    White pieces are uppercase, the Black King lowercase.
    """
    lines = []

    if white_to_move is not None:
        lines.append(f"{'White' if white_to_move else 'Black'} to move")
        lines.append("")

    pieces = {white_king: "K", black_king: "k", hawk: "H"}

    lines.append("    a   b   c   d   e   f   g   h")
    lines.append("  +---+---+---+---+---+---+---+---+")

    for rank in range(BOARD_SIZE - 1, -1, -1):
        row_str = f"{rank + 1} |"
        for file in range(BOARD_SIZE):
            display = pieces.get(make_square(rank, file))
            row_str += f" {display} |" if display else "   |"
        row_str += f" {rank + 1}"
        lines.append(row_str)
        lines.append("  +---+---+---+---+---+---+---+---+")

    lines.append("    a   b   c   d   e   f   g   h")

    return "\n".join(lines)
