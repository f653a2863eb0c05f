"""Position records and KHK notation.

Record format (the on-disk format of every collection), one per line:
  18 0 34 0     White King, Black King, Hawk (0x88 squares), side to move
                (1 = White to move, 0 = Black to move)

Notation format (for humans and the command line):
  Kc2 ka1 Hc3 b     White King c2, Black King a1, Hawk c3, Black to move
"""

from __future__ import annotations

import re

from hawkbase.game.board import notation_to_square, square_to_notation
from hawkbase.game.state import Position


def position_to_record(pos: Position) -> str:
    """Encode a position as one record line (without the trailing newline)."""
    return f"{pos.white_king} {pos.black_king} {pos.hawk} {int(pos.white_to_move)}"


def record_to_position(line: str) -> Position:
    """Parse one record line into a Position.

    Raises:
        ValueError: If the record is malformed or describes an impossible position.
    """
    fields = line.split()
    if len(fields) != 4:
        raise ValueError(f"Expected 4 fields, got {len(fields)}: {line!r}")
    try:
        wk, bk, hawk, side = (int(f) for f in fields)
    except ValueError:
        raise ValueError(f"Non-integer field in record: {line!r}") from None
    if side not in (0, 1):
        raise ValueError(f"Side to move must be 0 or 1: {line!r}")
    pos = Position(wk, bk, hawk, bool(side))
    pos.validate()
    return pos


_POSITION_RE = re.compile(
    r"^K([a-h][1-8])\s+k([a-h][1-8])\s+H([a-h][1-8])(?:\s+([wb]))?$"
)


def position_to_text(pos: Position) -> str:
    side = "w" if pos.white_to_move else "b"
    return (f"K{square_to_notation(pos.white_king)} "
            f"k{square_to_notation(pos.black_king)} "
            f"H{square_to_notation(pos.hawk)} {side}")


def text_to_position(text: str) -> Position:
    """Parse notation like 'Kc2 ka1 Hc3 b'. Side defaults to Black to move.

    Raises:
        ValueError: If the notation is invalid.
    """
    m = _POSITION_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid KHK notation: {text!r}")
    wk, bk, hawk, side = m.groups()
    pos = Position(
        notation_to_square(wk),
        notation_to_square(bk),
        notation_to_square(hawk),
        side == "w",
    )
    pos.validate()
    return pos
