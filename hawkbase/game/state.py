"""Position representation for the King + Hawk vs King ending."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from hawkbase.game.board import (
    Symmetry, adjacent, apply_symmetry, canonicalize, on_board, render_board,
)


class Player(IntEnum):
    WHITE = 0
    BLACK = 1


@dataclass(frozen=True)
class Position:
    """White King, Black King and White Hawk squares plus the side to move."""
    white_king: int
    black_king: int
    hawk: int
    white_to_move: bool

    @property
    def key(self) -> tuple[int, int, int, bool]:
        return (self.white_king, self.black_king, self.hawk, self.white_to_move)

    @property
    def side_to_move(self) -> Player:
        return Player.WHITE if self.white_to_move else Player.BLACK

    @property
    def squares(self) -> tuple[int, int, int]:
        return (self.white_king, self.black_king, self.hawk)

    def with_side(self, white_to_move: bool) -> Position:
        return Position(self.white_king, self.black_king, self.hawk, white_to_move)

    def transformed(self, sym: Symmetry) -> Position:
        """Apply one board symmetry to all three pieces."""
        return Position(
            apply_symmetry(sym, self.white_king),
            apply_symmetry(sym, self.black_king),
            apply_symmetry(sym, self.hawk),
            self.white_to_move,
        )

    def canonical(self) -> Position:
        """Equivalent position with the White King on a special square."""
        return Position(*canonicalize(*self.squares), self.white_to_move)

    def validate(self) -> None:
        """Raise ValueError if the pieces cannot stand like this."""
        for name, sq in (("white king", self.white_king),
                         ("black king", self.black_king),
                         ("hawk", self.hawk)):
            if not isinstance(sq, int) or not on_board(sq):
                raise ValueError(f"{name} square {sq!r} is not on the board")
        if len(set(self.squares)) != 3:
            raise ValueError(f"Pieces overlap: {self.squares}")
        if adjacent(self.white_king, self.black_king):
            raise ValueError("Kings may not stand on adjacent squares")

    def render(self) -> str:
        return render_board(self.white_king, self.black_king, self.hawk,
                            white_to_move=self.white_to_move)
