"""KHK game model: board geometry, positions, rules, notation."""

from hawkbase.game.state import Position, Player
from hawkbase.game.rules import hawk_attacks, king_attacks, is_checkmate, is_stalemate
from hawkbase.game.board import (
    Symmetry, apply_symmetry, canonicalize, is_special_square, on_board, adjacent,
    render_board,
)
from hawkbase.game.notation import (
    position_to_record, record_to_position, position_to_text, text_to_position,
)

__all__ = [
    "Position", "Player",
    "hawk_attacks", "king_attacks", "is_checkmate", "is_stalemate",
    "Symmetry", "apply_symmetry", "canonicalize", "is_special_square", "on_board",
    "adjacent", "render_board",
    "position_to_record", "record_to_position", "position_to_text", "text_to_position",
]
