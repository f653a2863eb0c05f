"""Tests for position enumeration and the depth-0 / undecided split."""

from collections import Counter

from hawkbase.game.board import ON_BOARD_SQUARES, SPECIAL_SQUARES, adjacent
from hawkbase.game.rules import hawk_attacks, is_checkmate
from hawkbase.game.state import Position
from hawkbase.data.generator import create_positions, generate_positions
from hawkbase.data.storage import DRAW, UNDECIDED


def _legal_keys():
    """Every legal KHK position with the White King on a special square."""
    keys = set()
    for wk in SPECIAL_SQUARES:
        for bk in ON_BOARD_SQUARES:
            if bk == wk or adjacent(wk, bk):
                continue
            for hawk in ON_BOARD_SQUARES:
                if hawk in (wk, bk):
                    continue
                keys.add((wk, bk, hawk, False))
                if not hawk_attacks(wk, hawk, bk):
                    keys.add((wk, bk, hawk, True))
    return keys


class TestGeneratePositions:
    def test_black_to_move_count(self):
        """564 king placements times 62 Hawk squares."""
        black = sum(1 for pos, _ in generate_positions() if not pos.white_to_move)
        assert black == 34968

    def test_white_to_move_count(self):
        white = sum(1 for pos, _ in generate_positions() if pos.white_to_move)
        assert white == 27330

    def test_complete_and_unique(self):
        keys = [pos.key for pos, _ in generate_positions()]
        assert len(keys) == len(set(keys))
        assert set(keys) == _legal_keys()

    def test_white_king_on_special_square(self):
        assert all(pos.white_king in SPECIAL_SQUARES for pos, _ in generate_positions())

    def test_no_white_move_with_black_in_check(self):
        for pos, _ in generate_positions():
            if pos.white_to_move:
                assert not hawk_attacks(pos.white_king, pos.hawk, pos.black_king)

    def test_black_to_move_precedes_white_to_move(self):
        it = generate_positions()
        first, _ = next(it)
        assert not first.white_to_move


class TestCreatePositions:
    def test_counts(self, enumerated_store):
        assert enumerated_store.count("0") == 60
        assert enumerated_store.count(UNDECIDED) == 62238

    def test_manifest(self, enumerated_store):
        progress = enumerated_store.load_progress()
        assert progress.completed_depth == 0
        assert progress.counts == {0: 60}
        assert progress.undecided == 62238
        assert not progress.complete

    def test_mates_are_black_to_move_mates(self, enumerated_store):
        for pos in enumerated_store.read_all("0"):
            assert not pos.white_to_move
            assert is_checkmate(pos.white_king, pos.black_king, pos.hawk, False)

    def test_partition(self, enumerated_store):
        mates = {p.key for p in enumerated_store.read_all("0")}
        undecided = Counter(p.key for p in enumerated_store.read_all(UNDECIDED))
        assert max(undecided.values()) == 1
        assert not mates & set(undecided)
        assert mates | set(undecided) == _legal_keys()

    def test_corner_mate_in_depth_0_only(self, enumerated_store):
        mate = Position(0x12, 0x00, 0x22, False)  # Kc2 ka1 Hc3
        assert mate in set(enumerated_store.read_all("0"))
        undecided = set(enumerated_store.read_all(UNDECIDED))
        assert mate not in undecided
        # Black is in check, so the White-to-move twin does not exist
        assert mate.with_side(True) not in undecided

    def test_stalemate_and_escape_are_undecided(self, enumerated_store):
        undecided = set(enumerated_store.read_all(UNDECIDED))
        assert Position(0x12, 0x00, 0x02, False) in undecided  # stalemate
        assert Position(0x12, 0x00, 0x67, False) in undecided  # one escape
        assert Position(0x12, 0x00, 0x67, True) in undecided

    def test_restart_clears_old_results(self, enumerated_store):
        enumerated_store.replace("5", [])
        enumerated_store.replace(DRAW, [])
        result = create_positions(enumerated_store)
        assert result.mates == 60
        assert result.undecided == 62238
        assert enumerated_store.depths() == [0]
        assert not enumerated_store.exists(DRAW)
