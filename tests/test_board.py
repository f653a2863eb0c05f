"""Tests for 0x88 geometry, board symmetries and the canonical square table."""

import pytest

from hawkbase.game.board import (
    BOARD_SIZE, ON_BOARD_SQUARES, SPECIAL_SQUARES, CANONICAL_SYMMETRY,
    Symmetry, SymmetryError,
    adjacent, apply_symmetry, canonical_symmetry, canonicalize, compose, inverse,
    is_special_square, king_neighbors, make_square, notation_to_square, on_board,
    render_board, square_file, square_rank, square_to_notation,
)


class TestSquares:
    def test_exactly_64_on_board(self):
        assert sum(1 for sq in range(128) if on_board(sq)) == 64
        assert len(ON_BOARD_SQUARES) == BOARD_SIZE * BOARD_SIZE

    def test_off_board_padding(self):
        assert on_board(0x00)
        assert on_board(0x77)
        assert not on_board(0x08)
        assert not on_board(0x0F)
        assert not on_board(0x78)

    def test_rank_and_file(self):
        sq = make_square(3, 4)
        assert sq == 0x34
        assert square_rank(sq) == 3
        assert square_file(sq) == 4

    def test_notation(self):
        assert square_to_notation(0x00) == "a1"
        assert square_to_notation(0x77) == "h8"
        assert square_to_notation(0x34) == "e4"
        assert notation_to_square("c3") == 34

    def test_notation_roundtrip(self):
        for sq in ON_BOARD_SQUARES:
            assert notation_to_square(square_to_notation(sq)) == sq

    def test_invalid_notation(self):
        with pytest.raises(ValueError):
            notation_to_square("i1")
        with pytest.raises(ValueError):
            notation_to_square("a9")
        with pytest.raises(ValueError):
            square_to_notation(0x08)


class TestSpecialSquares:
    def test_ten_representatives(self):
        assert len(SPECIAL_SQUARES) == 10
        assert all(on_board(sq) for sq in SPECIAL_SQUARES)

    def test_triangle_a1_d1_d4(self):
        """Special squares are exactly those with rank <= file <= 3."""
        expected = {sq for sq in ON_BOARD_SQUARES
                    if square_rank(sq) <= square_file(sq) <= 3}
        assert set(SPECIAL_SQUARES) == expected

    def test_is_special_square(self):
        assert is_special_square(0)    # a1
        assert is_special_square(51)   # d4
        assert not is_special_square(4)   # e1
        assert not is_special_square(16)  # a2


class TestAdjacency:
    def test_neighbors(self):
        assert adjacent(0x00, 0x01)
        assert adjacent(0x00, 0x11)
        assert adjacent(0x34, 0x23)
        assert adjacent(0x34, 0x45)

    def test_not_adjacent(self):
        assert not adjacent(0x00, 0x00)
        assert not adjacent(0x00, 0x02)
        assert not adjacent(0x00, 0x20)

    def test_no_wraparound(self):
        """h1 and a2 are not neighbors even though their indices are close."""
        assert not adjacent(0x07, 0x10)

    def test_king_neighbors(self):
        assert sorted(king_neighbors(0x00)) == [0x01, 0x10, 0x11]
        assert len(king_neighbors(0x34)) == 8
        assert all(adjacent(0x34, sq) for sq in king_neighbors(0x34))


class TestSymmetry:
    def test_identity(self):
        for sq in ON_BOARD_SQUARES:
            assert apply_symmetry(Symmetry.IDENTITY, sq) == sq

    def test_known_images(self):
        assert apply_symmetry(Symmetry.REFLECT_FILE, 4) == 3     # e1 -> d1
        assert apply_symmetry(Symmetry.REFLECT_RANK, 0) == 0x70  # a1 -> a8
        assert apply_symmetry(Symmetry.REFLECT_A1H8, 16) == 1    # a2 -> b1
        assert apply_symmetry(Symmetry.REFLECT_A8H1, 0) == 0x77  # a1 -> h8
        assert apply_symmetry(Symmetry.ROTATE_90, 0) == 0x70     # a1 -> a8
        assert apply_symmetry(Symmetry.ROTATE_180, 0) == 0x77
        assert apply_symmetry(Symmetry.ROTATE_270, 0) == 0x07    # a1 -> h1

    def test_on_board_closure(self):
        for sym in Symmetry:
            for sq in ON_BOARD_SQUARES:
                assert on_board(apply_symmetry(sym, sq))

    def test_permutation(self):
        for sym in Symmetry:
            images = {apply_symmetry(sym, sq) for sq in ON_BOARD_SQUARES}
            assert images == set(ON_BOARD_SQUARES)

    def test_composition_law(self):
        for g in Symmetry:
            for h in Symmetry:
                k = compose(g, h)
                for sq in ON_BOARD_SQUARES:
                    assert apply_symmetry(g, apply_symmetry(h, sq)) == apply_symmetry(k, sq)

    def test_inverse(self):
        for g in Symmetry:
            assert compose(inverse(g), g) == Symmetry.IDENTITY
            assert compose(g, inverse(g)) == Symmetry.IDENTITY

    def test_reflections_are_involutions(self):
        for g in (Symmetry.REFLECT_RANK, Symmetry.REFLECT_FILE,
                  Symmetry.REFLECT_A1H8, Symmetry.REFLECT_A8H1, Symmetry.ROTATE_180):
            assert inverse(g) == g

    def test_rotations(self):
        assert compose(Symmetry.ROTATE_90, Symmetry.ROTATE_90) == Symmetry.ROTATE_180
        assert compose(Symmetry.ROTATE_90, Symmetry.ROTATE_270) == Symmetry.IDENTITY
        assert inverse(Symmetry.ROTATE_90) == Symmetry.ROTATE_270

    def test_adjacency_preserved(self):
        for sym in Symmetry:
            for a in ON_BOARD_SQUARES:
                for b in king_neighbors(a):
                    assert adjacent(apply_symmetry(sym, a), apply_symmetry(sym, b))

    def test_off_board_rejected(self):
        with pytest.raises(SymmetryError):
            apply_symmetry(Symmetry.IDENTITY, 0x08)


class TestCanonical:
    def test_table_is_total(self):
        for sq in ON_BOARD_SQUARES:
            assert CANONICAL_SYMMETRY[sq] is not None
            assert apply_symmetry(canonical_symmetry(sq), sq) in SPECIAL_SQUARES

    def test_special_squares_use_identity(self):
        for sq in SPECIAL_SQUARES:
            assert canonical_symmetry(sq) == Symmetry.IDENTITY

    def test_c5_maps_to_d3(self):
        assert apply_symmetry(canonical_symmetry(0x42), 0x42) == 0x23

    def test_off_board_has_no_canonical_form(self):
        with pytest.raises(SymmetryError):
            canonical_symmetry(0x08)
        with pytest.raises(SymmetryError):
            canonical_symmetry(-1)

    def test_canonicalize_carries_other_pieces(self):
        # e1 is mirrored onto d1 across the y axis; e3 -> d3, g1 -> b1
        assert canonicalize(0x04, 0x24, 0x06) == (0x03, 0x23, 0x01)

    def test_canonicalize_special_is_unchanged(self):
        assert canonicalize(18, 0, 34) == (18, 0, 34)


class TestRender:
    def test_render_board(self):
        text = render_board(18, 0, 34, white_to_move=False)
        assert "Black to move" in text
        assert " K " in text
        assert " k " in text
        assert " H " in text


class TestPackage:
    def test_exports_resolve(self):
        import hawkbase.game as game
        for name in game.__all__:
            assert hasattr(game, name), name

    def test_only_position_level_types_exported(self):
        import hawkbase.game as game
        assert "PieceType" not in game.__all__
        assert not hasattr(game, "PieceType")
