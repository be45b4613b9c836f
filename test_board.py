"""
Tests for the Connect Four board helpers.

Covers: playability, gravity on drop, and four-in-a-row / draw detection
in every direction.
"""

import pytest

from connect_four.board import (
    create_empty_board, is_column_playable, playable_columns, is_full, drop,
    evaluate_terminal, ROWS, COLS, ONGOING, WIN, DRAW,
)

X = "Player1"
O = "Player2"


# ── Helpers ───────────────────────────────────────────────────────────

def board_from(*rows):
    """Build a board from strings, top row first: 'X', 'O' or '.' per cell."""
    assert len(rows) == ROWS
    cells = {"X": X, "O": O, ".": None}
    return [[cells[ch] for ch in row] for row in rows]


# Full board with no four-in-a-row anywhere
DRAWN = (
    "XOXOXOX",
    "XOXOXOX",
    "XOXOXOX",
    "OXOXOXO",
    "OXOXOXO",
    "OXOXOXO",
)


# ══════════════════════════════════════════════════════════════════════
# Construction & Playability
# ══════════════════════════════════════════════════════════════════════

class TestPlayability:

    def test_empty_board_shape(self):
        board = create_empty_board()
        assert len(board) == ROWS
        assert all(len(row) == COLS for row in board)
        assert all(cell is None for row in board for cell in row)

    def test_empty_board_rows_are_independent(self):
        board = create_empty_board()
        board[5][0] = X
        assert board[4][0] is None

    def test_every_column_playable_on_empty_board(self):
        board = create_empty_board()
        assert all(is_column_playable(board, c) for c in range(COLS))
        assert playable_columns(board) == list(range(COLS))

    @pytest.mark.parametrize("column", [-1, COLS, 100, "3", 2.0, None, True])
    def test_out_of_range_or_non_int_column_fails_closed(self, column):
        assert is_column_playable(create_empty_board(), column) is False

    def test_full_column_not_playable(self):
        board = create_empty_board()
        for _ in range(ROWS):
            drop(board, 2, X)
        assert is_column_playable(board, 2) is False
        assert 2 not in playable_columns(board)

    def test_column_with_room_is_playable(self):
        board = create_empty_board()
        for _ in range(ROWS - 1):
            drop(board, 4, O)
        assert is_column_playable(board, 4) is True

    def test_is_full(self):
        assert is_full(board_from(*DRAWN)) is True
        assert is_full(create_empty_board()) is False


# ══════════════════════════════════════════════════════════════════════
# Drop / Gravity
# ══════════════════════════════════════════════════════════════════════

class TestDrop:

    def test_first_piece_lands_on_bottom_row(self):
        board = create_empty_board()
        assert drop(board, 3, X) == ROWS - 1
        assert board[ROWS - 1][3] == X

    def test_pieces_stack(self):
        board = create_empty_board()
        drop(board, 3, X)
        row = drop(board, 3, O)
        assert row == ROWS - 2
        assert board[row][3] == O
        assert board[row + 1][3] == X

    def test_every_piece_rests_on_another(self):
        board = create_empty_board()
        for i, col in enumerate([0, 0, 1, 6, 0, 1, 3, 3, 3]):
            row = drop(board, col, X if i % 2 == 0 else O)
            if row < ROWS - 1:
                assert board[row + 1][col] is not None

    def test_drop_into_full_column_is_noop(self):
        board = create_empty_board()
        for _ in range(ROWS):
            drop(board, 0, X)
        before = [row[:] for row in board]
        assert drop(board, 0, O) is None
        assert board == before


# ══════════════════════════════════════════════════════════════════════
# Terminal Evaluation
# ══════════════════════════════════════════════════════════════════════

class TestEvaluateTerminal:

    def test_empty_board_ongoing(self):
        assert evaluate_terminal(create_empty_board()) == (ONGOING, None)

    def test_horizontal_win(self):
        board = board_from(
            ".......",
            ".......",
            ".......",
            ".......",
            "OOO....",
            "XXXX...",
        )
        assert evaluate_terminal(board) == (WIN, X)

    def test_vertical_win(self):
        board = board_from(
            ".......",
            ".......",
            "......O",
            "......O",
            "X.....O",
            "XX....O",
        )
        assert evaluate_terminal(board) == (WIN, O)

    def test_down_right_diagonal_win(self):
        board = board_from(
            ".......",
            ".......",
            "X......",
            "OX.....",
            "OOX....",
            "OOXX...",
        )
        assert evaluate_terminal(board) == (WIN, X)

    def test_down_left_diagonal_win(self):
        board = board_from(
            ".......",
            ".......",
            "......O",
            ".....OX",
            "....OXX",
            "...OXXX",
        )
        assert evaluate_terminal(board) == (WIN, O)

    def test_three_in_a_row_is_not_a_win(self):
        board = board_from(
            ".......",
            ".......",
            ".......",
            ".......",
            "OO.....",
            "XXX.O..",
        )
        assert evaluate_terminal(board) == (ONGOING, None)

    def test_broken_line_is_not_a_win(self):
        board = board_from(
            ".......",
            ".......",
            ".......",
            ".......",
            "OOO....",
            "XXOXX..",
        )
        assert evaluate_terminal(board) == (ONGOING, None)

    def test_run_longer_than_four_wins(self):
        board = board_from(
            ".......",
            ".......",
            ".......",
            ".......",
            "OOO....",
            "XXXXX..",
        )
        assert evaluate_terminal(board) == (WIN, X)

    def test_full_board_without_line_is_draw(self):
        assert evaluate_terminal(board_from(*DRAWN)) == (DRAW, None)

    def test_full_board_with_line_is_win_not_draw(self):
        rows = list(DRAWN)
        rows[5] = "XXXXOXO"
        status, winner = evaluate_terminal(board_from(*rows))
        assert status == WIN
        assert winner == X

    def test_evaluation_does_not_mutate(self):
        board = board_from(*DRAWN)
        before = [row[:] for row in board]
        evaluate_terminal(board)
        assert board == before
