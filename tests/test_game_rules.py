"""Tests for Connect 4 game rules."""

import numpy as np
import pytest

from connect4mcts.game import (
    ROWS,
    COLS,
    RED,
    YELLOW,
    Connect4State,
    initial_state,
    parse_moves,
)


def _diagonal_setup() -> Connect4State:
    """Red on (5,0), (4,1), (3,2) with yellow support; red to play column 3."""
    board = np.zeros((ROWS, COLS), dtype=np.int8)
    board[5, 0] = RED
    board[4, 1] = RED
    board[3, 2] = RED
    for r, c in [(5, 1), (5, 2), (4, 2), (5, 3), (4, 3), (3, 3)]:
        board[r, c] = YELLOW
    return Connect4State(board=board, to_move=RED)


class TestInitialState:
    def test_empty_board(self):
        state = initial_state()
        assert state.board.shape == (ROWS, COLS)
        assert np.all(state.board == 0)

    def test_all_moves_legal(self):
        state = initial_state()
        assert state.legal_moves() == list(range(COLS))
        assert all(state.valid_move(c) for c in range(COLS))

    def test_red_to_move(self):
        state = initial_state()
        assert state.is_red
        assert state.last_move == -1
        assert not state.game_over
        assert state.num_actions == COLS

    def test_bad_dimensions_raise(self):
        with pytest.raises(ValueError):
            Connect4State(rows=0)
        with pytest.raises(ValueError):
            Connect4State(rows=3, cols=3, win_length=4)
        with pytest.raises(ValueError):
            Connect4State(board=np.zeros((3, 3), dtype=np.int8))


class TestAddPiece:
    def test_piece_drops_to_bottom(self):
        state = initial_state()
        state.add_piece(3)
        assert state.board[ROWS - 1, 3] == RED
        assert not state.is_red
        assert state.last_move == 3

    def test_pieces_stack(self):
        state = Connect4State.from_moves([3, 3])
        assert state.board[ROWS - 1, 3] == RED
        assert state.board[ROWS - 2, 3] == YELLOW
        assert state.is_red

    def test_column_full_raises(self):
        state = Connect4State.from_moves([0] * ROWS)

        assert not state.valid_move(0)
        assert 0 not in state.legal_moves()

        with pytest.raises(ValueError):
            state.add_piece(0)

    def test_invalid_column_raises(self):
        state = initial_state()
        assert not state.valid_move(-1)
        assert not state.valid_move(COLS)
        with pytest.raises(ValueError):
            state.add_piece(-1)
        with pytest.raises(ValueError):
            state.add_piece(COLS)

    def test_move_after_game_over_raises(self):
        state = Connect4State.from_moves([0, 1, 0, 1, 0, 1, 0])
        with pytest.raises(ValueError):
            state.add_piece(2)


class TestWinDetection:
    def test_horizontal_win(self):
        state = Connect4State.from_moves([0, 0, 1, 1, 2, 2, 3])
        assert state.game_over
        assert state.red_win
        assert not state.is_draw

    def test_vertical_win(self):
        state = Connect4State.from_moves([0, 1, 0, 1, 0, 1, 0])
        assert state.game_over
        assert state.red_win

    def test_yellow_win(self):
        state = Connect4State.from_moves([0, 1, 0, 1, 0, 1, 6, 1])
        assert state.game_over
        assert not state.red_win
        assert not state.is_draw
        # Loser is on move in a decided position
        assert state.is_red

    def test_diagonal_up_right_win(self):
        state = _diagonal_setup()
        assert not state.game_over
        state.add_piece(3)
        assert state.board[2, 3] == RED
        assert state.game_over
        assert state.red_win

    def test_diagonal_up_left_win(self):
        mirrored = _diagonal_setup()
        state = Connect4State(board=np.fliplr(mirrored.board).copy(), to_move=RED)
        state.add_piece(COLS - 1 - 3)
        assert state.game_over
        assert state.red_win

    def test_no_win_three_in_row(self):
        state = Connect4State.from_moves([0, 0, 1, 1, 2, 2])
        assert not state.game_over

    def test_custom_win_length(self):
        state = Connect4State.from_moves([0, 0, 1], rows=4, cols=4, win_length=2)
        assert state.game_over
        assert state.red_win


class TestDrawDetection:
    def test_full_board_draw(self):
        """Full 3x3 board with no three in a row."""
        state = Connect4State.from_moves([0, 1, 2, 2, 0, 0, 1, 2, 1], rows=3, cols=3, win_length=3)
        assert state.is_full
        assert state.game_over
        assert state.is_draw
        assert not state.red_win
        assert state.legal_moves() == []


class TestIdentity:
    def test_side_to_move_in_identity(self):
        board = np.zeros((ROWS, COLS), dtype=np.int8)
        red = Connect4State(board=board.copy(), to_move=RED)
        yellow = Connect4State(board=board.copy(), to_move=YELLOW)
        assert red.state_id() != yellow.state_id()

    def test_transpositions_share_identity(self):
        a = Connect4State.from_moves([0, 1, 2])
        b = Connect4State.from_moves([2, 1, 0])
        assert a is not b
        assert a.state_id() == b.state_id()

    def test_board_shape_in_identity(self):
        # 6x7 and 7x6 empty boards have identical raw bytes
        wide = Connect4State(rows=6, cols=7)
        tall = Connect4State(rows=7, cols=6)
        assert wide.board.tobytes() == tall.board.tobytes()
        assert wide.state_id() != tall.state_id()

    def test_win_length_in_identity(self):
        assert Connect4State(win_length=4).state_id() != Connect4State(win_length=5).state_id()

    def test_clone_is_independent(self):
        state = Connect4State.from_moves([3])
        child = state.clone()
        child.add_piece(4)

        assert state.board[ROWS - 1, 4] == 0
        assert state.last_move == 3
        assert not state.is_red
        assert child.state_id() != state.state_id()


class TestParseMoves:
    def test_digit_string(self):
        assert parse_moves("3344") == [3, 3, 4, 4]

    def test_separated(self):
        assert parse_moves("3, 10 2") == [3, 10, 2]

    def test_empty(self):
        assert parse_moves("  ") == []

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_moves("3x")


class TestRender:
    def test_render_empty(self):
        output = initial_state().render()
        assert "." in output
        assert "R" not in output
        assert "Y" not in output

    def test_render_with_pieces(self):
        output = Connect4State.from_moves([3, 4]).render()
        assert "R" in output
        assert "Y" in output
        assert "^" in output
