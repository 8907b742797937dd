import os

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from board import FREE, copy_board
from pieces import ALL_PIECES_MASK
from solver import SearchMode, SolveOptions, solve


@pytest.fixture(scope="session")
def jan1_solution():
    result = solve("JAN", 1, SolveOptions(mode=SearchMode.FIRST_ONLY))
    assert result.count == 1
    return result.solutions[0]


@pytest.fixture
def lift(jan1_solution):
    """Take pieces back off the JAN 1 solution, returning (board, used_mask)."""

    def _lift(*piece_ids):
        board = copy_board(jan1_solution)
        mask = ALL_PIECES_MASK
        for pid in piece_ids:
            mask &= ~(1 << (pid - 1))
            for r, row in enumerate(board):
                for c, value in enumerate(row):
                    if value == pid:
                        board[r][c] = FREE
        return board, mask

    return _lift
