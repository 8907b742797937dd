# board.py
# Board geometry, cell values and query initialisation

from __future__ import annotations

import calendar
from typing import List, Optional

from errors import InvalidQueryError

BOARD_ROWS = 7
BOARD_COLS = 7

# Cell values. Occupied cells hold the piece id (1..8).
BLOCKED = -2
TARGET = -1
FREE = 0

Board = List[List[int]]

MONTH_LABELS: tuple[str, ...] = (
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
)

# Printed labels; None marks the cut-away corners of the board.
BOARD_LAYOUT: tuple[tuple[Optional[str], ...], ...] = (
    ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", None),
    ("JUL", "AUG", "SEP", "OCT", "NOV", "DEC", None),
    ("1", "2", "3", "4", "5", "6", "7"),
    ("8", "9", "10", "11", "12", "13", "14"),
    ("15", "16", "17", "18", "19", "20", "21"),
    ("22", "23", "24", "25", "26", "27", "28"),
    ("29", "30", "31", None, None, None, None),
)

# Fixed cells outside the puzzle area
BLOCKED_CELLS: set[tuple[int, int]] = {
    (0, 6),
    (1, 6),
    (6, 3),
    (6, 4),
    (6, 5),
    (6, 6),
}


def cell_label(row: int, col: int) -> Optional[str]:
    return BOARD_LAYOUT[row][col]


def playable_cells() -> set[tuple[int, int]]:
    """All cells that can ever be covered by pieces (months + days)."""
    return {
        (r, c)
        for r in range(BOARD_ROWS)
        for c in range(BOARD_COLS)
        if (r, c) not in BLOCKED_CELLS
    }


def resolve_query(month: str | int, day: str | int) -> tuple[str, str]:
    """Normalise (month, day) to the labels printed on the board.

    ``month`` may be a label such as ``"jan"`` or a number 1..12; ``day`` an
    int or decimal string 1..31. Whether the day exists in that month is the
    caller's business.
    """
    if isinstance(month, bool):
        raise InvalidQueryError(f"invalid month {month!r}")
    if isinstance(month, int):
        if not 1 <= month <= 12:
            raise InvalidQueryError(f"month {month} is outside 1..12")
        month_label = MONTH_LABELS[month - 1]
    elif isinstance(month, str):
        month_label = month.strip().upper()
        if month_label not in MONTH_LABELS:
            raise InvalidQueryError(f"unknown month label {month!r}")
    else:
        raise InvalidQueryError(f"invalid month {month!r}")

    if isinstance(day, bool):
        raise InvalidQueryError(f"invalid day {day!r}")
    if isinstance(day, str):
        text = day.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidQueryError(f"day {day!r} is not a number")
        day = int(text)
    if not isinstance(day, int):
        raise InvalidQueryError(f"invalid day {day!r}")
    if not 1 <= day <= 31:
        raise InvalidQueryError(f"day {day} is outside 1..31")

    return month_label, str(day)


def target_cells(month: str | int, day: str | int) -> list[tuple[int, int]]:
    """Board positions whose label is the queried month or day."""
    labels = set(resolve_query(month, day))
    return [
        (r, c)
        for r in range(BOARD_ROWS)
        for c in range(BOARD_COLS)
        if BOARD_LAYOUT[r][c] in labels
    ]


def init_board(month: str | int, day: str | int) -> Board:
    month_label, day_label = resolve_query(month, day)
    targets = target_cells(month_label, day_label)
    if len(targets) != 2:
        raise InvalidQueryError(f"{month_label} {day_label} does not name two board cells")

    board: Board = [[FREE] * BOARD_COLS for _ in range(BOARD_ROWS)]
    for r, c in BLOCKED_CELLS:
        board[r][c] = BLOCKED
    for r, c in targets:
        if board[r][c] == BLOCKED:
            raise InvalidQueryError(f"target cell ({r},{c}) is blocked on this layout")
        board[r][c] = TARGET
    return board


def query_to_board(month: str | int, day: str | int) -> Board:
    """Entry point for external (month, day) input; see init_board."""
    return init_board(month, day)


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_in_month(month: str | int, year: int) -> int:
    month_label, _ = resolve_query(month, 1)
    return calendar.monthrange(year, MONTH_LABELS.index(month_label) + 1)[1]


def format_board(board: Board) -> str:
    """Multiline text view: labels on free/target cells, piece ids elsewhere."""
    lines = []
    for r in range(BOARD_ROWS):
        cells = []
        for c in range(BOARD_COLS):
            value = board[r][c]
            if value == BLOCKED:
                text = "."
            elif value == TARGET:
                text = f"[{BOARD_LAYOUT[r][c]}]"
            elif value == FREE:
                text = BOARD_LAYOUT[r][c] or "?"
            else:
                text = str(value)
            cells.append(f"{text:>5}")
        lines.append("".join(cells))
    return "\n".join(lines)
