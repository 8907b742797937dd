# placements.py
# Place / remove one piece orientation on the board, and inspect finished boards

from __future__ import annotations

from dataclasses import dataclass

from board import BLOCKED, BLOCKED_CELLS, BOARD_COLS, BOARD_ROWS, FREE, TARGET, Board, target_cells
from errors import InvalidQueryError
from pieces import PIECE_IDS, PIECE_ORIENTATIONS, Shape, normalize


@dataclass(frozen=True)
class Placement:
    piece: int
    cells: tuple[tuple[int, int], ...]  # board coordinates covered by this placement


def can_place(board: Board, orientation: Shape, row: int, col: int) -> bool:
    for dr, dc in orientation:
        r = row + dr
        c = col + dc
        if r < 0 or r >= BOARD_ROWS or c < 0 or c >= BOARD_COLS:
            return False
        # Blocked and target cells are never FREE
        if board[r][c] != FREE:
            return False
    return True


def place(board: Board, orientation: Shape, row: int, col: int, piece_id: int) -> None:
    """Caller must have checked can_place first."""
    for dr, dc in orientation:
        board[row + dr][col + dc] = piece_id


def remove(board: Board, orientation: Shape, row: int, col: int) -> None:
    for dr, dc in orientation:
        board[row + dr][col + dc] = FREE


def extract_placements(assignment: Board) -> list[Placement]:
    """Group the occupied cells of a board by piece id."""
    cells: dict[int, list[tuple[int, int]]] = {}
    for r, row in enumerate(assignment):
        for c, value in enumerate(row):
            if value > 0:
                cells.setdefault(value, []).append((r, c))
    return [Placement(piece=pid, cells=tuple(sorted(cells[pid]))) for pid in sorted(cells)]


def check_assignment(assignment: object, month: str | int, day: str | int) -> str | None:
    """Return why ``assignment`` is not a valid tiling for the date, or None."""
    if not isinstance(assignment, list) or len(assignment) != BOARD_ROWS:
        return "board must have 7 rows"
    for row in assignment:
        if not isinstance(row, list) or len(row) != BOARD_COLS:
            return "board rows must have 7 cells"
        for value in row:
            if type(value) is not int:
                return f"cell value {value!r} is not an int"

    try:
        targets = set(target_cells(month, day))
    except InvalidQueryError as exc:
        return str(exc)

    for r in range(BOARD_ROWS):
        for c in range(BOARD_COLS):
            value = assignment[r][c]
            if (r, c) in BLOCKED_CELLS:
                if value != BLOCKED:
                    return f"cell ({r},{c}) must be blocked"
            elif (r, c) in targets:
                if value != TARGET:
                    return f"cell ({r},{c}) must be a target"
            elif value not in PIECE_IDS:
                return f"cell ({r},{c}) holds {value}, expected a piece id"

    placements = extract_placements(assignment)
    found = [p.piece for p in placements]
    if found != list(PIECE_IDS):
        return f"pieces used {found}, expected {list(PIECE_IDS)}"
    for placement in placements:
        if normalize(placement.cells) not in PIECE_ORIENTATIONS[placement.piece]:
            return f"piece {placement.piece} does not match any of its orientations"
    return None
