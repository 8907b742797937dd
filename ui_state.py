from __future__ import annotations

from enum import Enum, auto
from typing import Any, Dict, List

from board import BOARD_ROWS, MONTH_LABELS, Board, days_in_month


class UIState(Enum):
    MENU = auto()
    SOLVE = auto()
    INTRO = auto()


class AppState:
    def __init__(self, month: str = "JAN", day: int = 1, year: int = 2024):
        self.current_state = UIState.MENU
        self.month = month
        self.day = day
        self.year = year  # only decides how many days February has
        self.solutions: List[Board] = []
        self.current_idx = 0
        self.status = ""
        self.solving = False

    def set_date(self, month: str, day: int) -> None:
        self.month = month
        self.day = min(max(1, day), days_in_month(month, self.year))
        self.solutions = []
        self.current_idx = 0
        self.status = ""

    def shift_day(self, delta: int) -> None:
        last = days_in_month(self.month, self.year)
        self.set_date(self.month, (self.day - 1 + delta) % last + 1)

    def shift_month(self, delta: int) -> None:
        idx = (MONTH_LABELS.index(self.month) + delta) % len(MONTH_LABELS)
        self.set_date(MONTH_LABELS[idx], self.day)

    def apply_message(self, msg: Dict[str, Any]) -> None:
        """Fold one worker message into the view state."""
        kind = msg["type"]
        if kind == "started":
            self.solving = True
            self.status = "Solving..."
        elif kind == "progress":
            if len(self.solutions) < msg["count"]:
                self.solutions.append(msg["solution"])
            self.status = f"Found {msg['count']} so far..."
        elif kind == "complete":
            self.solving = False
            self.solutions = [grid for grid in msg["solutions"] if len(grid) == BOARD_ROWS]
            self.current_idx = min(self.current_idx, max(0, len(self.solutions) - 1))
            if not self.solutions:
                self.status = f"No solution ({msg['time']}s)"
            elif msg.get("cached"):
                self.status = "cached"
            else:
                self.status = f"{msg['time']}s"
        elif kind == "invalid":
            self.solving = False
            self.status = f"Invalid date: {msg['message']}"
        elif kind == "error":
            self.solving = False
            self.status = "Solver failed - press R to retry"
