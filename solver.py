# solver.py
# Bitmask backtracking over the piece catalog; solves for a given date

from __future__ import annotations

import logging
import time
from contextlib import closing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Protocol

from board import BOARD_COLS, BOARD_ROWS, FREE, Board, copy_board, query_to_board, resolve_query
from config import CFG
from pieces import ALL_PIECES_MASK, NUM_PIECES, PIECE_IDS, PIECE_ORIENTATIONS, piece_size
from placements import can_place, place, remove

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Board], None]


class StopFlag(Protocol):
    def is_set(self) -> bool: ...


class SearchMode(str, Enum):
    EXHAUSTIVE = "exhaustive"
    FIRST_ONLY = "first"
    CAPPED = "capped"


def _default_mode() -> SearchMode:
    try:
        return SearchMode(CFG.MODE)
    except ValueError:
        log.warning("Unknown CP_MODE %r, using capped", CFG.MODE)
        return SearchMode.CAPPED


@dataclass(frozen=True)
class SolveOptions:
    mode: SearchMode = field(default_factory=_default_mode)
    max_solutions: int = CFG.MAX_SOLUTIONS
    prune_regions: bool = CFG.PRUNE_REGIONS
    cancel_check_interval: int = CFG.CANCEL_CHECK_INTERVAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", SearchMode(self.mode))
        if self.mode is SearchMode.CAPPED and self.max_solutions < 1:
            raise ValueError("max_solutions must be at least 1")

    @property
    def limit(self) -> Optional[int]:
        """How many solutions to collect before stopping (None = all)."""
        if self.mode is SearchMode.EXHAUSTIVE:
            return None
        if self.mode is SearchMode.FIRST_ONLY:
            return 1
        return self.max_solutions

    @property
    def memoize(self) -> bool:
        return self.mode is SearchMode.CAPPED

    def to_payload(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "max_solutions": self.max_solutions,
            "prune_regions": self.prune_regions,
            "cancel_check_interval": self.cancel_check_interval,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "SolveOptions":
        return cls(
            mode=SearchMode(data["mode"]),
            max_solutions=int(data.get("max_solutions", CFG.MAX_SOLUTIONS)),
            prune_regions=bool(data.get("prune_regions", CFG.PRUNE_REGIONS)),
            cancel_check_interval=int(data.get("cancel_check_interval", CFG.CANCEL_CHECK_INTERVAL)),
        )


@dataclass
class SearchStats:
    nodes: int = 0
    placements: int = 0
    memo_hits: int = 0
    region_prunes: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "nodes": self.nodes,
            "placements": self.placements,
            "memo_hits": self.memo_hits,
            "region_prunes": self.region_prunes,
        }


@dataclass
class SolveResult:
    month: str
    day: int
    mode: SearchMode
    solutions: list[Board]
    elapsed: float
    cancelled: bool = False
    cached: bool = False
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def count(self) -> int:
        return len(self.solutions)

    def to_payload(self) -> dict[str, Any]:
        """Plain-value form used by the cache and the worker channel."""
        return {
            "month": self.month,
            "day": self.day,
            "mode": self.mode.value,
            "solutions": self.solutions,
            "count": self.count,
            "time": round(self.elapsed, 3),
            "cancelled": self.cancelled,
            "cached": self.cached,
            "stats": self.stats.as_dict(),
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "SolveResult":
        return cls(
            month=str(data["month"]),
            day=int(data["day"]),
            mode=SearchMode(data["mode"]),
            solutions=[[list(row) for row in grid] for grid in data["solutions"]],
            elapsed=float(data["time"]),
            cancelled=bool(data.get("cancelled", False)),
            cached=bool(data.get("cached", False)),
            stats=SearchStats(**data.get("stats", {})),
        )


class DeadEndMemo:
    """Search states whose full expansion produced no solution.

    Build a fresh one for every solve() call: a dead end only holds for the
    target cells of the query that produced it.
    """

    def __init__(self) -> None:
        self._dead: set[bytes] = set()

    @staticmethod
    def key(board: Board, used_mask: int) -> bytes:
        # one byte per cell (BLOCKED/TARGET wrap to 0xFE/0xFF) plus the mask
        return bytes(value & 0xFF for row in board for value in row) + bytes([used_mask])

    def is_dead(self, board: Board, used_mask: int) -> bool:
        return self.key(board, used_mask) in self._dead

    def mark_dead(self, board: Board, used_mask: int) -> None:
        self._dead.add(self.key(board, used_mask))

    def __len__(self) -> int:
        return len(self._dead)


class SearchCancelled(Exception):
    pass


def _lowest_unset_bit(used_mask: int) -> int:
    index = 0
    while index < NUM_PIECES and used_mask & (1 << index):
        index += 1
    return index


def _smallest_remaining(used_mask: int) -> int:
    sizes = [piece_size(pid) for i, pid in enumerate(PIECE_IDS) if not used_mask & (1 << i)]
    return min(sizes) if sizes else 0


def _has_small_region(board: Board, min_size: int) -> bool:
    """True if some connected group of free cells is too small for any piece left."""
    seen = [[False] * BOARD_COLS for _ in range(BOARD_ROWS)]
    for r0 in range(BOARD_ROWS):
        for c0 in range(BOARD_COLS):
            if seen[r0][c0] or board[r0][c0] != FREE:
                continue
            seen[r0][c0] = True
            stack = [(r0, c0)]
            size = 0
            while stack:
                r, c = stack.pop()
                size += 1
                for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
                    if 0 <= nr < BOARD_ROWS and 0 <= nc < BOARD_COLS and not seen[nr][nc] and board[nr][nc] == FREE:
                        seen[nr][nc] = True
                        stack.append((nr, nc))
            if size < min_size:
                return True
    return False


class BacktrackingSearch:
    """Depth-first search that mutates one board in place and undoes every move.

    The board is owned by this object for the lifetime of the search; no one
    else may touch it until the generator from solutions() is exhausted or
    closed, at which point it is back in its starting state.
    """

    def __init__(
        self,
        board: Board,
        *,
        memo: Optional[DeadEndMemo] = None,
        prune_regions: bool = True,
        stop_event: Optional[StopFlag] = None,
        cancel_check_interval: int = 2048,
    ):
        self.board = board
        self.memo = memo
        self.prune_regions = prune_regions
        self.stop_event = stop_event
        self.cancel_check_interval = max(1, cancel_check_interval)
        self.stats = SearchStats()

    def solutions(self, used_mask: int = 0) -> Iterator[Board]:
        """Yield a deep copy of the board for every completed tiling."""
        yield from self._search(used_mask)

    def _check_cancelled(self) -> None:
        if (
            self.stop_event is not None
            and self.stats.nodes % self.cancel_check_interval == 0
            and self.stop_event.is_set()
        ):
            raise SearchCancelled()

    def _search(self, used_mask: int) -> Iterator[Board]:
        board = self.board
        if used_mask == ALL_PIECES_MASK:
            yield copy_board(board)
            return

        self.stats.nodes += 1
        self._check_cancelled()

        memo = self.memo
        if memo is not None and memo.is_dead(board, used_mask):
            self.stats.memo_hits += 1
            return

        piece_index = _lowest_unset_bit(used_mask)
        piece_id = PIECE_IDS[piece_index]
        next_mask = used_mask | (1 << piece_index)
        min_region = _smallest_remaining(next_mask) if self.prune_regions else 0

        found = 0
        for orientation in PIECE_ORIENTATIONS[piece_id]:
            max_r = orientation[-1][0]
            max_c = max(c for _, c in orientation)
            # Row-major sweep; anchors past these bounds could never fit
            for row in range(BOARD_ROWS - max_r):
                for col in range(BOARD_COLS - max_c):
                    if not can_place(board, orientation, row, col):
                        continue
                    self.stats.placements += 1
                    place(board, orientation, row, col, piece_id)
                    try:
                        if min_region and _has_small_region(board, min_region):
                            self.stats.region_prunes += 1
                            continue
                        with closing(self._search(next_mask)) as deeper:
                            for solution in deeper:
                                found += 1
                                yield solution
                    finally:
                        remove(board, orientation, row, col)

        if memo is not None and found == 0:
            memo.mark_dead(board, used_mask)


def run_search(
    board: Board,
    used_mask: int = 0,
    options: Optional[SolveOptions] = None,
    on_progress: Optional[ProgressCallback] = None,
    stop_event: Optional[StopFlag] = None,
) -> tuple[list[Board], bool, SearchStats]:
    """Search from an arbitrary state under the policy in ``options``.

    Returns (solutions, cancelled, stats).
    """
    options = options or SolveOptions()
    memo = DeadEndMemo() if options.memoize else None
    search = BacktrackingSearch(
        board,
        memo=memo,
        prune_regions=options.prune_regions,
        stop_event=stop_event,
        cancel_check_interval=options.cancel_check_interval,
    )
    limit = options.limit
    solutions: list[Board] = []
    cancelled = False

    found = search.solutions(used_mask)
    try:
        for solution in found:
            solutions.append(solution)
            log.debug("Solution #%d found after %d nodes", len(solutions), search.stats.nodes)
            if on_progress is not None:
                on_progress(len(solutions), solution)
            if limit is not None and len(solutions) >= limit:
                break
    except SearchCancelled:
        cancelled = True
    finally:
        found.close()

    if memo is not None:
        log.debug("Dead-end memo holds %d states", len(memo))
    return solutions, cancelled, search.stats


def solve(
    month: str | int,
    day: str | int,
    options: Optional[SolveOptions] = None,
    on_progress: Optional[ProgressCallback] = None,
    stop_event: Optional[StopFlag] = None,
) -> SolveResult:
    """Find tilings that leave exactly ``month`` and ``day`` uncovered.

    Raises InvalidQueryError for labels that are not on the board. An empty
    solution list means the date has no tiling under the chosen policy.
    """
    options = options or SolveOptions()
    month_label, day_label = resolve_query(month, day)
    board = query_to_board(month_label, day_label)

    log.info("Solving %s %s (mode=%s, limit=%s)", month_label, day_label, options.mode.value, options.limit)
    start = time.perf_counter()
    solutions, cancelled, stats = run_search(board, 0, options, on_progress, stop_event)
    elapsed = time.perf_counter() - start

    if cancelled:
        log.info("Search for %s %s cancelled after %d solution(s)", month_label, day_label, len(solutions))
    log.info(
        "Found %d solution(s) for %s %s in %.3fs (nodes=%d, region_prunes=%d, memo_hits=%d)",
        len(solutions),
        month_label,
        day_label,
        elapsed,
        stats.nodes,
        stats.region_prunes,
        stats.memo_hits,
    )
    return SolveResult(
        month=month_label,
        day=int(day_label),
        mode=options.mode,
        solutions=solutions,
        elapsed=elapsed,
        cancelled=cancelled,
        stats=stats,
    )
