from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from board import MONTH_LABELS, days_in_month
from config import CFG, configure_logging
from errors import CalendarPuzzleError
from solver import SearchMode, SolveOptions, solve

log = logging.getLogger("solve_all")


def iter_dates(year: int):
    """Every (month label, day) of the given year, in calendar order."""
    for month in MONTH_LABELS:
        for day in range(1, days_in_month(month, year) + 1):
            yield month, day


def solve_all(options: SolveOptions, year: int = 2024) -> Dict[str, Any]:
    results: List[Dict[str, Any]] = []
    dates = list(iter_dates(year))
    started = time.perf_counter()

    for n, (month, day) in enumerate(dates, start=1):
        result = solve(month, day, options)
        log.info("[%3d/%d] %s %2d: %3d solutions in %.3fs", n, len(dates), month, day, result.count, result.elapsed)
        results.append(
            {
                "month": month,
                "day": day,
                "solutions": result.count,
                "grids": result.solutions,
                "time": result.elapsed,
            }
        )

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "total_time": time.perf_counter() - started,
        "results": results,
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Solve the calendar puzzle for every date of a year")
    parser.add_argument("--mode", choices=[m.value for m in SearchMode], default=SearchMode.EXHAUSTIVE.value)
    parser.add_argument("--max-solutions", type=int, default=CFG.MAX_SOLUTIONS)
    parser.add_argument("--output", default=CFG.ALL_RESULTS_FILE)
    parser.add_argument("--year", type=int, default=2024, help="Year used for February's length (default: leap year)")
    parser.add_argument("--log-level", default=CFG.LOG_LEVEL)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        options = SolveOptions(mode=SearchMode(args.mode), max_solutions=args.max_solutions)
        data = solve_all(options, args.year)
    except (CalendarPuzzleError, ValueError) as exc:
        log.error("%s", exc)
        return 2

    with open(args.output, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2)
    log.info("Complete in %.2fs; results saved to %s", data["total_time"], args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
