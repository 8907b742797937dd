# cache.py
# JSON file cache of solve results, keyed by "<MON>-<day>"

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from board import resolve_query
from config import CFG
from errors import CacheError, InvalidQueryError
from placements import check_assignment
from solver import SearchMode, SolveOptions, SolveResult

log = logging.getLogger(__name__)


class ResultCache:
    """Persist solve results between runs.

    Anything unreadable (bad JSON, old version, a board that does not tile the
    date it is stored under) is reported as a miss, never as a result.
    """

    def __init__(self, path: str | os.PathLike | None = None, version: str | None = None):
        self.path = Path(path if path is not None else CFG.CACHE_FILE)
        self.version = version or CFG.CACHE_VERSION

    @staticmethod
    def key(month: str | int, day: str | int) -> str:
        month_label, day_label = resolve_query(month, day)
        return f"{month_label}-{day_label}"

    def _read(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {"version": self.version}
        except (OSError, ValueError) as exc:
            log.warning("Cache file %s unreadable (%s); starting empty", self.path, exc)
            return {"version": self.version}
        if not isinstance(data, dict):
            log.warning("Cache file %s does not hold an object; starting empty", self.path)
            return {"version": self.version}
        if data.get("version") != self.version:
            log.info("Cache version %r != %r; removing %s", data.get("version"), self.version, self.path)
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                log.warning("Could not remove stale cache %s: %s", self.path, exc)
            return {"version": self.version}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, separators=(",", ":"))
        tmp.replace(self.path)

    def _decode(self, key: str, entry: Any, month: str, day: int) -> SolveResult:
        if not isinstance(entry, dict):
            raise CacheError(f"{key}: entry is not an object")
        solutions = entry.get("solutions")
        if not isinstance(solutions, list) or not solutions:
            raise CacheError(f"{key}: no solutions stored")
        if entry.get("count") != len(solutions):
            raise CacheError(f"{key}: count does not match solutions")
        for i, grid in enumerate(solutions):
            reason = check_assignment(grid, month, day)
            if reason is not None:
                raise CacheError(f"{key}: solution {i} invalid ({reason})")
        elapsed = entry.get("time")
        if isinstance(elapsed, bool) or not isinstance(elapsed, (int, float, str)):
            raise CacheError(f"{key}: bad elapsed time")
        try:
            mode = SearchMode(entry.get("mode"))
            elapsed = float(elapsed)
        except ValueError as exc:
            raise CacheError(f"{key}: {exc}") from exc
        return SolveResult(
            month=month,
            day=day,
            mode=mode,
            solutions=solutions,
            elapsed=elapsed,
            cached=True,
        )

    def load(self, month: str | int, day: str | int, options: Optional[SolveOptions] = None) -> Optional[SolveResult]:
        """Return the stored result for the date, or None on a miss.

        With ``options`` given, an entry produced under a different mode or
        cap is also a miss.
        """
        month_label, day_label = resolve_query(month, day)
        key = f"{month_label}-{day_label}"
        entry = self._read().get(key)
        if entry is None:
            return None
        try:
            result = self._decode(key, entry, month_label, int(day_label))
        except CacheError as exc:
            log.warning("Ignoring cached entry: %s", exc)
            return None
        if options is not None:
            if result.mode is not options.mode:
                return None
            if options.mode is SearchMode.CAPPED and entry.get("max_solutions") != options.max_solutions:
                return None
        log.debug("Cache hit for %s (%d solutions)", key, result.count)
        return result

    def store(self, result: SolveResult, options: Optional[SolveOptions] = None) -> bool:
        """Save a finished result. Empty or cancelled results are not stored."""
        if result.cancelled or not result.solutions:
            return False
        try:
            key = self.key(result.month, result.day)
        except InvalidQueryError:
            return False
        data = self._read()
        data["version"] = self.version
        data[key] = {
            "solutions": result.solutions,
            "count": result.count,
            "time": round(result.elapsed, 3),
            "mode": result.mode.value,
            "max_solutions": options.max_solutions if options is not None else None,
        }
        try:
            self._write(data)
        except OSError as exc:
            log.warning("Failed to write cache %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


__all__ = ["ResultCache"]
