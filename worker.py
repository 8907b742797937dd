# worker.py
# Run a solve in a child process and relay its progress as plain messages

from __future__ import annotations

import logging
import multiprocessing as mp
import queue
import time
import traceback
from typing import Any, Callable, Dict, List, Optional

from board import resolve_query
from config import CFG
from errors import InvalidQueryError, OffloadError
from solver import SolveOptions, SolveResult

log = logging.getLogger(__name__)

Message = Dict[str, Any]


# Worker must be top-level (picklable on spawn)
def _solve_worker(q, request_id: int, month: str, day: str, options: Dict[str, Any], cache_path: Optional[str]):
    def post(kind: str, **fields: Any) -> None:
        q.put({"type": kind, "request_id": request_id, **fields})

    try:
        from cache import ResultCache
        from solver import solve

        post("started")
        opts = SolveOptions.from_payload(options)
        cache = ResultCache(cache_path) if cache_path else None

        result = cache.load(month, day, opts) if cache is not None else None
        if result is None:
            result = solve(
                month,
                day,
                opts,
                on_progress=lambda count, grid: post("progress", count=count, solution=grid),
            )
            if cache is not None:
                cache.store(result, opts)
        elif result.solutions:
            post("progress", count=result.count, solution=result.solutions[0])

        post("complete", **result.to_payload())
    except InvalidQueryError as e:
        post("invalid", message=str(e))
    except MemoryError:
        post("error", kind="memory", message="Child ran out of memory")
    except Exception as e:
        post("error", kind="exception", message=f"{e}\n{traceback.format_exc()}")


class SolveWorker:
    """One background solve at a time.

    submit() replaces whatever is running; poll() is non-blocking and returns
    only messages that belong to the latest request.
    """

    def __init__(
        self,
        cache_path: Optional[str] = None,
        target: Callable[..., None] = _solve_worker,
        start_method: str = "spawn",
    ):
        self.cache_path = cache_path
        self.target = target
        self._ctx = mp.get_context(start_method)
        self._queue = None
        self._process = None
        self._request_id = 0
        self._finished = True

    @property
    def request_id(self) -> int:
        return self._request_id

    @property
    def busy(self) -> bool:
        return not self._finished

    def submit(self, month: str | int, day: str | int, options: Optional[SolveOptions] = None) -> int:
        month_label, day_label = resolve_query(month, day)
        options = options or SolveOptions()
        self.cancel()

        self._request_id += 1
        self._queue = self._ctx.Queue()
        self._process = self._ctx.Process(
            target=self.target,
            args=(self._queue, self._request_id, month_label, day_label, options.to_payload(), self.cache_path),
        )
        self._process.daemon = True
        self._finished = False
        try:
            self._process.start()
        except OSError as exc:
            self._finished = True
            raise OffloadError(f"could not start solver process: {exc}") from exc
        log.info("Request %d: solving %s %s in pid %s", self._request_id, month_label, day_label, self._process.pid)
        return self._request_id

    def _drain(self) -> List[Message]:
        messages: List[Message] = []
        if self._queue is None:
            return messages
        while True:
            try:
                msg = self._queue.get_nowait()
            except queue.Empty:
                break
            if msg.get("request_id") != self._request_id:
                continue
            messages.append(msg)
            if msg["type"] in ("complete", "invalid", "error"):
                self._finished = True
        return messages

    def poll(self) -> List[Message]:
        if self._finished:
            return self._drain()
        messages = self._drain()
        if self._finished or self._process is None or self._process.is_alive():
            return messages

        # Child exited; pick up anything still in the pipe before judging it
        self._process.join(0.5)
        messages.extend(self._drain_with_grace())
        if not self._finished:
            exitcode = self._process.exitcode
            log.error("Request %d: solver process exited with %s and no result", self._request_id, exitcode)
            messages.append(
                {
                    "type": "error",
                    "request_id": self._request_id,
                    "kind": "offload",
                    "message": f"solver process exited with code {exitcode} before finishing",
                }
            )
            self._finished = True
        return messages

    def _drain_with_grace(self, grace: float = 0.5) -> List[Message]:
        deadline = time.monotonic() + grace
        messages = self._drain()
        while not self._finished and time.monotonic() < deadline:
            time.sleep(0.05)
            messages.extend(self._drain())
        return messages

    def cancel(self) -> None:
        """Drop the in-flight request, if any."""
        if self._process is not None and self._process.is_alive():
            log.info("Request %d: discarding in-flight search", self._request_id)
            self._process.terminate()
            self._process.join(2.0)
        self._process = None
        if self._queue is not None:
            self._queue.close()
            self._queue = None
        self._finished = True

    def close(self) -> None:
        self.cancel()


def run_isolated(
    month: str | int,
    day: str | int,
    options: Optional[SolveOptions] = None,
    timeout: Optional[float] = None,
    cache_path: Optional[str] = None,
) -> SolveResult:
    """Blocking solve in a child process.

    Raises OffloadError when the child crashes, times out or returns nothing,
    so the caller can retry instead of reporting "no solution".
    """
    timeout = CFG.WORKER_TIMEOUT if timeout is None else float(timeout)
    worker = SolveWorker(cache_path=cache_path)
    worker.submit(month, day, options)
    deadline = time.monotonic() + timeout
    try:
        while True:
            for msg in worker.poll():
                if msg["type"] == "complete":
                    return SolveResult.from_payload(msg)
                if msg["type"] == "invalid":
                    raise InvalidQueryError(msg["message"])
                if msg["type"] == "error":
                    raise OffloadError(msg["message"])
            if time.monotonic() > deadline:
                raise OffloadError(f"solver did not finish within {timeout:g}s")
            time.sleep(0.05)
    finally:
        worker.close()


__all__ = ["SolveWorker", "run_isolated"]
