import json

import pytest

from board import FREE, copy_board
from cache import ResultCache
from solver import SearchMode, SolveOptions, SolveResult


@pytest.fixture
def cache(tmp_path):
    return ResultCache(tmp_path / "cache.json", version="test")


@pytest.fixture
def result(jan1_solution):
    return SolveResult(month="JAN", day=1, mode=SearchMode.FIRST_ONLY, solutions=[jan1_solution], elapsed=0.25)


def _rewrite_entry(cache, **changes):
    data = json.loads(cache.path.read_text())
    data["JAN-1"].update(changes)
    cache.path.write_text(json.dumps(data))


def test_key():
    assert ResultCache.key("jan", 1) == "JAN-1"
    assert ResultCache.key(12, "31") == "DEC-31"


def test_store_and_load(cache, result, jan1_solution):
    assert cache.store(result)
    assert cache.path.exists()
    assert not cache.path.with_name("cache.json.tmp").exists()

    loaded = cache.load("jan", "1")
    assert loaded is not None
    assert loaded.cached
    assert loaded.solutions == [jan1_solution]
    assert loaded.mode is SearchMode.FIRST_ONLY
    assert loaded.elapsed == 0.25
    assert loaded.month == "JAN" and loaded.day == 1


def test_file_layout(cache, result):
    cache.store(result, SolveOptions(mode=SearchMode.FIRST_ONLY))
    data = json.loads(cache.path.read_text())
    assert data["version"] == "test"
    entry = data["JAN-1"]
    assert entry["count"] == 1
    assert entry["time"] == 0.25
    assert entry["mode"] == "first"


def test_miss_for_other_dates(cache, result):
    cache.store(result)
    assert cache.load("JAN", 2) is None
    assert ResultCache(cache.path.with_name("absent.json")).load("JAN", 1) is None


def test_mode_mismatch_is_a_miss(cache, result):
    cache.store(result)
    assert cache.load("JAN", 1, SolveOptions(mode=SearchMode.FIRST_ONLY)) is not None
    assert cache.load("JAN", 1, SolveOptions(mode=SearchMode.EXHAUSTIVE)) is None


def test_cap_mismatch_is_a_miss(cache, jan1_solution):
    options = SolveOptions(mode=SearchMode.CAPPED, max_solutions=1)
    capped = SolveResult(month="JAN", day=1, mode=SearchMode.CAPPED, solutions=[jan1_solution], elapsed=0.1)
    cache.store(capped, options)
    assert cache.load("JAN", 1, options) is not None
    assert cache.load("JAN", 1, SolveOptions(mode=SearchMode.CAPPED, max_solutions=5)) is None


def test_corrupt_file_is_a_miss(cache, result):
    cache.path.write_text("{not json")
    assert cache.load("JAN", 1) is None
    # a later store replaces the damaged file
    assert cache.store(result)
    assert cache.load("JAN", 1) is not None


def test_non_object_file_is_a_miss(cache):
    cache.path.write_text("[1, 2, 3]")
    assert cache.load("JAN", 1) is None


def test_version_mismatch_discards_entries(tmp_path, result):
    path = tmp_path / "cache.json"
    ResultCache(path, version="v1").store(result)
    assert ResultCache(path, version="v1").load("JAN", 1) is not None
    assert ResultCache(path, version="v2").load("JAN", 1) is None
    assert not path.exists()
    assert ResultCache(path, version="v1").load("JAN", 1) is None


def test_invalid_board_is_a_miss(cache, result, jan1_solution):
    cache.store(result)
    broken = copy_board(jan1_solution)
    r, c = next((r, c) for r, row in enumerate(broken) for c, v in enumerate(row) if v == 3)
    broken[r][c] = FREE
    _rewrite_entry(cache, solutions=[broken])
    assert cache.load("JAN", 1) is None


@pytest.mark.parametrize(
    "changes",
    [
        {"count": 2},
        {"solutions": []},
        {"solutions": "nope"},
        {"mode": "bogus"},
        {"time": True},
        {"time": None},
        {"time": "fast"},
    ],
)
def test_malformed_entry_is_a_miss(cache, result, changes):
    cache.store(result)
    _rewrite_entry(cache, **changes)
    assert cache.load("JAN", 1) is None


def test_solutions_for_wrong_date_are_a_miss(cache, result):
    cache.store(result)
    data = json.loads(cache.path.read_text())
    data["FEB-1"] = data.pop("JAN-1")
    cache.path.write_text(json.dumps(data))
    assert cache.load("FEB", 1) is None


def test_empty_and_cancelled_results_are_not_stored(cache, jan1_solution):
    empty = SolveResult(month="JAN", day=1, mode=SearchMode.EXHAUSTIVE, solutions=[], elapsed=1.0)
    cancelled = SolveResult(
        month="JAN", day=1, mode=SearchMode.EXHAUSTIVE, solutions=[jan1_solution], elapsed=1.0, cancelled=True
    )
    assert not cache.store(empty)
    assert not cache.store(cancelled)
    assert not cache.path.exists()


def test_entries_for_several_dates_coexist(cache, result, jan1_solution):
    cache.store(result)
    other = SolveResult(month="FEB", day=1, mode=SearchMode.FIRST_ONLY, solutions=[jan1_solution], elapsed=0.1)
    cache.store(other)
    data = json.loads(cache.path.read_text())
    assert set(data) == {"version", "JAN-1", "FEB-1"}
    assert cache.load("JAN", 1) is not None


def test_clear(cache, result):
    cache.store(result)
    cache.clear()
    assert not cache.path.exists()
    cache.clear()
