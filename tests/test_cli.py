import json

import main as cli
import solve_all
from solver import SearchMode, SolveResult


def _fake_solve(solutions):
    def _solve(month, day, options=None, *args, **kwargs):
        return SolveResult(month="JAN", day=1, mode=options.mode, solutions=solutions, elapsed=0.01)

    return _solve


def test_text_mode_prints_solutions(monkeypatch, capsys, jan1_solution):
    monkeypatch.setattr(cli, "solve", _fake_solve([jan1_solution]))
    code = cli.main(["--text", "--month", "jan", "--day", "1", "--mode", "first", "--no-cache"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Solution 1 of 1" in out
    assert "[JAN]" in out
    assert "1 solution(s) for JAN 1" in out


def test_text_mode_without_solution(monkeypatch, capsys):
    monkeypatch.setattr(cli, "solve", _fake_solve([]))
    code = cli.main(["--text", "--month", "JAN", "--day", "1", "--no-cache"])
    assert code == 1
    assert "No solution" in capsys.readouterr().out


def test_text_mode_uses_cache(monkeypatch, tmp_path, capsys, jan1_solution):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli.CFG, "CACHE_FILE", str(tmp_path / "cache.json"))
    monkeypatch.setattr(cli, "solve", _fake_solve([jan1_solution]))
    assert cli.main(["--text", "--month", "JAN", "--day", "1", "--mode", "first"]) == 0
    capsys.readouterr()

    def _fail(*args, **kwargs):
        raise AssertionError("cache should have answered")

    monkeypatch.setattr(cli, "solve", _fail)
    assert cli.main(["--text", "--month", "JAN", "--day", "1", "--mode", "first"]) == 0
    assert "(cache)" in capsys.readouterr().out


def test_bad_date_exits_with_2():
    assert cli.main(["--text", "--month", "XYZ", "--day", "1", "--no-cache"]) == 2


def test_options_from_args():
    args = cli.parse_args(["--mode", "capped", "--max-solutions", "3", "--no-prune"])
    options = cli.options_from_args(args)
    assert options.mode is SearchMode.CAPPED
    assert options.max_solutions == 3
    assert not options.prune_regions


def test_iter_dates():
    dates = list(solve_all.iter_dates(2024))
    assert len(dates) == 366
    assert dates[0] == ("JAN", 1)
    assert ("FEB", 29) in dates
    assert dates[-1] == ("DEC", 31)
    assert len(list(solve_all.iter_dates(2023))) == 365


def test_solve_all_writes_report(monkeypatch, tmp_path, jan1_solution):
    monkeypatch.setattr(solve_all, "solve", _fake_solve([jan1_solution]))
    output = tmp_path / "all.json"
    assert solve_all.main(["--mode", "first", "--year", "2023", "--output", str(output)]) == 0

    data = json.loads(output.read_text())
    assert len(data["results"]) == 365
    entry = data["results"][0]
    assert entry["solutions"] == 1
    assert entry["grids"] == [jan1_solution]
    assert "generated_at" in data and "total_time" in data
