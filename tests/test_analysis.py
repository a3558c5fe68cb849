import matplotlib
import matplotlib.pyplot as plt
import pytest

from tentsandtrees import analysis
from tentsandtrees.analysis import (
    format_solver_grid,
    run_solver_many_tests,
    run_solver_single_test,
    run_solver_size_analysis,
    summarize_pruning,
)


def test_format_solver_grid():
    grid = [["^", "%"], ["-", "."]]
    assert format_solver_grid(grid, show_coords=False) == " ^  %\n -  ."
    lines = format_solver_grid(grid).splitlines()
    assert lines[0] == "    0  1"
    assert lines[2] == " 0 | ^  %"


def test_run_solver_single_test(capsys):
    result = run_solver_single_test(5, seed=3, show_boards=True)
    assert result["status"] == 1
    assert result["check_errors"] == []
    assert result["solution"] is not None
    assert "Solution:" in capsys.readouterr().out


def test_run_solver_many_tests():
    stats = run_solver_many_tests(4, 3, seed=10)
    assert stats["solve_rate"] == 1.0
    assert stats["invalid_solution_count"] == 0.0
    assert stats["avg_max_depth"] == 16.0
    assert 0.0 <= stats["prune_ratio"] <= 1.0
    assert "avg_nodes_expanded" in stats
    assert "avg_status" not in stats


def test_run_solver_many_tests_rejects_no_runs():
    with pytest.raises(ValueError):
        run_solver_many_tests(4, 0)


def test_summarize_pruning():
    results = {
        5: {"avg_nodes_expanded": 50.0, "prune_ratio": 0.4, "unpruned_avg_nodes_expanded": 200.0},
    }
    summary = summarize_pruning(results, dim=5)
    assert summary == {"prune_ratio": 0.4, "nodes_per_cell": 2.0, "starved_tree_speedup": 4.0}
    with pytest.raises(KeyError):
        summarize_pruning(results, dim=6)


def test_run_solver_size_analysis(monkeypatch):
    matplotlib.use("Agg")
    shown = []
    monkeypatch.setattr(analysis.plt, "show", lambda: shown.append(True))

    results = run_solver_size_analysis((3, 4), 2, seed=0)

    assert sorted(results) == [3, 4]
    assert len(shown) == 3
    for dim in (3, 4):
        stats = results[dim]
        assert stats["solve_rate"] == stats["unpruned_solve_rate"]
        assert "avg_nodes_expanded" in stats
        assert "unpruned_avg_nodes_expanded" in stats
        assert 0.0 <= stats["unpruned_prune_ratio"] <= 1.0
    assert "starved_tree_speedup" in summarize_pruning(results, dim=4)
    plt.close("all")
