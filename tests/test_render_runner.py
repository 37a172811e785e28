"""
Tests for terminal rendering (quicktrace.playback.render) and the CLI runner
(quicktrace.app.runner).

Note:
- This file inserts the project `src/` onto sys.path so tests run without installing the package.
"""

from __future__ import annotations

import json
import pathlib
import sys

import pandas as pd
import pytest
import yaml
from rich.console import Console

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from quicktrace.app import runner
from quicktrace.playback import render_info, render_legend, render_pseudocode, render_snapshot
from quicktrace.trace import PSEUDOCODE, build_trace, pseudocode_line


def _text(renderable) -> str:
    console = Console(record=True, width=120, color_system=None)
    console.print(renderable)
    return console.export_text()


# ------------------------- render ------------------------- #

def test_pseudocode_listing() -> None:
    assert len(PSEUDOCODE) == 7
    assert pseudocode_line(1) == "for each (unsorted) partition"
    assert "50% lucky" in pseudocode_line(5)
    assert pseudocode_line(0) == "" and pseudocode_line(8) == ""
    out = _text(render_pseudocode(3))
    for line in PSEUDOCODE:
        assert line.strip() in out


def test_render_snapshot_shows_values_and_narration() -> None:
    trace = build_trace([19, 28, 37, 38, 39, 39, 8, 9])
    out = _text(render_snapshot(trace[2], cursor=2, total=len(trace)))
    assert "Comparing 19 with pivot 9" in out
    assert "Comparing elements in partition [0 to 7]" in out
    assert "step 3/30" in out
    for v in ("19", "28", "39", "8"):
        assert v in out


def test_render_handles_empty_and_zero() -> None:
    out = _text(render_snapshot(build_trace([]).last))
    assert "Array is now sorted!" in out
    assert "0" in _text(render_snapshot(build_trace([0, 0]).first))


@pytest.mark.parametrize("values", [[1, float("inf")], [3, float("-inf")]])
def test_render_handles_infinite_values(values) -> None:
    trace = build_trace(values)
    for snap in (trace.first, trace.last):
        out = _text(render_snapshot(snap))
        assert "inf" in out
        assert "█" * 40 in out


def test_run_play_with_infinite_value() -> None:
    console = Console(record=True, width=100, color_system=None)
    trace = runner.run_play([3, float("-inf")], speed_ms=100, console=console, sleep=lambda s: None)
    assert trace.last.values == [float("-inf"), 3]


def test_legend_and_info() -> None:
    legend = _text(render_legend())
    for meaning in ("Pivot Element", "Currently Comparing", "Current Partition", "Sorted Position"):
        assert meaning in legend
    info = _text(render_info())
    assert "Quick Sort Algorithm" in info
    assert "O(n log n)" in info


# ------------------------- runner ------------------------- #

def _write_config(tmp_path: pathlib.Path, **overrides) -> pathlib.Path:
    cfg = {
        "experiment_name": "unit",
        "output_dir": str(tmp_path / "runs"),
        "seed": 123,
        "dataset": {"dist": "random", "params": {"range": [10, 99]}},
        "sizes": [4, 8],
        "arrays": [[19, 28, 37, 38, 39, 39, 8, 9], [5, 5, 5]],
    }
    cfg.update(overrides)
    tmp_path.mkdir(parents=True, exist_ok=True)
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def test_export_writes_run_directory(tmp_path: pathlib.Path) -> None:
    run_dir = runner.run_export(_write_config(tmp_path))

    for name in ("config_resolved.yaml", "meta.json", "traces.jsonl", "summary.csv"):
        assert (run_dir / name).exists(), name

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert "python" in meta and "numpy" in meta

    summary = pd.read_csv(run_dir / "summary.csv")
    assert list(summary["label"]) == ["random_n4", "random_n8", "array_0", "array_1"]
    assert summary["valid"].all()
    row = summary[summary["label"] == "array_0"].iloc[0]
    assert row["steps"] == 30 and row["partitions"] == 4 and row["comparisons"] == 16

    lines = (run_dir / "traces.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert len(records) == int(summary["steps"].sum())
    last_default = [r for r in records if r["trace"] == "array_0"][-1]
    assert last_default["values"] == [8, 9, 19, 28, 37, 38, 39, 39]
    assert set(last_default["states"]) == {"sorted"}


def test_export_is_reproducible_from_seed(tmp_path: pathlib.Path) -> None:
    a = runner.run_export(_write_config(tmp_path / "a", arrays=[]))
    b = runner.run_export(_write_config(tmp_path / "b", arrays=[]))
    assert (a / "traces.jsonl").read_text(encoding="utf-8") == (b / "traces.jsonl").read_text(encoding="utf-8")


def test_export_missing_keys(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.safe_dump({"experiment_name": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        runner.run_export(path)


def test_export_empty_sizes_key(tmp_path: pathlib.Path) -> None:
    with pytest.raises(ValueError, match="sizes"):
        runner.run_export(_write_config(tmp_path / "none", sizes=None, arrays=[]))
    run_dir = runner.run_export(_write_config(tmp_path / "arrays_only", sizes=None, arrays=[[2, 1]]))
    summary = pd.read_csv(run_dir / "summary.csv")
    assert list(summary["label"]) == ["array_0"]


def test_export_bad_array_writes_nothing(tmp_path: pathlib.Path) -> None:
    path = _write_config(tmp_path, arrays=[[1, "two", 3]])
    with pytest.raises(ValueError):
        runner.run_export(path)
    assert not (tmp_path / "runs").exists()


def test_parse_values() -> None:
    assert runner._parse_values("5, 3,8.5,") == [5, 3, 8.5]
    with pytest.raises(ValueError):
        runner._parse_values("1,x")


def test_run_play_autoplays_to_the_end() -> None:
    console = Console(record=True, width=100, color_system=None)
    trace = runner.run_play([3, 1, 2], speed_ms=100, console=console, sleep=lambda s: None)
    assert trace.last.values == [1, 2, 3]
    assert "Array is now sorted!" in console.export_text()


def test_cli_play_with_seeded_size(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_play(values, **kwargs):
        seen["values"] = values
        seen.update(kwargs)

    monkeypatch.setattr(runner, "run_play", fake_play)
    runner.main(["play", "--values", "4,2,9", "--speed", "200", "--retag-swaps"])
    assert seen["values"] == [4, 2, 9]
    assert seen["speed_ms"] == 200
    assert seen["retag_swaps"] is True
