"""
Command-line entry point: play a trace in the terminal or export traces from a
YAML config.

Usage (from repo root):
    python -m quicktrace.app.runner play
    python -m quicktrace.app.runner play --values 5,3,8,1 --speed 300
    python -m quicktrace.app.runner play --size 10 --seed 7 --retag-swaps
    python -m quicktrace.app.runner export experiments/configs/random_sizes.yaml

Export outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - traces.jsonl            # one JSON line per snapshot of every trace
    - summary.csv             # one row per trace: n, steps, comparisons, swaps, partitions
    - (console) rich/tqdm summaries

Design notes:
- Each entry in `sizes` draws ONE array from the seeded RNG; entries in the
  optional `arrays` list are traced as given.
- Traces are built eagerly, in full, before anything is written for them.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.live import Live
from rich.table import Table
from tqdm import tqdm

from quicktrace.datasets import DEFAULT_ARRAY, make_dataset, random_array
from quicktrace.playback import DEFAULT_SPEED_MS, Player, render_info, render_snapshot
from quicktrace.trace import StepKind, Trace, build_trace
from quicktrace.validate import check_trace

_console = Console()

REQUIRED_KEYS = ["experiment_name", "output_dir", "seed", "dataset", "sizes"]
SUMMARY_COLUMNS = ["label", "n", "steps", "comparisons", "swaps", "partitions", "valid"]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(rows: Sequence[Dict[str, Any]], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        for obj in rows:
            f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
            f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode("utf-8").strip()
    except (OSError, subprocess.CalledProcessError):
        return None


def _gather_meta() -> Dict[str, Any]:
    import platform
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _summary_row(label: str, trace: Trace) -> Dict[str, Any]:
    return {
        "label": label,
        "n": len(trace.input_values),
        "steps": len(trace),
        "comparisons": trace.count_kind(StepKind.COMPARISON),
        "swaps": trace.count_kind(StepKind.SWAP),
        "partitions": trace.partitions,
        "valid": not check_trace(trace),
    }


def _print_rich_summary(summary: pd.DataFrame) -> None:
    table = Table(title="Trace Summary")
    table.add_column("Trace", style="bold")
    for col in SUMMARY_COLUMNS[1:]:
        table.add_column(col, justify="right")
    if summary.empty:
        table.add_row("(no traces)", *["—"] * (len(SUMMARY_COLUMNS) - 1))
    for row in summary.itertuples(index=False):
        valid = "[green]yes[/]" if row.valid else "[bold red]no[/]"
        table.add_row(
            str(row.label), str(row.n), str(row.steps), str(row.comparisons),
            str(row.swaps), str(row.partitions), valid,
        )
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- export ------------------------- #

def _resolve_inputs(cfg: Dict[str, Any], rng: np.random.Generator) -> List[Tuple[str, List[Any]]]:
    sizes = list(cfg["sizes"] or [])
    if not sizes and not cfg.get("arrays"):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers (or give 'arrays')")
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])

    inputs: List[Tuple[str, List[Any]]] = []
    for n in tqdm(sizes, desc="Sizes", unit="n"):
        inputs.append((f"{dataset_spec.get('dist')}_n{int(n)}", make_dataset(int(n), dataset_spec, rng)))

    arrays = cfg.get("arrays") or []
    if not isinstance(arrays, list):
        raise ValueError("Config 'arrays' must be a list of lists if provided")
    for k, arr in enumerate(arrays):
        if not isinstance(arr, list):
            raise ValueError(f"Config 'arrays[{k}]' must be a list")
        inputs.append((f"array_{k}", arr))
    return inputs


def run_export(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    retag_swaps = bool(cfg.get("retag_swaps", False))
    rng = np.random.default_rng(int(cfg["seed"]))

    inputs = _resolve_inputs(cfg, rng)
    # Build everything before touching the disk: a bad input aborts the run cleanly.
    traces = [(label, build_trace(values, retag_swaps=retag_swaps)) for label, values in inputs]

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    traces_path = run_dir / "traces.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Traces:[/bold] {len(traces)}  (retag_swaps={retag_swaps})")

    rows: List[Dict[str, Any]] = []
    traces_path.touch()
    for label, trace in traces:
        _append_jsonl([dict(trace=label, **rec) for rec in trace.to_records()], traces_path)
        rows.append(_summary_row(label, trace))

    summary_df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    _console.print(f" - {traces_path}")
    _console.print(f" - {summary_path}")
    _console.print(f" - {meta_path}")
    _console.print(f" - {cfg_resolved_path}")
    return run_dir


# ------------------------- play ------------------------- #

def _parse_values(raw: str) -> List[Any]:
    out: List[Any] = []
    for tok in raw.split(","):
        tok = tok.strip()
        if not tok:
            continue
        try:
            out.append(int(tok))
        except ValueError:
            try:
                out.append(float(tok))
            except ValueError as e:
                raise ValueError(f"--values: not a number: {tok!r}") from e
    return out


def run_play(
    values: Optional[Sequence[Any]] = None,
    *,
    size: Optional[int] = None,
    seed: Optional[int] = None,
    speed_ms: int = DEFAULT_SPEED_MS,
    retag_swaps: bool = False,
    show_info: bool = False,
    console: Optional[Console] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> Trace:
    console = console or _console
    if values is None:
        values = random_array(size, np.random.default_rng(seed)) if size is not None else list(DEFAULT_ARRAY)

    trace = build_trace(values, retag_swaps=retag_swaps)
    player = Player(trace, speed_ms=speed_ms)
    if show_info:
        console.print(render_info())

    with Live(render_snapshot(player.snapshot, cursor=0, total=len(trace)), console=console) as live:
        player.run(
            lambda snap, cur: live.update(render_snapshot(snap, cursor=cur, total=len(trace))),
            sleep=sleep,
        )
    return trace


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Trace quick sort step by step.")
    sub = p.add_subparsers(dest="command", required=True)

    pp = sub.add_parser("play", help="Animate a trace in the terminal")
    pp.add_argument("--values", type=str, default=None, help="Comma-separated input, e.g. 5,3,8,1")
    pp.add_argument("--size", type=int, default=None, help="Random array size (4, 6, 8, 10 or 12)")
    pp.add_argument("--seed", type=int, default=None, help="Seed for the random array")
    pp.add_argument("--speed", type=int, default=DEFAULT_SPEED_MS, help="Delay per step in ms (100..2000)")
    pp.add_argument("--retag-swaps", action="store_true", help="Highlight swap steps like their neighbours")
    pp.add_argument("--info", action="store_true", help="Show the algorithm info card first")

    pe = sub.add_parser("export", help="Export traces described by a YAML config")
    pe.add_argument("config", type=str, help="Path to YAML export config")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        if args.command == "export":
            config_path = Path(args.config).resolve()
            if not config_path.exists():
                raise SystemExit(f"Config file not found: {config_path}")
            run_export(config_path)
        else:
            values = _parse_values(args.values) if args.values is not None else None
            run_play(
                values,
                size=args.size,
                seed=args.seed,
                speed_ms=args.speed,
                retag_swaps=args.retag_swaps,
                show_info=args.info,
            )
    except (ValueError, OSError) as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
