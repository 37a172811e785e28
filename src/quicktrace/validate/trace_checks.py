"""
Whole-trace invariant checks.

`check_trace` walks every snapshot once and reports each broken invariant as
a human-readable string; an empty list means the trace is well formed.

Checked:
- at least two snapshots;
- every snapshot has as many elements as the input;
- every snapshot is a permutation of the input values;
- the first snapshot is the untouched input, all `default`, no pivot, no
  comparisons;
- the last snapshot is sorted and all `sorted`;
- pivot and comparing indices lie inside the narrated partition bounds;
- within each partition the swap boundary never moves left and stays below
  the pivot position.
"""

from __future__ import annotations

from typing import List, Optional

from quicktrace.trace.model import ElementState, StepKind, Trace

from .properties import first_nondecreasing_violation_index, permutation_counter_diff

__all__ = ["check_trace", "assert_valid_trace"]


def check_trace(trace: Trace) -> List[str]:
    problems: List[str] = []
    expected = list(trace.input_values)
    n = len(expected)

    if len(trace) < 2:
        problems.append(f"trace has {len(trace)} snapshots; expected at least 2")
        return problems

    for idx, snap in enumerate(trace):
        if len(snap) != n:
            problems.append(f"step {idx}: {len(snap)} elements, expected {n}")
            continue
        diff = permutation_counter_diff(snap.values, expected)
        if diff:
            problems.append(f"step {idx}: values are not a permutation of the input (diff={diff})")
        if snap.bounds is not None:
            lo, hi = snap.bounds
            if snap.pivot_index is not None and not lo <= snap.pivot_index <= hi:
                problems.append(f"step {idx}: pivot {snap.pivot_index} outside [{lo}, {hi}]")
            stray = sorted(c for c in snap.comparing_indices if not lo <= c <= hi)
            if stray:
                problems.append(f"step {idx}: comparing {stray} outside [{lo}, {hi}]")

    first = trace.first
    if first.values != expected:
        problems.append("first step does not hold the input as given")
    if any(s is not ElementState.DEFAULT for s in first.states):
        problems.append("first step has non-default tags")
    if first.pivot_index is not None or first.comparing_indices:
        problems.append("first step highlights a pivot or comparison")

    last = trace.last
    bad = first_nondecreasing_violation_index(last.values)
    if bad is not None:
        problems.append(f"last step not sorted at i={bad}: {last.values[bad]} > {last.values[bad + 1]}")
    if any(s is not ElementState.SORTED for s in last.states):
        problems.append("last step has elements not tagged sorted")

    problems.extend(_check_boundaries(trace))
    return problems


def assert_valid_trace(trace: Trace) -> None:
    problems = check_trace(trace)
    if problems:
        raise AssertionError("invalid trace:\n  " + "\n  ".join(problems))


def _check_boundaries(trace: Trace) -> List[str]:
    problems: List[str] = []
    boundary: Optional[int] = None
    for idx, snap in enumerate(trace):
        if snap.kind is StepKind.PARTITION_START:
            boundary = None
        elif snap.kind is StepKind.SWAP and snap.bounds is not None:
            i = min(snap.comparing_indices)
            if boundary is not None and i < boundary:
                problems.append(f"step {idx}: boundary moved left ({boundary} -> {i})")
            if i > snap.bounds[1] - 1:
                problems.append(f"step {idx}: boundary {i} reached the pivot slot")
            boundary = i
    return problems
