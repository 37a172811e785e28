"""
Oracle for the traced sort's final state.

Python's built-in `sorted()` is the ground truth: the terminal snapshot of any
trace must hold exactly `sorted(trace.input_values)`.

Public API (stable):
    oracle_sort(a: list[number]) -> list[number]
    equals_oracle(trace: Trace) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
"""

from __future__ import annotations

from typing import List, Sequence

from quicktrace.trace.model import Number, Trace

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[Number]) -> List[Number]:
    """Return a new list with the values of `a` in non-decreasing order."""
    return sorted(a)


def equals_oracle(trace: Trace) -> bool:
    """True iff the trace's terminal values match `oracle_sort` of its input."""
    return trace.last.values == oracle_sort(trace.input_values)
