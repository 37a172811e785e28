"""
Property helpers for validating sorted output and individual snapshots.

Public API (stable):
    is_nondecreasing(xs: Sequence[number]) -> bool
    first_nondecreasing_violation_index(xs: Sequence[number]) -> int | None
    is_permutation(a: Sequence[number], b: Sequence[number]) -> bool
    permutation_counter_diff(a, b) -> dict[number, int]
    assert_no_mutation(before, after) -> None

Notes
-----
- Stability is not checked: equal values are indistinguishable, and the
  Lomuto scheme is not stable anyway.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Sequence

from quicktrace.trace.model import Number

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
]


def is_nondecreasing(xs: Sequence[Number]) -> bool:
    """Return True iff xs[i] <= xs[i+1] for all i."""
    return first_nondecreasing_violation_index(xs) is None


def first_nondecreasing_violation_index(xs: Sequence[Number]) -> int | None:
    """
    Return the first index i where xs[i] > xs[i+1], or None if nondecreasing.

    Useful for precise error messages:
        i = first_nondecreasing_violation_index(out)
        assert i is None, f"not nondecreasing at i={i}: {out[i]} > {out[i+1]}"
    """
    for i in range(len(xs) - 1):
        if xs[i] > xs[i + 1]:
            return i
    return None


def is_permutation(a: Sequence[Number], b: Sequence[Number]) -> bool:
    """Return True iff `a` and `b` contain exactly the same multiset of values."""
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Number], b: Sequence[Number]) -> Dict[Number, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities.
    """
    ca = Counter(a)
    cb = Counter(b)
    diff: Dict[Number, int] = {}
    for k in set(ca) | set(cb):
        d = ca.get(k, 0) - cb.get(k, 0)
        if d != 0:
            diff[k] = d
    return diff


def assert_no_mutation(before: Sequence[Number], after: Sequence[Number]) -> None:
    """
    Assert that two sequences are exactly equal, used to check that building a
    trace left the caller's input alone.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x}, after={y}")
