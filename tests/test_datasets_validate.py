"""
Tests for input generation (quicktrace.datasets) and the validation helpers
(quicktrace.validate).

Note:
- This file inserts the project `src/` onto sys.path so tests run without installing the package.
"""

from __future__ import annotations

import dataclasses
import pathlib
import sys

import numpy as np
import pytest

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from quicktrace.datasets import (
    DEFAULT_ARRAY,
    SUPPORTED_SIZES,
    make_dataset,
    random_array,
)
from quicktrace.trace import ElementState, Trace, build_trace
from quicktrace.validate import (
    assert_no_mutation,
    assert_valid_trace,
    check_trace,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_permutation,
    permutation_counter_diff,
)


# ------------------------- datasets ------------------------- #

@pytest.mark.parametrize("size", SUPPORTED_SIZES)
def test_random_array_in_display_range(size: int) -> None:
    a = random_array(size, np.random.default_rng(0))
    assert len(a) == size
    assert all(10 <= v <= 99 for v in a)
    assert all(type(v) is int for v in a)


def test_random_array_is_seeded() -> None:
    assert random_array(8, np.random.default_rng(7)) == random_array(8, np.random.default_rng(7))


def test_random_array_rejects_unsupported_size() -> None:
    with pytest.raises(ValueError):
        random_array(7, np.random.default_rng(0))
    assert len(random_array(7, np.random.default_rng(0), strict=False)) == 7


def test_reversed_is_strictly_decreasing() -> None:
    a = make_dataset(6, {"dist": "reversed"}, np.random.default_rng(0))
    assert a == sorted(a, reverse=True)
    assert len(set(a)) == 6
    assert a[0] == 99 and a[-1] == 10


def test_reversed_stays_distinct_at_full_span() -> None:
    a = make_dataset(90, {"dist": "reversed"}, np.random.default_rng(0))
    assert a == list(range(99, 9, -1))


def test_reversed_rejects_n_beyond_span() -> None:
    with pytest.raises(ValueError, match="range span"):
        make_dataset(100, {"dist": "reversed"}, np.random.default_rng(0))
    with pytest.raises(ValueError):
        make_dataset(4, {"dist": "reversed", "params": {"range": [0, 2]}}, np.random.default_rng(0))


def test_few_uniques_limits_distinct_values() -> None:
    a = make_dataset(40, {"dist": "few_uniques", "params": {"k": 3}}, np.random.default_rng(1))
    assert len(a) == 40
    assert len(set(a)) <= 3


def test_nearly_sorted_is_permutation_of_spread() -> None:
    rng = np.random.default_rng(2)
    a = make_dataset(10, {"dist": "nearly_sorted", "params": {"swap_frac": 0.2}}, rng)
    base = make_dataset(10, {"dist": "nearly_sorted", "params": {"swap_frac": 0.0}}, rng)
    assert is_nondecreasing(base)
    assert is_permutation(a, base)


def test_custom_range_and_empty() -> None:
    rng = np.random.default_rng(3)
    assert make_dataset(0, {"dist": "random"}, rng) == []
    a = make_dataset(20, {"dist": "random", "params": {"range": [-5, 5]}}, rng)
    assert all(-5 <= v <= 5 for v in a)


@pytest.mark.parametrize(
    "n,spec",
    [
        (-1, {"dist": "random"}),
        (3.0, {"dist": "random"}),
        (3, {"dist": "bogus"}),
        (3, "random"),
        (3, {"dist": "random", "params": {"range": [9, 1]}}),
        (3, {"dist": "random", "params": {"range": [1]}}),
        (3, {"dist": "few_uniques", "params": {}}),
        (3, {"dist": "few_uniques", "params": {"k": 0}}),
        (3, {"dist": "nearly_sorted", "params": {"swap_frac": 2}}),
        (3, {"dist": "nearly_sorted", "params": {"swap_frac": "x"}}),
    ],
)
def test_make_dataset_rejects_bad_arguments(n, spec) -> None:
    with pytest.raises(ValueError):
        make_dataset(n, spec, np.random.default_rng(0))


def test_default_array_builds_valid_trace() -> None:
    assert_valid_trace(build_trace(list(DEFAULT_ARRAY)))


# ------------------------- properties ------------------------- #

def test_property_helpers() -> None:
    assert is_nondecreasing([])
    assert is_nondecreasing([1, 1, 2])
    assert first_nondecreasing_violation_index([1, 3, 2]) == 1
    assert is_permutation([1, 2, 2], [2, 1, 2])
    assert not is_permutation([1, 2], [1, 2, 2])
    assert permutation_counter_diff([1, 1, 2], [1, 3]) == {1: 1, 2: 1, 3: -1}


def test_assert_no_mutation() -> None:
    assert_no_mutation([1, 2], [1, 2])
    with pytest.raises(AssertionError, match="index 1"):
        assert_no_mutation([1, 2], [1, 3])
    with pytest.raises(AssertionError, match="length"):
        assert_no_mutation([1], [1, 2])


# ------------------------- trace checks ------------------------- #

def _tamper(trace: Trace, idx: int, **changes) -> Trace:
    snaps = list(trace)
    snaps[idx] = dataclasses.replace(snaps[idx], **changes)
    return Trace(snaps, trace.input_values, trace.partitions)


def test_check_trace_accepts_engine_output() -> None:
    assert check_trace(build_trace([3, 1, 2, 2])) == []


def test_check_trace_flags_lost_value() -> None:
    trace = build_trace([3, 1, 2])
    el = trace[1].elements
    bad = _tamper(trace, 1, elements=(el[0], el[1], dataclasses.replace(el[2], value=99)))
    assert any("permutation" in p for p in check_trace(bad))


def test_check_trace_flags_unsorted_terminal_tags() -> None:
    trace = build_trace([3, 1, 2])
    last = trace.last
    els = tuple(e.with_state(ElementState.DEFAULT) for e in last.elements)
    bad = _tamper(trace, len(trace) - 1, elements=els)
    assert any("not tagged sorted" in p for p in check_trace(bad))
    with pytest.raises(AssertionError):
        assert_valid_trace(bad)


def test_check_trace_flags_pivot_outside_bounds() -> None:
    trace = build_trace([3, 1, 2])
    bad = _tamper(trace, 1, pivot_index=5)
    assert any("outside" in p for p in check_trace(bad))


def test_trace_needs_two_snapshots() -> None:
    trace = build_trace([])
    with pytest.raises(ValueError):
        Trace([trace.first], (), 0)
