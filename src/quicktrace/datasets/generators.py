"""
Input arrays for the quick sort trace.

Currently implemented:
- dist == "random":
    Integers drawn uniformly from an inclusive range (default [10, 99], the
    range that keeps bars readable on screen).

- dist == "nearly_sorted":
    Start from evenly spaced non-decreasing values inside the range (values
    repeat once n exceeds the range span), then perform
    ceil(swap_frac * n) random index swaps using the provided RNG.

- dist == "few_uniques":
    Choose up to k distinct integers from the range, then fill the array by
    sampling those values uniformly. Good for exercising equal-to-pivot steps.

- dist == "reversed":
    Deterministic strictly decreasing values (the quadratic case for a
    last-element pivot). Requires n <= hi - lo + 1 so no value repeats.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]
    random_array(size: int, rng, *, strict=True) -> list[int]
    DEFAULT_ARRAY, SUPPORTED_SIZES, SUPPORTED_DISTS, DEFAULT_RANGE

Conventions:
- Ranges in params["range"] are **inclusive** on both ends.
- Returns a plain Python `list[int]` (the trace engine stays NumPy-agnostic).
- The caller supplies the RNG, so a seeded generator reproduces the array and
  therefore the whole trace.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import numpy as np

DEFAULT_ARRAY: Tuple[int, ...] = (19, 28, 37, 38, 39, 39, 8, 9)
DEFAULT_RANGE: Tuple[int, int] = (10, 99)
SUPPORTED_SIZES: Tuple[int, ...] = (4, 6, 8, 10, 12)
SUPPORTED_DISTS = {
    "random",
    "nearly_sorted",
    "few_uniques",
    "reversed",
}
__all__ = [
    "DEFAULT_ARRAY",
    "DEFAULT_RANGE",
    "SUPPORTED_SIZES",
    "SUPPORTED_DISTS",
    "make_dataset",
    "random_array",
]


def random_array(size: int, rng: np.random.Generator, *, strict: bool = True) -> List[int]:
    """
    Draw a "random" array in the default display range.

    With `strict=True` (default) only the sizes offered by the player
    (`SUPPORTED_SIZES`) are accepted.
    """
    _validate_n(size)
    if strict and size not in SUPPORTED_SIZES:
        raise ValueError(f"size must be one of {list(SUPPORTED_SIZES)}; got {size}")
    return make_dataset(size, {"dist": "random"}, rng)


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate an integer array according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        {"dist": <name>, "params": {...}}. Every dist accepts an optional
        inclusive "range": [min_int, max_int] (default [10, 99]).

        nearly_sorted:  {"swap_frac": 0.1}   # in [0.0, 1.0]
        few_uniques:    {"k": 3}             # desired #unique values (>=1)
    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).
        Unused by "reversed".

    Returns
    -------
    list[int]

    Raises
    ------
    ValueError
        If inputs are invalid or the distribution is unsupported.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params") or {}
    lo, hi = _parse_range(params)
    if n == 0:
        return []

    if dist == "random":
        # Generator.integers is half-open; +1 makes the top inclusive.
        arr = rng.integers(lo, hi + 1, size=n, dtype=np.int64)
        return arr.tolist()

    if dist == "nearly_sorted":
        swap_frac = _parse_swap_frac(params)
        arr = _spread(n, lo, hi)
        num_swaps = int(np.ceil(swap_frac * n))
        if num_swaps <= 0:
            return arr
        idxs = rng.integers(0, n, size=2 * num_swaps)
        for k in range(num_swaps):
            i = int(idxs[2 * k])
            j = int(idxs[2 * k + 1])
            arr[i], arr[j] = arr[j], arr[i]
        return arr

    if dist == "few_uniques":
        k = _parse_k(params)
        actual_k = int(min(k, n, hi - lo + 1))
        # Draw from `rng` only, so the array is tied to the caller's seed.
        chosen = rng.choice(np.arange(lo, hi + 1), size=actual_k, replace=False)
        idxs = rng.integers(0, actual_k, size=n)
        return [int(chosen[int(t)]) for t in idxs]

    if dist == "reversed":
        if n > hi - lo + 1:
            raise ValueError(
                f"reversed needs n <= range span for distinct values; got n={n} over [{lo}, {hi}]"
            )
        return _spread(n, lo, hi)[::-1]

    raise ValueError(f"Unhandled dataset dist: {dist!r}")


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _spread(n: int, lo: int, hi: int) -> List[int]:
    """n non-decreasing integers covering [lo, hi] as evenly as possible."""
    if n == 1:
        return [lo]
    return [int(v) for v in np.linspace(lo, hi, num=n).round()]


def _parse_range(params: Dict[str, Any]) -> Tuple[int, int]:
    if "range" not in params:
        return DEFAULT_RANGE
    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    val = params.get("swap_frac", 0.1)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}")
    return x


def _parse_k(params: Dict[str, Any]) -> int:
    if "k" not in params:
        raise ValueError("few_uniques.params.k must be provided (int >= 1)")
    k = params["k"]
    if not _is_int_like(k) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    return int(k)


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types, but not bools
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
