"""
Instrumented quick sort (Lomuto partition, pivot = last element of the range).

`build_trace(values)` runs the sort once over a private working copy of the
input and records a `Snapshot` at every meaningful point:

    initial          -> whole array, every element `default`
    partition_start  -> range [low, high] `active`, `high` is the pivot
    comparison       -> as above, plus `j` `comparing`
    swap             -> after swapping positions i and j (only when a[j] <= pivot)
    pivot_placed     -> after moving the pivot to i + 1
    sorted           -> every element `sorted`

Ranges with low >= high emit nothing. Recursion is replaced by an explicit
LIFO worklist of (low, high) ranges; the right range is pushed first so the
left range (and all of its sub-ranges) is traced before it, which gives the
same depth-first, left-first order as the recursive formulation.

Swap and pivot-placed steps are, by default, plain copies of the working
array: their elements carry the working array's own `default` tags rather than
re-derived active/pivot/comparing highlighting. Pass `retag_swaps=True` to get
fully highlighted swap and pivot-placed steps instead.

Public API (stable):
    build_trace(values, *, retag_swaps=False) -> Trace
    tag_elements(working, bounds, pivot_index, comparing) -> tuple[Element, ...]
    InvalidInputError
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .model import Element, ElementState, Number, Snapshot, StepKind, Trace

__all__ = ["InvalidInputError", "build_trace", "tag_elements"]


class InvalidInputError(ValueError):
    """Raised when the input to `build_trace` is not a sequence of int or float values."""


def build_trace(values: Sequence[Number], *, retag_swaps: bool = False) -> Trace:
    """
    Sort `values` with quick sort and return the full step-by-step trace.

    Parameters
    ----------
    values : sequence of int | float
        Input array. It is never mutated; NumPy scalars are converted to
        Python numbers.
    retag_swaps : bool
        If True, swap and pivot-placed steps get the same active/pivot
        highlighting as their neighbours instead of a plain array copy.

    Returns
    -------
    Trace
        At least two snapshots: the untouched input and the sorted result.

    Raises
    ------
    InvalidInputError
        If `values` is not a sequence or holds anything but int or non-NaN float
        numbers. Nothing is traced in that case.
    """
    clean = _validate_values(values)
    recorder = _Recorder(clean, retag_swaps=retag_swaps)
    recorder.run()
    return Trace(recorder.steps, clean, recorder.partitions)


def tag_elements(
    working: Sequence[Element],
    bounds: Optional[Tuple[int, int]],
    pivot_index: Optional[int],
    comparing: Iterable[int] = (),
) -> Tuple[Element, ...]:
    """
    Derive display tags for one step from positions alone.

    Precedence per index: pivot > comparing > active (inside bounds) > default.
    Tags already present on `working` are ignored.
    """
    comparing = frozenset(comparing)
    lo, hi = bounds if bounds is not None else (0, -1)
    out: List[Element] = []
    for idx, el in enumerate(working):
        if idx == pivot_index:
            state = ElementState.PIVOT
        elif idx in comparing:
            state = ElementState.COMPARING
        elif lo <= idx <= hi:
            state = ElementState.ACTIVE
        else:
            state = ElementState.DEFAULT
        out.append(el.with_state(state))
    return tuple(out)


# ------------------------- engine ------------------------- #


class _Recorder:
    """Owns the working array and the list of emitted steps for one run."""

    def __init__(self, values: Sequence[Number], *, retag_swaps: bool) -> None:
        self.arr: List[Element] = [Element(v) for v in values]
        self.retag_swaps = retag_swaps
        self.steps: List[Snapshot] = []
        self.partitions = 0

    def run(self) -> None:
        self._emit(
            tuple(self.arr),
            kind=StepKind.INITIAL,
            step_pointer=1,
            narration="Starting Quick Sort algorithm",
            partition_narration="Initializing Quick Sort",
        )

        worklist: List[Tuple[int, int]] = [(0, len(self.arr) - 1)]
        while worklist:
            low, high = worklist.pop()
            if low >= high:
                continue
            split = self._partition(low, high)
            # LIFO: push right first so the left range is handled next.
            worklist.append((split + 1, high))
            worklist.append((low, split - 1))

        self._emit(
            tuple(e.with_state(ElementState.SORTED) for e in self.arr),
            kind=StepKind.SORTED,
            step_pointer=6,
            narration="Array is now sorted!",
            partition_narration=f"Quick Sort complete after {self.partitions} partitions",
        )

    def _partition(self, low: int, high: int) -> int:
        arr = self.arr
        bounds = (low, high)
        pivot = arr[high].value
        i = low - 1

        self._emit(
            tag_elements(arr, bounds, high),
            kind=StepKind.PARTITION_START,
            step_pointer=2,
            narration=f"Working with partition [{low} to {high}]",
            partition_narration=(
                f"Working on partition [{low} to {high}]. Since partition size == "
                f"{high - low + 1}, elements inside partition will be sorted."
            ),
            pivot_index=high,
            bounds=bounds,
        )

        for j in range(low, high):
            self._emit(
                tag_elements(arr, bounds, high, (j,)),
                kind=StepKind.COMPARISON,
                step_pointer=3,
                narration=f"Comparing {arr[j].value} with pivot {pivot}",
                partition_narration=f"Comparing elements in partition [{low} to {high}]",
                pivot_index=high,
                comparing=(j,),
                bounds=bounds,
            )
            if arr[j].value <= pivot:
                i += 1
                arr[i], arr[j] = arr[j], arr[i]
                self._emit(
                    self._post_swap(bounds, high, (i, j)),
                    kind=StepKind.SWAP,
                    step_pointer=4,
                    narration=f"Swapped {arr[i].value} and {arr[j].value}",
                    partition_narration="Swapping elements to maintain partition order",
                    pivot_index=high,
                    comparing=(i, j),
                    bounds=bounds,
                )

        split = i + 1
        arr[split], arr[high] = arr[high], arr[split]
        self.partitions += 1
        self._emit(
            self._post_swap(bounds, split),
            kind=StepKind.PIVOT_PLACED,
            step_pointer=5,
            narration=f"Placed pivot {pivot} at position {split}",
            partition_narration=f"Partition {self.partitions} complete",
            pivot_index=split,
            bounds=bounds,
        )
        return split

    def _post_swap(
        self,
        bounds: Tuple[int, int],
        pivot_index: int,
        comparing: Iterable[int] = (),
    ) -> Tuple[Element, ...]:
        if self.retag_swaps:
            return tag_elements(self.arr, bounds, pivot_index, comparing)
        return tuple(self.arr)

    def _emit(
        self,
        elements: Tuple[Element, ...],
        *,
        kind: StepKind,
        step_pointer: int,
        narration: str,
        partition_narration: str,
        pivot_index: Optional[int] = None,
        comparing: Iterable[int] = (),
        bounds: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.steps.append(
            Snapshot(
                elements=elements,
                pivot_index=pivot_index,
                comparing_indices=frozenset(comparing),
                step_pointer=step_pointer,
                narration=narration,
                partition_narration=partition_narration,
                kind=kind,
                bounds=bounds,
            )
        )


# ------------------------- validation ------------------------- #


def _validate_values(values: Any) -> List[Number]:
    if isinstance(values, (str, bytes, dict)) or values is None:
        raise InvalidInputError(f"input must be a sequence of numbers; got {type(values).__name__}")
    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise InvalidInputError(f"input array must be 1-D; got shape {values.shape}")
        values = values.tolist()
    try:
        items = list(values)
    except TypeError as e:
        raise InvalidInputError(
            f"input must be a sequence of numbers; got {type(values).__name__}"
        ) from e

    out: List[Number] = []
    for idx, v in enumerate(items):
        out.append(_coerce_number(idx, v))
    return out


def _coerce_number(idx: int, v: Any) -> Number:
    # bool is an int subclass; reject it explicitly
    if isinstance(v, (bool, np.bool_)):
        raise InvalidInputError(f"element {idx} is a boolean, not a number: {v!r}")
    if isinstance(v, np.integer):
        return int(v)
    if isinstance(v, np.floating):
        v = float(v)
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        if math.isnan(v):
            raise InvalidInputError(f"element {idx} is NaN")
        return v
    # Fraction, Decimal and friends would need converting, which alters values
    raise InvalidInputError(
        f"element {idx} must be an int or float; got {type(v).__name__}: {v!r}"
    )
