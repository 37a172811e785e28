"""
Trace data model: elements, snapshots and the trace container.

Every type here is immutable. A `Snapshot` owns its own tuple of `Element`
values, so later swaps in the engine's working array can never reach back into
an already-emitted step.

Public API (stable):
    ElementState, StepKind, Element, Snapshot, Trace
    PSEUDOCODE, pseudocode_line(step) -> str
    ALGORITHM_INFO
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple, Union, overload

Number = Union[int, float]

__all__ = [
    "Number",
    "ElementState",
    "StepKind",
    "Element",
    "Snapshot",
    "Trace",
    "PSEUDOCODE",
    "pseudocode_line",
    "ALGORITHM_INFO",
]


# Reference listing shown next to the array; `Snapshot.step_pointer` is a
# 1-based line number into it. The tie-break wording is narrative only: the
# engine always compares with `<=`.
PSEUDOCODE: Tuple[str, ...] = (
    "for each (unsorted) partition",
    "  set first element as pivot",
    "  storeIndex = pivotIndex+1",
    "  for i = pivotIndex+1 to rightmostIndex",
    "    if ((a[i] < a[pivot]) or (equal but 50% lucky))",
    "      swap(i, storeIndex); ++storeIndex",
    "  swap(pivot, storeIndex-1)",
)


def pseudocode_line(step: int) -> str:
    """Return the listing line for a 1-based step pointer ("" if out of range)."""
    if 1 <= step <= len(PSEUDOCODE):
        return PSEUDOCODE[step - 1]
    return ""


ALGORITHM_INFO: Dict[str, Any] = {
    "title": "Quick Sort Algorithm",
    "description": (
        "Quick Sort is a highly efficient, comparison-based sorting algorithm "
        "that uses a divide-and-conquer strategy."
    ),
    "time_complexity": {
        "average": "O(n log n)",
        "worst": "O(n²)",
        "best": "O(n log n)",
    },
    "space_complexity": "O(log n)",
    "characteristics": [
        "Uses divide-and-conquer strategy",
        "In-place sorting algorithm",
        "Unstable sorting algorithm",
        "Recursive algorithm",
    ],
    "color_guide": [
        {"state": "pivot", "color": "yellow", "meaning": "Pivot Element"},
        {"state": "comparing", "color": "blue", "meaning": "Currently Comparing"},
        {"state": "active", "color": "light blue", "meaning": "Current Partition"},
        {"state": "sorted", "color": "green", "meaning": "Sorted Position"},
    ],
}


class ElementState(str, Enum):
    DEFAULT = "default"
    PIVOT = "pivot"
    COMPARING = "comparing"
    SORTED = "sorted"
    ACTIVE = "active"


class StepKind(str, Enum):
    INITIAL = "initial"
    PARTITION_START = "partition_start"
    COMPARISON = "comparison"
    SWAP = "swap"
    PIVOT_PLACED = "pivot_placed"
    SORTED = "sorted"


@dataclass(frozen=True)
class Element:
    value: Number
    state: ElementState = ElementState.DEFAULT

    def with_state(self, state: ElementState) -> "Element":
        if state is self.state:
            return self
        return Element(self.value, state)


@dataclass(frozen=True)
class Snapshot:
    """
    One immutable step of a trace.

    Attributes
    ----------
    elements : tuple[Element, ...]
        Full array state at this moment, tags included.
    pivot_index : int | None
        Position of the active pivot, or None when no pivot is highlighted.
    comparing_indices : frozenset[int]
        Positions under comparison (or just swapped).
    step_pointer : int
        1-based line in `PSEUDOCODE` this step corresponds to.
    narration : str
        One-line description of what just happened.
    partition_narration : str
        Description at the level of the partition being worked on.
    kind : StepKind
        Which point of the algorithm emitted this step.
    bounds : tuple[int, int] | None
        (low, high) of the partition being narrated; None for the initial and
        terminal steps.
    """

    elements: Tuple[Element, ...]
    pivot_index: Optional[int]
    comparing_indices: FrozenSet[int]
    step_pointer: int
    narration: str
    partition_narration: str
    kind: StepKind
    bounds: Optional[Tuple[int, int]] = None

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def values(self) -> List[Number]:
        return [e.value for e in self.elements]

    @property
    def states(self) -> List[ElementState]:
        return [e.state for e in self.elements]

    @property
    def code_line(self) -> str:
        return pseudocode_line(self.step_pointer)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view (indices sorted, enums as their string values)."""
        return {
            "kind": self.kind.value,
            "values": self.values,
            "states": [s.value for s in self.states],
            "pivot_index": self.pivot_index,
            "comparing": sorted(self.comparing_indices),
            "step_pointer": self.step_pointer,
            "narration": self.narration,
            "partition_narration": self.partition_narration,
            "bounds": list(self.bounds) if self.bounds is not None else None,
        }


class Trace(Sequence):
    """
    Finite, immutable, randomly indexable sequence of snapshots.

    Built once by `build_trace`; consumers only read from it. Equality is
    structural over the input and every snapshot.
    """

    __slots__ = ("_snapshots", "_input", "_partitions")

    def __init__(
        self,
        snapshots: Sequence[Snapshot],
        input_values: Sequence[Number],
        partitions: int,
    ) -> None:
        snaps = tuple(snapshots)
        if len(snaps) < 2:
            raise ValueError("a trace holds at least an initial and a terminal snapshot")
        self._snapshots: Tuple[Snapshot, ...] = snaps
        self._input: Tuple[Number, ...] = tuple(input_values)
        self._partitions = int(partitions)

    @overload
    def __getitem__(self, index: int) -> Snapshot: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Snapshot, ...]: ...

    def __getitem__(self, index):
        return self._snapshots[index]

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Trace):
            return NotImplemented
        return (
            self._input == other._input
            and self._partitions == other._partitions
            and self._snapshots == other._snapshots
        )

    def __hash__(self) -> int:
        return hash((self._input, self._partitions, self._snapshots))

    def __repr__(self) -> str:
        return f"Trace(n={len(self._input)}, steps={len(self._snapshots)}, partitions={self._partitions})"

    @property
    def input_values(self) -> Tuple[Number, ...]:
        return self._input

    @property
    def partitions(self) -> int:
        return self._partitions

    @property
    def first(self) -> Snapshot:
        return self._snapshots[0]

    @property
    def last(self) -> Snapshot:
        return self._snapshots[-1]

    def count_kind(self, kind: StepKind) -> int:
        """Number of snapshots of the given kind."""
        return sum(1 for s in self._snapshots if s.kind is kind)

    def to_records(self) -> List[Dict[str, Any]]:
        return [dict(step=i, **s.to_dict()) for i, s in enumerate(self._snapshots)]
