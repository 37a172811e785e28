"""
Trace package public API.

Re-export the engine, model and cursor helpers so callers can write:
    from quicktrace.trace import build_trace, advance, retreat, current_snapshot
"""

from .cursor import advance, clamp, current_snapshot, retreat
from .engine import InvalidInputError, build_trace, tag_elements
from .model import (
    ALGORITHM_INFO,
    PSEUDOCODE,
    Element,
    ElementState,
    Snapshot,
    StepKind,
    Trace,
    pseudocode_line,
)

__all__ = [
    "build_trace",
    "tag_elements",
    "InvalidInputError",
    "Element",
    "ElementState",
    "Snapshot",
    "StepKind",
    "Trace",
    "PSEUDOCODE",
    "pseudocode_line",
    "ALGORITHM_INFO",
    "clamp",
    "current_snapshot",
    "advance",
    "retreat",
]
