"""
Read-only navigation over a built trace.

The consumer owns nothing but an integer cursor. These helpers never raise for
an out-of-range cursor: they clamp to [0, len(trace) - 1].

Public API (stable):
    clamp(trace, cursor) -> int
    current_snapshot(trace, cursor) -> Snapshot
    advance(trace, cursor) -> int
    retreat(trace, cursor) -> int
"""

from __future__ import annotations

from .model import Snapshot, Trace

__all__ = ["clamp", "current_snapshot", "advance", "retreat"]


def clamp(trace: Trace, cursor: int) -> int:
    last = len(trace) - 1
    if cursor < 0:
        return 0
    if cursor > last:
        return last
    return int(cursor)


def current_snapshot(trace: Trace, cursor: int) -> Snapshot:
    """Return the snapshot at `cursor` (clamped into range)."""
    return trace[clamp(trace, cursor)]


def advance(trace: Trace, cursor: int) -> int:
    """Next cursor; stays put on the last step."""
    return clamp(trace, clamp(trace, cursor) + 1)


def retreat(trace: Trace, cursor: int) -> int:
    """Previous cursor; stays put on step 0."""
    return max(clamp(trace, cursor) - 1, 0)
