"""
Terminal rendering of snapshots with `rich`.

Pure presentation: every function takes a snapshot (or nothing) and returns a
rich renderable. No trace state is kept here.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from quicktrace.trace.model import ALGORITHM_INFO, PSEUDOCODE, ElementState, Snapshot

STATE_STYLES: Dict[ElementState, str] = {
    ElementState.PIVOT: "bold yellow",
    ElementState.COMPARING: "bold blue",
    ElementState.ACTIVE: "sky_blue1",
    ElementState.SORTED: "green",
    ElementState.DEFAULT: "grey50",
}
HIGHLIGHT_STYLE = "on deep_pink4"
BAR_WIDTH = 40

__all__ = [
    "STATE_STYLES",
    "render_bars",
    "render_pseudocode",
    "render_legend",
    "render_info",
    "render_snapshot",
]


def render_bars(snapshot: Snapshot, *, width: int = BAR_WIDTH) -> Table:
    """One horizontal bar per element, length proportional to its value."""
    finite = [abs(v) for v in snapshot.values if math.isfinite(v)]
    top = max(finite, default=0) or 1
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("idx", justify="right", style="dim")
    table.add_column("value", justify="right")
    table.add_column("bar")
    for idx, el in enumerate(snapshot.elements):
        style = STATE_STYLES[el.state]
        if not math.isfinite(el.value):
            length = width
        elif el.value:
            length = max(1, round(abs(el.value) / top * width))
        else:
            length = 0
        table.add_row(str(idx), Text(str(el.value), style=style), Text("█" * length, style=style))
    return table


def render_pseudocode(step_pointer: Optional[int] = None) -> Panel:
    text = Text()
    for lineno, line in enumerate(PSEUDOCODE, start=1):
        style = HIGHLIGHT_STYLE if lineno == step_pointer else ""
        text.append(line, style=style)
        if lineno < len(PSEUDOCODE):
            text.append("\n")
    return Panel(text, title="Pseudocode", border_style="white")


def render_legend() -> Text:
    legend = Text()
    for i, guide in enumerate(ALGORITHM_INFO["color_guide"]):
        if i:
            legend.append("   ")
        legend.append("■ ", style=STATE_STYLES[ElementState(guide["state"])])
        legend.append(guide["meaning"])
    return legend


def render_info() -> Panel:
    info = ALGORITHM_INFO
    tc = info["time_complexity"]
    table = Table(show_header=True, box=None)
    table.add_column("Time Complexity", style="bold")
    table.add_column("Key Characteristics", style="bold")
    rows = [
        f"Average: {tc['average']}",
        f"Worst: {tc['worst']}",
        f"Best: {tc['best']}",
        f"Space: {info['space_complexity']}",
    ]
    for left, right in zip(rows, info["characteristics"]):
        table.add_row(left, f"• {right}")
    return Panel(Group(Text(info["description"]), Text(), table), title=info["title"])


def render_snapshot(
    snapshot: Snapshot,
    *,
    cursor: Optional[int] = None,
    total: Optional[int] = None,
) -> Group:
    """Full frame: bars, partition note, pseudocode, narration and legend."""
    title = "Quick Sort Visualization"
    if cursor is not None and total is not None:
        title += f"  (step {cursor + 1}/{total})"
    return Group(
        Panel(render_bars(snapshot), title=title),
        Panel(Text(snapshot.partition_narration), border_style="green"),
        render_pseudocode(snapshot.step_pointer),
        Text(snapshot.narration, style="bold", justify="center"),
        render_legend(),
    )
