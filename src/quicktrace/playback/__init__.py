"""
Playback package public API.

    from quicktrace.playback import Player, render_snapshot
"""

from .player import DEFAULT_SPEED_MS, MAX_SPEED_MS, MIN_SPEED_MS, SPEED_STEP_MS, Player
from .render import render_info, render_legend, render_pseudocode, render_snapshot

__all__ = [
    "Player",
    "DEFAULT_SPEED_MS",
    "MIN_SPEED_MS",
    "MAX_SPEED_MS",
    "SPEED_STEP_MS",
    "render_snapshot",
    "render_pseudocode",
    "render_legend",
    "render_info",
]
