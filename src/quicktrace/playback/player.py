"""
Timed playback over a built trace.

`Player` owns exactly two pieces of state besides the trace: an integer cursor
and a playing flag. It never rebuilds or mutates the trace; a new input means
a new trace, handed over with `load()`.

Manual stepping pauses playback. `tick()` is the unit of autoplay: it moves
one step forward while playing and stops playing once the last step is shown.
`run()` drives `tick()` with a real clock.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from quicktrace.trace.cursor import advance, clamp, current_snapshot, retreat
from quicktrace.trace.model import Snapshot, Trace

MIN_SPEED_MS = 100
MAX_SPEED_MS = 2000
SPEED_STEP_MS = 100
DEFAULT_SPEED_MS = 1000

__all__ = [
    "Player",
    "MIN_SPEED_MS",
    "MAX_SPEED_MS",
    "SPEED_STEP_MS",
    "DEFAULT_SPEED_MS",
]


class Player:
    def __init__(self, trace: Trace, speed_ms: int = DEFAULT_SPEED_MS) -> None:
        self._trace = trace
        self._cursor = 0
        self._playing = False
        self._speed_ms = DEFAULT_SPEED_MS
        self.set_speed(speed_ms)

    # ---- state ----

    @property
    def trace(self) -> Trace:
        return self._trace

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def speed_ms(self) -> int:
        return self._speed_ms

    @property
    def at_start(self) -> bool:
        return self._cursor == 0

    @property
    def at_end(self) -> bool:
        return self._cursor == len(self._trace) - 1

    @property
    def snapshot(self) -> Snapshot:
        return current_snapshot(self._trace, self._cursor)

    # ---- controls ----

    def set_speed(self, speed_ms: int) -> None:
        """Delay between autoplay steps, in ms (100..2000, multiples of 100)."""
        if isinstance(speed_ms, bool) or not isinstance(speed_ms, int):
            raise ValueError(f"speed_ms must be an int; got {speed_ms!r}")
        if not (MIN_SPEED_MS <= speed_ms <= MAX_SPEED_MS) or speed_ms % SPEED_STEP_MS:
            raise ValueError(
                f"speed_ms must be a multiple of {SPEED_STEP_MS} in "
                f"[{MIN_SPEED_MS}, {MAX_SPEED_MS}]; got {speed_ms}"
            )
        self._speed_ms = speed_ms

    def play(self) -> None:
        # Nothing left to reveal; stay paused.
        self._playing = not self.at_end

    def pause(self) -> None:
        self._playing = False

    def toggle(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        self._cursor = 0
        self._playing = False

    def seek(self, cursor: int) -> None:
        self._cursor = clamp(self._trace, cursor)

    def step_forward(self) -> None:
        self._playing = False
        self._cursor = advance(self._trace, self._cursor)

    def step_backward(self) -> None:
        self._playing = False
        self._cursor = retreat(self._trace, self._cursor)

    def load(self, trace: Trace) -> None:
        """Replace the trace wholesale and rewind."""
        self._trace = trace
        self.reset()

    def tick(self) -> bool:
        """Advance one step if playing. Returns True if the cursor moved."""
        if not self._playing:
            return False
        if self.at_end:
            self._playing = False
            return False
        self._cursor = advance(self._trace, self._cursor)
        if self.at_end:
            self._playing = False
        return True

    def run(
        self,
        on_frame: Callable[[Snapshot, int], None],
        *,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> int:
        """
        Autoplay from the current cursor to the last step.

        `on_frame(snapshot, cursor)` is called for the current step and again
        after every move. Returns the number of frames shown.
        """
        sleep = sleep or time.sleep
        self.play()
        on_frame(self.snapshot, self._cursor)
        frames = 1
        while self._playing:
            sleep(self._speed_ms / 1000.0)
            if self.tick():
                on_frame(self.snapshot, self._cursor)
                frames += 1
        return frames
