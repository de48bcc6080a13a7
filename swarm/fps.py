"""Frames-per-second counter over a sliding window of frame timestamps."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable

DEFAULT_WINDOW = 64


class FpsCounter:
    """Tracks recent frame times and the total number of frames.

    Call update() once per frame before reading fps().
    """

    def __init__(
        self,
        max_frames: int = DEFAULT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._frame_times: deque[float] = deque(maxlen=max_frames)
        self._clock = clock
        self.frame = 0

    def update(self) -> None:
        self._frame_times.append(self._clock())
        self.frame += 1

    def fps(self) -> int:
        """Frames in the window divided by the window's time span.

        0 until two frames are recorded or while the span is zero.
        """
        if len(self._frame_times) < 2:
            return 0
        span = self._frame_times[-1] - self._frame_times[0]
        if span <= 0:
            return 0
        return int(len(self._frame_times) / span)
