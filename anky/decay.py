from __future__ import annotations

import math
import threading
import time
from typing import Callable

from .models import DecayStep

DEFAULT_DECAY_SECONDS = 8.0

# violet, indigo, blue, green, yellow, orange, red
LIFE_COLORS: tuple[str, ...] = (
    "#9400d3",
    "#4b0082",
    "#0000ff",
    "#00ff00",
    "#ffff00",
    "#ffa500",
    "#ff0000",
)

Clock = Callable[[], float]


def percentage_for(elapsed_seconds: float, threshold_seconds: float) -> int:
    elapsed = max(0.0, float(elapsed_seconds))
    percentage = 100 - math.floor(elapsed * 100 / threshold_seconds)
    return max(0, min(100, percentage))


def color_index_for(elapsed_seconds: float, threshold_seconds: float, steps: int = len(LIFE_COLORS)) -> int:
    elapsed = max(0.0, float(elapsed_seconds))
    index = math.floor(elapsed / threshold_seconds * steps)
    return max(0, min(steps - 1, index))


def decay_step(
    elapsed_seconds: float,
    threshold_seconds: float = DEFAULT_DECAY_SECONDS,
    keystroke_at: float | None = None,
) -> DecayStep:
    index = color_index_for(elapsed_seconds, threshold_seconds)
    return DecayStep(
        elapsed_seconds=elapsed_seconds,
        percentage=percentage_for(elapsed_seconds, threshold_seconds),
        color_index=index,
        color=LIFE_COLORS[index],
        expired=elapsed_seconds >= threshold_seconds,
        keystroke_at=keystroke_at,
    )


def full_step() -> DecayStep:
    return DecayStep(elapsed_seconds=0.0, percentage=100, color_index=0, color=LIFE_COLORS[0], expired=False)


class WritingSession:
    """Shared state between the Tk thread and the keystroke monitor.

    Every read and write goes through ``_lock``. A session expires at most once;
    after that ``tick`` keeps returning ``None`` until ``reset``.
    """

    def __init__(self, threshold_seconds: float = DEFAULT_DECAY_SECONDS, clock: Clock = time.monotonic):
        if threshold_seconds <= 0:
            raise ValueError("threshold_seconds must be positive")
        self.threshold_seconds = float(threshold_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._text = ""
        self._last_keystroke: float | None = None
        self._timer_started = False
        self._expired = False

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def last_keystroke(self) -> float | None:
        with self._lock:
            return self._last_keystroke

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._timer_started and not self._expired

    @property
    def is_expired(self) -> bool:
        with self._lock:
            return self._expired

    def record_keystroke(self, text: str) -> bool:
        """Store the buffer and return True when the monitor has to be started."""
        with self._lock:
            if self._expired:
                return False
            self._text = text
            self._last_keystroke = self._clock()
            if self._timer_started:
                return False
            self._timer_started = True
            return True

    def tick(self) -> DecayStep | None:
        with self._lock:
            if not self._timer_started or self._expired or self._last_keystroke is None:
                return None
            elapsed = max(0.0, self._clock() - self._last_keystroke)
            step = decay_step(elapsed, self.threshold_seconds, keystroke_at=self._last_keystroke)
            if step.expired:
                self._expired = True
            return step

    def reset(self) -> None:
        with self._lock:
            self._text = ""
            self._last_keystroke = None
            self._timer_started = False
            self._expired = False
