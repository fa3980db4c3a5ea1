from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Writing:
    number: int
    path: Path
    text: str


@dataclass(frozen=True)
class DecayStep:
    elapsed_seconds: float
    percentage: int
    color_index: int
    color: str
    expired: bool
    keystroke_at: float | None = None
