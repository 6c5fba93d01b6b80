"""Conversion between source time (seconds) and output time (frames)."""

import math
from typing import NewType

Seconds = NewType("Seconds", float)
Frames = NewType("Frames", int)

FPS = 30


def seconds_to_frames(seconds: float) -> Frames:
    """Quantize a duration or position in seconds to whole output frames.

    Halves round away from zero so that 0.5-frame boundaries land the same
    way the player schedules them. Every duration derived from a time delta
    must go through here, otherwise drift accumulates over a long timeline.
    """
    scaled = seconds * FPS
    if scaled < 0:
        return Frames(-math.floor(-scaled + 0.5))
    return Frames(math.floor(scaled + 0.5))


def frames_to_seconds(frames: int) -> Seconds:
    return Seconds(frames / FPS)


def format_time(seconds: float) -> str:
    """Format seconds as ``M:SS`` for display (no hours component)."""
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02d}"


def format_frames(frames: int) -> str:
    return format_time(frames_to_seconds(frames))
