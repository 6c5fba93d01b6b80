"""Read-only helpers over a computed segment list."""

from textcut.models import Segment
from textcut.timecode import Frames, Seconds, frames_to_seconds


def total_duration_frames(segments: list[Segment]) -> Frames:
    """Output length in frames; 1 for an empty timeline so callers can divide by it."""
    if not segments:
        return Frames(1)
    return segments[-1].end_frame


def total_duration_seconds(segments: list[Segment]) -> Seconds:
    if not segments:
        return Seconds(0.0)
    return frames_to_seconds(segments[-1].end_frame)


def segment_at_frame(segments: list[Segment], frame: int) -> Segment | None:
    for seg in segments:
        if seg.start_frame <= frame < seg.end_frame:
            return seg
    return None


def source_time_at_frame(
    segments: list[Segment], frame: int
) -> tuple[Segment, Seconds] | None:
    """Map an output frame to the segment and the source position to seek to.

    For B-roll segments the position is in the audio source's time, since
    audio drives timing there.
    """
    seg = segment_at_frame(segments, frame)
    if seg is None:
        return None
    base = seg.audio_start if seg.audio_start is not None else seg.source_start
    return seg, Seconds(base + frames_to_seconds(frame - seg.start_frame))


def thumbnail_key(segment: Segment) -> tuple[str, Seconds]:
    return segment.source_path, segment.source_start
