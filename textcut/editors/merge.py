"""Segment merging — second pass from elementary ranges to playback segments.

The pass is a left fold over the ranges. ``MergeState`` threads the open
(last) segment, the segments already closed, and the deletion/override flags
of the previous range. Each step either extends the open segment or closes
it and opens a new one back-to-back in output frames.
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Optional

from textcut.manifest import SegmentationConfig
from textcut.models import ElementaryRange, Segment
from textcut.timecode import Frames, seconds_to_frames


@dataclass(frozen=True)
class _Closed:
    """Closed segments as a newest-first linked list, so each step is O(1)."""

    segment: Segment
    rest: Optional["_Closed"] = None


@dataclass(frozen=True)
class MergeState:
    last: Segment | None = None
    closed: _Closed | None = None
    count: int = 0
    had_deletions: bool = False
    had_override: bool = False

    @property
    def next_frame(self) -> Frames:
        return self.last.end_frame if self.last else Frames(0)

    def segments(self) -> list[Segment]:
        out: list[Segment] = []
        node = self.closed
        while node is not None:
            out.append(node.segment)
            node = node.rest
        out.reverse()
        if self.last is not None:
            out.append(self.last)
        return out


def can_extend(
    state: MergeState, rng: ElementaryRange, config: SegmentationConfig
) -> bool:
    """Whether *rng* continues the last segment without a visible cut."""
    last = state.last
    if last is None:
        return False
    if rng.has_video_override or state.had_override:
        return False
    if rng.has_distinct_audio or last.has_distinct_audio:
        return False
    if last.source_id != rng.source_id:
        return False

    threshold = (
        config.deletion_merge_threshold
        if rng.has_word_deletions or state.had_deletions
        else config.pause_merge_threshold
    )
    gap = rng.start - last.source_end
    return rng.start >= last.source_end - config.overlap_tolerance and gap < threshold


def _extend(last: Segment, rng: ElementaryRange) -> Segment:
    sentence_ids = last.sentence_ids
    if rng.sentence_id not in sentence_ids:
        sentence_ids = sentence_ids + (rng.sentence_id,)
    return replace(
        last,
        source_end=rng.end,
        duration_frames=seconds_to_frames(rng.end - last.source_start),
        text=f"{last.text} {rng.text}" if last.text else rng.text,
        sentence_ids=sentence_ids,
    )


def _new_segment(index: int, start_frame: Frames, rng: ElementaryRange) -> Segment:
    # Spoken audio, not the override's video span, decides the length.
    if rng.audio_start is not None and rng.audio_end is not None:
        duration = seconds_to_frames(rng.audio_end - rng.audio_start)
    else:
        duration = seconds_to_frames(rng.end - rng.start)
    return Segment(
        id=f"segment-{index}",
        sentence_ids=(rng.sentence_id,),
        source_id=rng.source_id,
        source_path=rng.source_path,
        source_start=rng.start,
        source_end=rng.end,
        start_frame=start_frame,
        duration_frames=duration,
        text=rng.text,
        audio_source_id=rng.audio_source_id,
        audio_source_path=rng.audio_source_path,
        audio_start=rng.audio_start,
        audio_end=rng.audio_end,
    )


def merge_step(
    state: MergeState, rng: ElementaryRange, config: SegmentationConfig
) -> MergeState:
    if can_extend(state, rng, config):
        return replace(
            state,
            last=_extend(state.last, rng),
            had_deletions=rng.has_word_deletions,
            had_override=rng.has_video_override,
        )

    closed = state.closed
    if state.last is not None:
        closed = _Closed(state.last, closed)
    return MergeState(
        last=_new_segment(state.count, state.next_frame, rng),
        closed=closed,
        count=state.count + 1,
        had_deletions=rng.has_word_deletions,
        had_override=rng.has_video_override,
    )


def merge_ranges(
    ranges: Iterable[ElementaryRange], config: SegmentationConfig | None = None
) -> list[Segment]:
    """Coalesce ordered ranges into the minimal list of contiguous segments."""
    config = config or SegmentationConfig()
    final = reduce(lambda st, rng: merge_step(st, rng, config), ranges, MergeState())
    return final.segments()
