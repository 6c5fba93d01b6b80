"""Shared data types used across TextCut.

Edit-state entities are frozen so a caller's snapshot cannot change while
the engine reads it. Source time is always float seconds; output time is
always integer frames.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from textcut.timecode import Frames, Seconds


@dataclass(frozen=True)
class Source:
    """A physical media file. Dimensions are filled in lazily by probing."""

    id: str
    path: str
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class Word:
    """A transcribed token with source-relative timing."""

    id: str
    text: str
    start: Seconds
    end: Seconds
    source_id: str | None = None


@dataclass(frozen=True)
class Sentence:
    """An ordered group of words transcribed from one source.

    ``word_ids`` may be empty for sentence-only transcripts, in which case
    ``start``/``end`` are authoritative.
    """

    id: str
    source_id: str
    start: Seconds
    end: Seconds
    text: str = ""
    word_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class VideoOverride:
    """B-roll: an alternate visual source range in that source's time."""

    source_id: str
    start: Seconds
    end: Seconds


@dataclass(frozen=True)
class TimelineEntry:
    """One slot in the user-visible edit order."""

    sentence_id: str
    excluded: bool = False
    excluded_word_ids: frozenset[str] = frozenset()
    text: str = ""
    video_override: VideoOverride | None = None


@dataclass(frozen=True)
class Timeline:
    """Ordered entries; the order is the edit decision list."""

    entries: tuple[TimelineEntry, ...] = ()


@dataclass(frozen=True)
class EditState:
    """The four collections the engine borrows for one computation."""

    sources: Mapping[str, Source] = field(default_factory=dict)
    sentences: Mapping[str, Sentence] = field(default_factory=dict)
    words: Mapping[str, Word] = field(default_factory=dict)
    timeline: Timeline = field(default_factory=Timeline)

    @classmethod
    def build(
        cls,
        sources: Iterable[Source] = (),
        sentences: Iterable[Sentence] = (),
        words: Iterable[Word] = (),
        timeline: Timeline | Iterable[TimelineEntry] = (),
    ) -> "EditState":
        """Index iterables by id. Later duplicates win."""
        if not isinstance(timeline, Timeline):
            timeline = Timeline(entries=tuple(timeline))
        return cls(
            sources={s.id: s for s in sources},
            sentences={s.id: s for s in sentences},
            words={w.id: w for w in words},
            timeline=timeline,
        )


@dataclass(frozen=True)
class ElementaryRange:
    """A maximal run of included time within one timeline entry.

    ``start``/``end`` are in the effective video source's time. The audio
    fields are only set when a video override is active.
    """

    sentence_id: str
    source_id: str
    source_path: str
    start: Seconds
    end: Seconds
    text: str
    has_word_deletions: bool = False
    has_video_override: bool = False
    audio_source_id: str | None = None
    audio_source_path: str | None = None
    audio_start: Seconds | None = None
    audio_end: Seconds | None = None

    @property
    def has_distinct_audio(self) -> bool:
        return self.audio_source_id is not None


@dataclass(frozen=True)
class Segment:
    """A contiguous playback unit positioned in output frames."""

    id: str
    sentence_ids: tuple[str, ...]
    source_id: str
    source_path: str
    source_start: Seconds
    source_end: Seconds
    start_frame: Frames
    duration_frames: Frames
    text: str
    audio_source_id: str | None = None
    audio_source_path: str | None = None
    audio_start: Seconds | None = None
    audio_end: Seconds | None = None

    @property
    def end_frame(self) -> Frames:
        return Frames(self.start_frame + self.duration_frames)

    @property
    def has_distinct_audio(self) -> bool:
        return self.audio_source_id is not None


@dataclass(frozen=True)
class ExportCut:
    """One cut instruction for the external transcoder."""

    source_path: str
    start_time: Seconds
    end_time: Seconds


@dataclass
class ProbeResult:
    """Metadata extracted from a media file via ffprobe."""

    duration: float
    width: int
    height: int
    fps: float
