"""JSON project schema — the contract between CLI/API and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from textcut.analyzers.sentences import split_sentences
from textcut.models import (
    EditState,
    Segment,
    Sentence,
    Source,
    Timeline,
    TimelineEntry,
    VideoOverride,
    Word,
)
from textcut.timeline_ops import timeline_from_sentences


@dataclass
class SegmentationConfig:
    """Thresholds for coalescing elementary ranges into segments.

    ``pause_merge_threshold`` lets natural speech pauses play through as one
    segment; ``deletion_merge_threshold`` applies next to a deleted word so
    the removal produces a visible cut.
    """

    pause_merge_threshold: float = 10.0
    deletion_merge_threshold: float = 0.1
    overlap_tolerance: float = 0.05


@dataclass
class Manifest:
    """Top-level project document."""

    state: EditState
    version: str = "1"
    segmentation: SegmentationConfig = field(default_factory=SegmentationConfig)
    probe_sources: bool = False


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ValueError(f"{where} must contain '{key}'")
    return data[key]


def _parse_source(data: dict[str, Any]) -> Source:
    width = data.get("width")
    height = data.get("height")
    return Source(
        id=str(_require(data, "id", "Source")),
        path=str(_require(data, "path", "Source")),
        width=int(width) if width is not None else None,
        height=int(height) if height is not None else None,
    )


def _parse_word(data: dict[str, Any]) -> Word:
    return Word(
        id=str(_require(data, "id", "Word")),
        text=str(data.get("text", "")),
        start=float(_require(data, "start", "Word")),
        end=float(_require(data, "end", "Word")),
        source_id=data.get("source_id"),
    )


def _parse_sentence(data: dict[str, Any]) -> Sentence:
    return Sentence(
        id=str(_require(data, "id", "Sentence")),
        source_id=str(_require(data, "source_id", "Sentence")),
        start=float(_require(data, "start", "Sentence")),
        end=float(_require(data, "end", "Sentence")),
        text=str(data.get("text", "")),
        word_ids=tuple(str(w) for w in data.get("word_ids", [])),
    )


def parse_video_override(data: dict[str, Any] | None) -> VideoOverride | None:
    if data is None:
        return None
    return VideoOverride(
        source_id=str(_require(data, "source_id", "Video override")),
        start=float(_require(data, "start", "Video override")),
        end=float(_require(data, "end", "Video override")),
    )


def _parse_entry(data: dict[str, Any]) -> TimelineEntry:
    return TimelineEntry(
        sentence_id=str(_require(data, "sentence_id", "Timeline entry")),
        excluded=bool(data.get("excluded", False)),
        excluded_word_ids=frozenset(str(w) for w in data.get("excluded_word_ids", [])),
        text=str(data.get("text", "")),
        video_override=parse_video_override(data.get("video_override")),
    )


@dataclass
class TranscriptlessSpan:
    """Footage with no words that still needs a timeline slot."""

    source_id: str
    start: float
    end: float
    text: str = ""


def _parse_transcriptless(data: dict[str, Any]) -> TranscriptlessSpan:
    return TranscriptlessSpan(
        source_id=str(_require(data, "source_id", "Transcriptless span")),
        start=float(data.get("start", 0.0)),
        end=float(_require(data, "end", "Transcriptless span")),
        text=str(data.get("text", "")),
    )


def _sentences_from_words(
    sources: list[Source],
    words: list[Word],
    transcriptless: list[TranscriptlessSpan],
) -> list[Sentence]:
    """Split a word-only transcript into sentences, one source at a time.

    Sources are visited in project order. A source without words gets a
    single word-less sentence when a transcriptless span is declared for it.
    """
    by_source: dict[str, list[Word]] = {s.id: [] for s in sources}
    for w in words:
        if w.source_id is None:
            raise ValueError(f"Word '{w.id}' needs a 'source_id' when no sentences are given")
        by_source.setdefault(w.source_id, []).append(w)
    spans = {t.source_id: t for t in transcriptless}

    sentences: list[Sentence] = []
    for source_id, source_words in by_source.items():
        span = spans.get(source_id)
        sentences.extend(
            split_sentences(
                source_id,
                source_words,
                start_index=len(sentences),
                fallback_text=span.text if span else "",
                fallback_span=(span.start, span.end) if span else None,
            )
        )
    return sentences


def parse_manifest(data: dict[str, Any]) -> Manifest:
    """Validate a decoded project document and build a Manifest."""
    if not isinstance(data, dict):
        raise ValueError("Project must be a JSON object")
    if "sources" not in data or ("sentences" not in data and "words" not in data):
        raise ValueError("Project must contain 'sources' and 'sentences' (or 'words') fields")

    sources = [_parse_source(s) for s in data["sources"]]
    words = [_parse_word(w) for w in data.get("words", [])]
    if "sentences" in data:
        sentences = [_parse_sentence(s) for s in data["sentences"]]
    else:
        transcriptless = [_parse_transcriptless(t) for t in data.get("transcriptless", [])]
        sentences = _sentences_from_words(sources, words, transcriptless)

    if "timeline" in data:
        timeline = Timeline(entries=tuple(_parse_entry(e) for e in data["timeline"]))
    else:
        timeline = timeline_from_sentences(sentences)

    segmentation = (
        SegmentationConfig(**{k: float(v) for k, v in dict(data["segmentation"]).items()})
        if "segmentation" in data
        else SegmentationConfig()
    )

    return Manifest(
        version=str(data.get("version", "1")),
        state=EditState.build(
            sources=sources, sentences=sentences, words=words, timeline=timeline
        ),
        segmentation=segmentation,
        probe_sources=bool(data.get("probe_sources", False)),
    )


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a project from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    return parse_manifest(data)


def segment_to_dict(seg: Segment) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": seg.id,
        "sentence_ids": list(seg.sentence_ids),
        "source_id": seg.source_id,
        "source_path": seg.source_path,
        "source_start": seg.source_start,
        "source_end": seg.source_end,
        "start_frame": seg.start_frame,
        "duration_frames": seg.duration_frames,
        "text": seg.text,
    }
    if seg.has_distinct_audio:
        d["audio_source_id"] = seg.audio_source_id
        d["audio_source_path"] = seg.audio_source_path
        d["audio_start"] = seg.audio_start
        d["audio_end"] = seg.audio_end
    return d
