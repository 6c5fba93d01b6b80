"""Range extraction — first pass from edit state to elementary ranges.

Walks the timeline in entry order and emits the runs of included source
time, resolving word exclusions into sub-sentence ranges and video overrides
into split audio/video ranges. Entries whose references do not resolve are
skipped rather than failing the computation.
"""

import logging

from textcut.models import (
    EditState,
    ElementaryRange,
    Sentence,
    Source,
    TimelineEntry,
)

logger = logging.getLogger(__name__)


def extract_ranges(state: EditState) -> list[ElementaryRange]:
    """Produce elementary ranges for every included entry, in timeline order."""
    ranges, _ = collect_ranges(state)
    return ranges


def collect_ranges(state: EditState) -> tuple[list[ElementaryRange], list[int]]:
    """Like :func:`extract_ranges`, also returning the indices of included
    entries that contributed no playable range."""
    ranges: list[ElementaryRange] = []
    skipped: list[int] = []
    for index, entry in enumerate(state.timeline.entries):
        if entry.excluded:
            continue
        entry_ranges = _entry_ranges(state, index, entry)
        if not entry_ranges:
            skipped.append(index)
        ranges.extend(entry_ranges)
    return ranges, skipped


def _has_positive_span(rng: ElementaryRange) -> bool:
    if rng.end <= rng.start:
        return False
    if rng.has_distinct_audio:
        return rng.audio_end > rng.audio_start
    return True


def _entry_ranges(
    state: EditState, index: int, entry: TimelineEntry
) -> list[ElementaryRange]:
    sentence = state.sentences.get(entry.sentence_id)
    if sentence is None:
        logger.debug("Entry %d: sentence %s not found, skipping", index, entry.sentence_id)
        return []

    override = entry.video_override
    video_source_id = override.source_id if override else sentence.source_id
    video_source = state.sources.get(video_source_id)
    if video_source is None:
        logger.debug("Entry %d: source %s not found, skipping", index, video_source_id)
        return []

    audio_source: Source | None = None
    if override:
        audio_source = state.sources.get(sentence.source_id)
        if audio_source is None:
            logger.debug(
                "Entry %d: audio source %s not found, skipping", index, sentence.source_id
            )
            return []

    excluded = entry.excluded_word_ids.intersection(sentence.word_ids)

    if not excluded or not sentence.word_ids:
        candidates = [_whole_entry_range(entry, sentence, video_source, audio_source)]
    else:
        candidates = _word_run_ranges(
            state, entry, sentence, excluded, video_source, audio_source
        )

    ranges = [r for r in candidates if _has_positive_span(r)]
    if len(ranges) < len(candidates):
        logger.debug(
            "Entry %d: dropped %d zero-length range(s)", index, len(candidates) - len(ranges)
        )
    return ranges


def _whole_entry_range(
    entry: TimelineEntry,
    sentence: Sentence,
    video_source: Source,
    audio_source: Source | None,
) -> ElementaryRange:
    override = entry.video_override
    text = entry.text or sentence.text
    if override is None:
        return ElementaryRange(
            sentence_id=sentence.id,
            source_id=video_source.id,
            source_path=video_source.path,
            start=sentence.start,
            end=sentence.end,
            text=text,
        )
    return ElementaryRange(
        sentence_id=sentence.id,
        source_id=video_source.id,
        source_path=video_source.path,
        start=override.start,
        end=override.end,
        text=text,
        has_video_override=True,
        audio_source_id=audio_source.id,
        audio_source_path=audio_source.path,
        audio_start=sentence.start,
        audio_end=sentence.end,
    )


def _word_run_ranges(
    state: EditState,
    entry: TimelineEntry,
    sentence: Sentence,
    excluded: frozenset[str],
    video_source: Source,
    audio_source: Source | None,
) -> list[ElementaryRange]:
    override = entry.video_override
    ranges: list[ElementaryRange] = []

    run_start: float | None = None
    run_end = 0.0
    run_text: list[str] = []

    def _close_run() -> None:
        nonlocal run_start
        if run_start is None:
            return
        text = " ".join(run_text)
        if override is None:
            ranges.append(
                ElementaryRange(
                    sentence_id=sentence.id,
                    source_id=video_source.id,
                    source_path=video_source.path,
                    start=run_start,
                    end=run_end,
                    text=text,
                    has_word_deletions=True,
                )
            )
        else:
            # B-roll keeps playing the full override while the audio is cut.
            ranges.append(
                ElementaryRange(
                    sentence_id=sentence.id,
                    source_id=video_source.id,
                    source_path=video_source.path,
                    start=override.start,
                    end=override.end,
                    text=text,
                    has_word_deletions=True,
                    has_video_override=True,
                    audio_source_id=audio_source.id,
                    audio_source_path=audio_source.path,
                    audio_start=run_start,
                    audio_end=run_end,
                )
            )
        run_start = None
        run_text.clear()

    for word_id in sentence.word_ids:
        if word_id in excluded:
            _close_run()
            continue
        word = state.words.get(word_id)
        if word is None:
            logger.debug("Sentence %s: word %s not found, dropping", sentence.id, word_id)
            continue
        if run_start is None:
            run_start = word.start
        run_end = word.end
        run_text.append(word.text)

    _close_run()
    return ranges
