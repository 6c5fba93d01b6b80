"""Pure edit operations on a Timeline.

Every function returns a new Timeline; the input is never modified. Edits
that name an unknown sentence leave the timeline unchanged.
"""

from dataclasses import replace
from typing import Callable, Iterable, Mapping

from textcut.models import Sentence, Timeline, TimelineEntry, VideoOverride


def timeline_from_sentences(sentences: Iterable[Sentence]) -> Timeline:
    """One included entry per sentence, in the given order."""
    return Timeline(
        entries=tuple(TimelineEntry(sentence_id=s.id, text=s.text) for s in sentences)
    )


def active_entries(timeline: Timeline) -> list[TimelineEntry]:
    return [e for e in timeline.entries if not e.excluded]


def _map_entries(
    timeline: Timeline,
    sentence_ids: set[str],
    fn: Callable[[TimelineEntry], TimelineEntry],
) -> Timeline:
    return replace(
        timeline,
        entries=tuple(
            fn(e) if e.sentence_id in sentence_ids else e for e in timeline.entries
        ),
    )


def reorder_entry(timeline: Timeline, from_index: int, to_index: int) -> Timeline:
    """Move the entry at ``from_index`` so it ends up at ``to_index``."""
    entries = list(timeline.entries)
    if not 0 <= from_index < len(entries):
        raise IndexError(f"from_index {from_index} out of range (0..{len(entries) - 1})")
    moved = entries.pop(from_index)
    to_index = max(0, min(to_index, len(entries)))
    entries.insert(to_index, moved)
    return replace(timeline, entries=tuple(entries))


def set_entry_excluded(timeline: Timeline, sentence_id: str, excluded: bool) -> Timeline:
    return _map_entries(timeline, {sentence_id}, lambda e: replace(e, excluded=excluded))


def delete_sentences(timeline: Timeline, sentence_ids: Iterable[str]) -> Timeline:
    return _map_entries(timeline, set(sentence_ids), lambda e: replace(e, excluded=True))


def restore_sentences(timeline: Timeline, sentence_ids: Iterable[str]) -> Timeline:
    return _map_entries(timeline, set(sentence_ids), lambda e: replace(e, excluded=False))


def toggle_word_excluded(timeline: Timeline, sentence_id: str, word_id: str) -> Timeline:
    def toggle(e: TimelineEntry) -> TimelineEntry:
        return replace(e, excluded_word_ids=e.excluded_word_ids ^ {word_id})

    return _map_entries(timeline, {sentence_id}, toggle)


def delete_words(
    timeline: Timeline,
    sentences: Mapping[str, Sentence],
    sentence_id: str,
    word_ids: Iterable[str],
) -> Timeline:
    """Exclude words from a sentence's entry, ignoring ids it does not own."""
    sentence = sentences.get(sentence_id)
    if sentence is None:
        return timeline
    owned = set(word_ids) & set(sentence.word_ids)
    return _map_entries(
        timeline,
        {sentence_id},
        lambda e: replace(e, excluded_word_ids=e.excluded_word_ids | owned),
    )


def restore_words(timeline: Timeline, sentence_id: str, word_ids: Iterable[str]) -> Timeline:
    restored = frozenset(word_ids)
    return _map_entries(
        timeline,
        {sentence_id},
        lambda e: replace(e, excluded_word_ids=e.excluded_word_ids - restored),
    )


def set_video_override(
    timeline: Timeline, sentence_id: str, override: VideoOverride | None
) -> Timeline:
    """Attach B-roll to a sentence's entry, or clear it with ``None``."""
    return _map_entries(timeline, {sentence_id}, lambda e: replace(e, video_override=override))
