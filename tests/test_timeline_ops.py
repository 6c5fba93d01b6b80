"""Tests for pure timeline edit operations."""

from dataclasses import fields

import pytest

from textcut.models import Sentence, Timeline, TimelineEntry, VideoOverride
from textcut.timeline_ops import (
    active_entries,
    delete_sentences,
    delete_words,
    reorder_entry,
    restore_sentences,
    restore_words,
    set_entry_excluded,
    set_video_override,
    timeline_from_sentences,
    toggle_word_excluded,
)

SENTENCES = [
    Sentence(id="a", source_id="S", start=0.0, end=1.0, text="First.", word_ids=("a0", "a1")),
    Sentence(id="b", source_id="S", start=1.0, end=2.0, text="Second.", word_ids=("b0",)),
    Sentence(id="c", source_id="S", start=2.0, end=3.0, text="Third."),
]


@pytest.fixture
def timeline() -> Timeline:
    return timeline_from_sentences(SENTENCES)


def _order(tl: Timeline) -> list[str]:
    return [e.sentence_id for e in tl.entries]


class TestTimelineFromSentences:
    def test_one_included_entry_per_sentence(self, timeline):
        assert _order(timeline) == ["a", "b", "c"]
        assert all(not e.excluded for e in timeline.entries)
        assert timeline.entries[1].text == "Second."

    def test_timeline_holds_only_entries(self):
        assert [f.name for f in fields(Timeline)] == ["entries"]


class TestReorder:
    def test_move_forward(self, timeline):
        assert _order(reorder_entry(timeline, 0, 2)) == ["b", "c", "a"]

    def test_move_backward(self, timeline):
        assert _order(reorder_entry(timeline, 2, 0)) == ["c", "a", "b"]

    def test_input_untouched(self, timeline):
        reorder_entry(timeline, 0, 2)
        assert _order(timeline) == ["a", "b", "c"]

    def test_to_index_is_clamped(self, timeline):
        assert _order(reorder_entry(timeline, 0, 99)) == ["b", "c", "a"]

    def test_bad_from_index(self, timeline):
        with pytest.raises(IndexError):
            reorder_entry(timeline, 5, 0)


class TestExclusion:
    def test_set_entry_excluded(self, timeline):
        tl = set_entry_excluded(timeline, "b", True)
        assert [e.sentence_id for e in active_entries(tl)] == ["a", "c"]
        assert active_entries(set_entry_excluded(tl, "b", False)) == list(timeline.entries)

    def test_unknown_sentence_is_noop(self, timeline):
        assert set_entry_excluded(timeline, "zzz", True) == timeline

    def test_batch_delete_and_restore(self, timeline):
        tl = delete_sentences(timeline, ["a", "c"])
        assert _order(Timeline(entries=tuple(active_entries(tl)))) == ["b"]
        assert restore_sentences(tl, ["a", "c"]) == timeline


class TestWordEdits:
    def test_toggle_twice_restores(self, timeline):
        tl = toggle_word_excluded(timeline, "a", "a1")
        assert tl.entries[0].excluded_word_ids == {"a1"}
        assert toggle_word_excluded(tl, "a", "a1") == timeline

    def test_delete_words_ignores_foreign_ids(self, timeline):
        by_id = {s.id: s for s in SENTENCES}
        tl = delete_words(timeline, by_id, "a", ["a0", "b0", "nope"])
        assert tl.entries[0].excluded_word_ids == {"a0"}
        assert tl.entries[1].excluded_word_ids == frozenset()

    def test_delete_words_unknown_sentence(self, timeline):
        assert delete_words(timeline, {}, "a", ["a0"]) == timeline

    def test_restore_words(self, timeline):
        by_id = {s.id: s for s in SENTENCES}
        tl = delete_words(timeline, by_id, "a", ["a0", "a1"])
        tl = restore_words(tl, "a", ["a0"])
        assert tl.entries[0].excluded_word_ids == {"a1"}


class TestVideoOverride:
    def test_set_and_clear(self, timeline):
        override = VideoOverride(source_id="B", start=1.0, end=4.0)
        tl = set_video_override(timeline, "c", override)
        assert tl.entries[2].video_override == override
        assert set_video_override(tl, "c", None) == timeline

    def test_entries_are_entry_objects(self, timeline):
        assert all(isinstance(e, TimelineEntry) for e in timeline.entries)
