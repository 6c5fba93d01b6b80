"""Shared test fixtures."""

from pathlib import Path
from typing import Callable, Iterable

import pytest

from textcut.models import EditState, Sentence, Source, TimelineEntry, Word

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SOURCES = [
    Source(id="A", path="/media/a.mp4"),
    Source(id="B", path="/media/b.mp4"),
]


@pytest.fixture
def sample_project_path() -> Path:
    return FIXTURES_DIR / "sample_project.json"


@pytest.fixture
def three_words() -> list[Word]:
    """Three back-to-back words: [0,0.5) [0.5,1.0) [1.0,1.5) on source A."""
    return [
        Word(id="w0", text="Hello", start=0.0, end=0.5, source_id="A"),
        Word(id="w1", text="big", start=0.5, end=1.0, source_id="A"),
        Word(id="w2", text="world.", start=1.0, end=1.5, source_id="A"),
    ]


@pytest.fixture
def sentence(three_words: list[Word]) -> Sentence:
    return Sentence(
        id="s0",
        source_id="A",
        start=0.0,
        end=1.5,
        text="Hello big world.",
        word_ids=tuple(w.id for w in three_words),
    )


@pytest.fixture
def make_state(
    three_words: list[Word], sentence: Sentence
) -> Callable[..., EditState]:
    """Build an EditState around the three-word sentence plus extras."""

    def _make(
        entries: Iterable[TimelineEntry],
        sentences: Iterable[Sentence] = (),
        words: Iterable[Word] = (),
        sources: Iterable[Source] = SOURCES,
    ) -> EditState:
        return EditState.build(
            sources=sources,
            sentences=[sentence, *sentences],
            words=[*three_words, *words],
            timeline=entries,
        )

    return _make
