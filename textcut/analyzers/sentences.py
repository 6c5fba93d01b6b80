"""Sentence extraction — groups transcribed words into reorderable sentences."""

import re

from textcut.models import Sentence, Word

_SENTENCE_END_RE = re.compile(r"[.!?]$")


def split_sentences(
    source_id: str,
    words: list[Word],
    start_index: int = 0,
    fallback_text: str = "",
    fallback_span: tuple[float, float] | None = None,
) -> list[Sentence]:
    """Split an ordered word list into sentences on terminal punctuation.

    A word whose stripped text ends in ``.``, ``!`` or ``?`` closes the
    current sentence; trailing words without terminal punctuation form a
    final sentence. Ids are ``sentence-N`` counting from *start_index*.

    When *words* is empty and *fallback_span* is given, a single word-less
    sentence is returned so silent or untranscribed footage still gets a
    timeline slot.
    """
    if not words:
        if fallback_span is None:
            return []
        start, end = fallback_span
        return [
            Sentence(
                id=f"sentence-{start_index}",
                source_id=source_id,
                start=start,
                end=end,
                text=fallback_text,
            )
        ]

    sentences: list[Sentence] = []
    index = start_index
    current: list[Word] = []

    def _flush() -> None:
        nonlocal index
        if not current:
            return
        sentences.append(
            Sentence(
                id=f"sentence-{index}",
                source_id=source_id,
                start=current[0].start,
                end=current[-1].end,
                text=" ".join(w.text for w in current),
                word_ids=tuple(w.id for w in current),
            )
        )
        index += 1
        current.clear()

    for word in words:
        current.append(word)
        if _SENTENCE_END_RE.search(word.text.strip()):
            _flush()

    _flush()
    return sentences
