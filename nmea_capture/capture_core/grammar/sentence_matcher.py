"""Run sentence grammars over capture buffer snapshots."""

from __future__ import annotations

import re
from typing import Mapping, NamedTuple, Optional

from ..constants import DEFAULT_TALKERS, SentenceType
from .grammar_table import Grammar, grammar_table

Span = tuple[int, int]


class SentenceMatch(NamedTuple):
    """A framed sentence: the snapshot it was found in plus field spans.

    ``spans[0]`` covers the whole sentence; ``spans[i]`` for ``i >= 1`` is
    field ``i`` in declared order. Empty fields have zero-length spans.
    """

    sentence_type: SentenceType
    data: bytes
    spans: tuple[Span, ...]

    @property
    def start(self) -> int:
        return self.spans[0][0]

    @property
    def end(self) -> int:
        return self.spans[0][1]

    @property
    def sentence(self) -> bytes:
        return self.data[self.start:self.end]

    def field(self, index: int) -> bytes:
        start, end = self.spans[index]
        return self.data[start:end]

    def is_empty(self, index: int) -> bool:
        start, end = self.spans[index]
        return end <= start


def _to_match(sentence_type: SentenceType, data: bytes, found: re.Match) -> SentenceMatch:
    # A group that did not take part reports (-1, -1); pin it to an
    # empty span at the sentence end so slicing stays well defined.
    end = found.end()
    spans = tuple(
        span if span[0] >= 0 else (end, end)
        for span in (found.span(i) for i in range(found.re.groups + 1))
    )
    return SentenceMatch(sentence_type, data, spans)


class SentenceMatcher:
    """Looks for each sentence type independently in the same snapshot."""

    def __init__(
        self,
        talkers: tuple[str, ...] = DEFAULT_TALKERS,
        grammars: Optional[Mapping[SentenceType, Grammar]] = None,
    ):
        self._grammars = grammars if grammars is not None else grammar_table(tuple(talkers))

    def grammar(self, sentence_type: SentenceType) -> Grammar:
        return self._grammars[sentence_type]

    def match(self, data: bytes, sentence_type: SentenceType) -> Optional[SentenceMatch]:
        """Earliest occurrence of ``sentence_type`` in ``data``, or None."""
        found = self._grammars[sentence_type].pattern.search(data)
        if found is None:
            return None
        return _to_match(sentence_type, data, found)

    def match_all(self, data: bytes, sentence_type: SentenceType) -> list[SentenceMatch]:
        """Every non-overlapping occurrence, oldest first."""
        return [
            _to_match(sentence_type, data, found)
            for found in self._grammars[sentence_type].pattern.finditer(data)
        ]

    def spans(self, data: bytes, sentence_type: SentenceType) -> Optional[list[Span]]:
        """Field spans for ``sentence_type`` (index 0 is the whole match)."""
        result = self.match(data, sentence_type)
        return list(result.spans) if result is not None else None
