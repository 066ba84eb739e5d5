"""
Find-in-conversation support.

Every occurrence of the search term across a linear message list gets a
global sequence number, so "next match" can walk the whole conversation in
order. Message text is split on code fences first; prose and code segments
are counted the same way but rendered differently.
"""

import re
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Sequence

from archive_model import Message, message_text

CODE_FENCE = '```'


class Segment(NamedTuple):
    index: int
    text: str
    is_code: bool


class MatchIndex(NamedTuple):
    total_matches: int
    offsets: tuple[int, ...]


class MatchEntry(NamedTuple):
    sequence: int
    message_id: str
    segment_index: int
    start: int
    end: int


class TextSpan(NamedTuple):
    text: str
    match_id: int | None = None


def _pattern(term: str) -> re.Pattern:
    return re.compile(re.escape(term), re.IGNORECASE)


def split_segments(text: str) -> list[Segment]:
    """Split on code fences; odd-numbered segments are code."""
    return [Segment(i, part, i % 2 == 1) for i, part in enumerate(text.split(CODE_FENCE))]


def count_matches(text: str, term: str) -> int:
    """Count case-insensitive, non-overlapping literal occurrences."""
    if not term or not text:
        return 0
    return len(_pattern(term).findall(text))


def index_matches(texts: Sequence[str], term: str) -> MatchIndex:
    """Total matches and, per text, the number of matches before it."""
    total = 0
    offsets = []
    for text in texts:
        offsets.append(total)
        if term:
            total += sum(count_matches(seg.text, term) for seg in split_segments(text))
    return MatchIndex(total, tuple(offsets))


def index_messages(messages: Sequence[Message], term: str) -> MatchIndex:
    return index_matches([message_text(m) for m in messages], term)


def iter_matches(messages: Sequence[Message], term: str) -> Iterator[MatchEntry]:
    """Yield every occurrence with its global sequence number."""
    if not term:
        return
    pattern = _pattern(term)
    sequence = 0
    for message in messages:
        for seg in split_segments(message_text(message)):
            if not seg.text:
                continue
            for m in pattern.finditer(seg.text):
                yield MatchEntry(sequence, message.id, seg.index, m.start(), m.end())
                sequence += 1


def highlight(text: str, term: str, start_index: int = 0) -> list[TextSpan]:
    """Split text into plain and matched runs; matches carry global ids."""
    if not term or not text:
        return [TextSpan(text)] if text else []

    spans = []
    pos = 0
    match_id = start_index
    for m in _pattern(term).finditer(text):
        if m.start() > pos:
            spans.append(TextSpan(text[pos:m.start()]))
        spans.append(TextSpan(m.group(0), match_id))
        match_id += 1
        pos = m.end()
    if pos < len(text):
        spans.append(TextSpan(text[pos:]))
    return spans


def next_match(current: int, total: int) -> int:
    if total <= 0:
        return 0
    return (current + 1) % total


def previous_match(current: int, total: int) -> int:
    if total <= 0:
        return 0
    return (current - 1) % total


@dataclass
class MatchCursor:
    """Active-match position over a MatchIndex."""

    index: MatchIndex
    current: int = 0

    @classmethod
    def for_messages(cls, messages: Sequence[Message], term: str) -> 'MatchCursor':
        return cls(index_messages(messages, term))

    @property
    def total(self) -> int:
        return self.index.total_matches

    def next(self) -> int:
        self.current = next_match(self.current, self.total)
        return self.current

    def previous(self) -> int:
        self.current = previous_match(self.current, self.total)
        return self.current

    def reset(self) -> None:
        self.current = 0

    def label(self) -> str:
        if not self.total:
            return 'No results'
        return f'{self.current + 1} of {self.total}'
