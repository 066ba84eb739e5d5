"""Tests for find-in-conversation match numbering and navigation."""

from __future__ import annotations

import pytest

from conftest import make_record, raw_message
from linearize import linearize
from match_index import (
    MatchCursor, TextSpan, count_matches, highlight, index_matches, index_messages, iter_matches,
    next_match, previous_match, split_segments,
)


def test_scenario_hi_matches_once(hello_record) -> None:
    result = index_messages(linearize(hello_record), 'hi')

    assert result.total_matches == 1
    assert result.offsets == (0, 0)


def test_count_is_case_insensitive_substring() -> None:
    assert count_matches('Hello hello HELLO', 'hello') == 3
    assert count_matches('this', 'hi') == 1
    assert count_matches('aaaa', 'aa') == 2


def test_empty_term_or_text_counts_zero() -> None:
    assert count_matches('anything', '') == 0
    assert count_matches('', 'x') == 0
    assert index_matches(['a', 'b'], '') == (0, (0, 0))


def test_special_characters_are_literal() -> None:
    assert count_matches('cost is $5.00 (approx) [a+b]', '$5.00') == 1
    assert count_matches('a.b axb', 'a.b') == 1
    assert count_matches('f(x) and f(', 'f(') == 2
    assert count_matches('[a+b]', '[a+b]') == 1


def test_split_segments_marks_code_blocks() -> None:
    segments = split_segments('intro ```code here``` outro')

    assert [s.text for s in segments] == ['intro ', 'code here', ' outro']
    assert [s.is_code for s in segments] == [False, True, False]


def test_offsets_are_cumulative_across_messages() -> None:
    texts = ['foo bar foo', 'nothing', 'Foo ```foo()``` end', 'foo']
    result = index_matches(texts, 'foo')

    assert result.total_matches == 5
    assert result.offsets == (0, 2, 2, 4)


def test_total_equals_sum_of_segment_counts() -> None:
    texts = ['one ```two one``` three one', 'ONE', '']
    expected = sum(count_matches(seg.text, 'one') for t in texts for seg in split_segments(t))

    assert index_matches(texts, 'one').total_matches == expected == 4


def test_iter_matches_numbers_globally() -> None:
    record = make_record('c', 't', [
        ('u1', None, raw_message('u1', 'user', 'cat cat', 1)),
        ('a1', 'u1', raw_message('a1', 'assistant', 'a ```cat``` here', 2)),
    ])
    entries = list(iter_matches(linearize(record), 'cat'))

    assert [e.sequence for e in entries] == [0, 1, 2]
    assert [e.message_id for e in entries] == ['u1', 'u1', 'a1']
    assert entries[2].segment_index == 1
    assert (entries[1].start, entries[1].end) == (4, 7)


def test_highlight_assigns_ids_from_start_index() -> None:
    spans = highlight('Go go GO!', 'go', start_index=5)

    assert spans == [
        TextSpan('Go', 5), TextSpan(' '), TextSpan('go', 6), TextSpan(' '), TextSpan('GO', 7), TextSpan('!'),
    ]
    assert highlight('plain', '') == [TextSpan('plain')]


@pytest.mark.parametrize('total', [1, 2, 7])
def test_navigation_wraps(total: int) -> None:
    assert next_match(total - 1, total) == 0
    assert previous_match(0, total) == total - 1


def test_navigation_with_no_matches_stays_at_zero() -> None:
    assert next_match(0, 0) == 0
    assert previous_match(0, 0) == 0


def test_cursor_walks_and_labels(hello_record) -> None:
    record = make_record('c', 't', [
        ('u1', None, raw_message('u1', 'user', 'x x x', 1)),
    ])
    cursor = MatchCursor.for_messages(linearize(record), 'x')

    assert cursor.label() == '1 of 3'
    cursor.previous()
    assert cursor.label() == '3 of 3'
    cursor.next()
    assert cursor.current == 0

    empty = MatchCursor.for_messages(linearize(hello_record), 'zzz')
    assert empty.label() == 'No results'
