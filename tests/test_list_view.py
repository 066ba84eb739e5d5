"""Tests for conversation list filtering and sorting."""

from __future__ import annotations

import locale

import pytest

from conftest import make_record, raw_message
from list_view import (
    SortKey, all_selected, conversation_has_content, filter_sort, search_snippet, title_sort_key,
    toggle_all, toggle_selection, use_system_collation,
)


@pytest.fixture
def records():
    return [
        make_record('a', 'Food for thought', [
            ('r', None, None),
            ('m', 'r', raw_message('m', 'user', 'lunch ideas', 1)),
        ], create_time=300, original_index=0),
        make_record('b', 'banana bread', [
            ('r', None, None),
            ('m', 'r', raw_message('m', 'user', 'I like FOO fighters', 1)),
            ('n', 'm', raw_message('n', 'assistant', 'ok', 2)),
            ('o', 'n', None),
        ], create_time=100, original_index=1),
        make_record('c', 'Apple pie', [('r', None, None)], create_time=None, original_index=2),
        make_record('d', 'buffoon', [
            ('r', None, None),
            ('m', 'r', raw_message('m', 'user', 'unused branch mentions zebra', 1)),
            ('x', 'r', raw_message('x', 'user', 'current branch', 2)),
        ], current_node='x', create_time=300, original_index=3),
    ]


def test_blank_term_keeps_everything(records) -> None:
    assert len(filter_sort(records, '   ', False, SortKey.ORIGINAL)) == 4


def test_title_filter_ignores_content(records) -> None:
    view = filter_sort(records, 'foo', False, SortKey.ORIGINAL)

    assert [r.id for r in view] == ['a', 'd']


def test_content_filter_checks_whole_mapping(records) -> None:
    assert [r.id for r in filter_sort(records, 'foo', True, SortKey.ORIGINAL)] == ['a', 'b', 'd']
    # 'zebra' only appears on an abandoned branch
    assert [r.id for r in filter_sort(records, 'ZEBRA', True, SortKey.ORIGINAL)] == ['d']


def test_source_is_not_mutated(records) -> None:
    before = list(records)
    filter_sort(records, '', False, SortKey.TITLE)

    assert records == before


def test_date_desc_is_stable_and_treats_missing_as_zero(records) -> None:
    view = filter_sort(records, '', False, SortKey.DATE_DESC)

    assert [r.id for r in view] == ['a', 'd', 'b', 'c']
    times = [r.create_time or 0 for r in view]
    assert times == sorted(times, reverse=True)


def test_date_asc(records) -> None:
    assert [r.id for r in filter_sort(records, '', False, 'date-asc')] == ['c', 'b', 'a', 'd']


def test_length_counts_all_nodes(records) -> None:
    assert [r.id for r in filter_sort(records, '', False, SortKey.LENGTH)] == ['b', 'd', 'a', 'c']


def test_title_sort_is_non_decreasing(records) -> None:
    view = filter_sort(records, '', False, SortKey.TITLE)
    keys = [title_sort_key(r.title) for r in view]

    assert keys == sorted(keys)
    assert [r.id for r in view] == ['c', 'b', 'd', 'a']


def test_title_sort_places_accented_titles_with_their_letter() -> None:
    records = [
        make_record('z', 'Zebra', original_index=0),
        make_record('e', 'Éclair', original_index=1),
        make_record('a', 'apple', original_index=2),
    ]

    assert [r.title for r in filter_sort(records, '', False, SortKey.TITLE)] == ['apple', 'Éclair', 'Zebra']


def test_accents_only_break_ties() -> None:
    assert title_sort_key('eclair') < title_sort_key('Éclair') < title_sort_key('eclairs')


def test_use_system_collation_falls_back_on_locale_error(monkeypatch) -> None:
    def broken(category, name):
        raise locale.Error('unsupported locale setting')

    monkeypatch.setattr(locale, 'setlocale', broken)

    assert use_system_collation() is False


def test_original_order(records) -> None:
    shuffled = [records[2], records[0], records[3], records[1]]

    assert [r.id for r in filter_sort(shuffled, '', False, SortKey.ORIGINAL)] == ['a', 'b', 'c', 'd']


def test_empty_collection() -> None:
    assert filter_sort([], 'x', True, SortKey.TITLE) == []


def test_conversation_has_content_matches_title(records) -> None:
    assert conversation_has_content(records[2], 'apple')
    assert not conversation_has_content(records[2], 'pear')


def test_search_snippet_trims_with_ellipses() -> None:
    text = 'x' * 40 + 'needle' + 'y' * 60
    record = make_record('s', 't', [('m', None, raw_message('m', 'user', text, 1))])
    snippet = search_snippet(record, 'NEEDLE')

    assert snippet == '...' + 'x' * 25 + 'needle' + 'y' * 45 + '...'
    assert search_snippet(record, 'absent') is None
    assert search_snippet(record, '') is None


def test_selection_helpers(records) -> None:
    selected = toggle_selection(set(), 'a')
    assert selected == {'a'}
    assert toggle_selection(selected, 'a') == set()

    everything = toggle_all(records, {'a'})
    assert everything == {'a', 'b', 'c', 'd'}
    assert all_selected(records, everything)
    assert toggle_all(records, everything) == set()
    assert not all_selected([], set())
