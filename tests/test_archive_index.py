"""Tests for ranked search with Tantivy."""

from __future__ import annotations

from pathlib import Path

import pytest

from archive_index import ArchiveIndex, indexable_text
from archive_model import load_archive, parse_message
from conftest import raw_message


@pytest.fixture
def index(archive_file):
    idx = ArchiveIndex(in_memory=True)
    idx.add_records(load_archive(archive_file))
    yield idx
    idx.cleanup()


def test_add_records_counts_text_messages(archive_file) -> None:
    idx = ArchiveIndex(in_memory=True)
    progress = []

    assert idx.add_records(load_archive(archive_file), lambda done, total: progress.append((done, total))) == 4
    assert progress[-1] == (3, 3)
    assert set(idx.conversations) == {'c-python', 'c-garden', 'c-empty'}


def test_search_finds_conversation(index) -> None:
    hits = index.search('tomatoes')

    assert {h['conv_id'] for h in hits} == {'c-garden'}
    assert {h['node_id'] for h in hits} == {'u1', 'a1'}
    assert all(h['title'] == 'Garden plans' for h in hits)
    assert all(h['score'] > 0 for h in hits)


def test_blank_query_returns_nothing(index) -> None:
    assert index.search('   ') == []
    assert index.search_in_conversation('c-garden', '') == []


def test_stray_quote_does_not_raise(index) -> None:
    hits = index.search('wheel"')

    assert {h['conv_id'] for h in hits} <= {'c-python'}


def test_search_in_conversation_is_scoped(index) -> None:
    assert index.search_in_conversation('c-python', 'tomatoes') == []
    hits = index.search_in_conversation('c-garden', 'shade')

    assert {h['node_id'] for h in hits} == {'u1', 'a1'}


def test_matching_conversations(index) -> None:
    assert index.matching_conversations('build') == {'c-python'}


def test_indexable_text_prefers_parts() -> None:
    msg = parse_message(raw_message('m', 'assistant', 'one', content_type='text'))
    code = parse_message({
        'id': 'c', 'author': {'role': 'assistant'},
        'content': {'content_type': 'code', 'text': 'print(1)'},
    })

    assert indexable_text(msg) == 'one'
    assert indexable_text(code) == 'print(1)'


def test_cleanup_removes_owned_directory(archive_file) -> None:
    idx = ArchiveIndex()
    path = Path(idx.index_dir)
    idx.add_records(load_archive(archive_file))
    assert path.exists()

    idx.cleanup()
    assert not path.exists()


def test_cleanup_keeps_given_directory(tmp_path) -> None:
    idx = ArchiveIndex(index_dir=str(tmp_path))
    idx.cleanup()

    assert tmp_path.exists()
