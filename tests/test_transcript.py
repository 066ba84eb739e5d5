"""Tests for transcript export."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

from conftest import make_record, raw_message
from linearize import linearize
from transcript import (
    HEAVY_RULE, LIGHT_RULE, dump_record, dump_records, export_filename, format_date, format_plain_text,
    format_time, format_transcript, select_subset, subset_filename,
)

UTC = timezone.utc
# 2024-01-05 09:30:00 UTC
T0 = datetime(2024, 1, 5, 9, 30, tzinfo=UTC).timestamp()


def record():
    return make_record('c1', 'Trip: Rome & Paris!', [
        ('root', None, None),
        ('u1', 'root', raw_message('u1', 'user', 'Plan a trip', T0)),
        ('a1', 'u1', raw_message('a1', 'assistant', 'Day 1: Colosseum', T0 + 120)),
    ], create_time=T0)


def test_date_and_time_formatting() -> None:
    assert format_date(T0, UTC) == 'Jan 5, 2024'
    assert format_time(T0, UTC) == '09:30'
    assert format_date(None) == ''
    assert format_time(0) == ''


def test_transcript_layout() -> None:
    rec = record()
    text = format_transcript(rec, linearize(rec), tz=UTC)

    assert text == (
        f'{HEAVY_RULE}\n'
        'TITLE: Trip: Rome & Paris!\n'
        'DATE: Jan 5, 2024 09:30\n'
        f'{HEAVY_RULE}\n\n'
        '[User] (09:30):\n'
        'Plan a trip\n\n'
        f'{LIGHT_RULE}\n\n'
        '[ChatGPT] (09:32):\n'
        'Day 1: Colosseum\n\n'
        f'{LIGHT_RULE}\n\n'
    )


def test_plain_text_layout() -> None:
    rec = record()
    text = format_plain_text(rec, linearize(rec), tz=UTC)

    assert text.startswith('Title: Trip: Rome & Paris!\nDate: Jan 5, 2024 09:30\n\n')
    assert 'User - 09:30:\nPlan a trip\n\n' in text
    assert text.endswith('ChatGPT - 09:32:\nDay 1: Colosseum\n\n')


def test_export_filename_sanitizes_title() -> None:
    assert export_filename('Trip: Rome & Paris!', '.txt') == 'trip__rome___paris_.txt'
    assert export_filename('', '.json') == '.json'


def test_subset_filename() -> None:
    assert subset_filename(date(2024, 3, 9)) == 'chatgpt_export_subset_2024-03-09.json'


def test_dump_record_is_verbatim() -> None:
    rec = record()

    assert json.loads(dump_record(rec)) == rec.raw
    assert json.loads(dump_records([rec, rec])) == [rec.raw, rec.raw]


def test_dump_keeps_non_ascii() -> None:
    rec = make_record('c', 'Café ☕', [('m', None, raw_message('m', 'user', 'naïve'))])

    assert 'Café ☕' in dump_record(rec)


def test_select_subset_keeps_collection_order() -> None:
    records = [make_record(str(i), f't{i}') for i in range(4)]

    assert [r.id for r in select_subset(records, {'3', '1'})] == ['1', '3']
    assert select_subset(records, set()) == []
