"""
Text and JSON export of conversations.

The TXT layout is relied on by tools that parse exported transcripts, so the
header, role labels and rules must stay exactly as they are.
"""

import json
import re
from datetime import date, datetime, tzinfo
from typing import Iterable, Sequence

from archive_model import ConversationRecord, Message, message_text

HEAVY_RULE = '=' * 50
LIGHT_RULE = '-' * 50


def _to_datetime(ts: float, tz: tzinfo | None) -> datetime | None:
    try:
        return datetime.fromtimestamp(ts, tz=tz)
    except (OverflowError, OSError, ValueError):
        return None


def format_date(ts: float | None, tz: tzinfo | None = None) -> str:
    """'Jan 5, 2024' style date; empty for missing timestamps."""
    if not ts:
        return ''
    dt = _to_datetime(ts, tz)
    if dt is None:
        return ''
    return f'{dt:%b} {dt.day}, {dt.year}'


def format_time(ts: float | None, tz: tzinfo | None = None) -> str:
    """'HH:MM' (24h); empty for missing timestamps."""
    if not ts:
        return ''
    dt = _to_datetime(ts, tz)
    if dt is None:
        return ''
    return dt.strftime('%H:%M')


def role_label(message: Message) -> str:
    return 'User' if message.role == 'user' else 'ChatGPT'


def format_transcript(record: ConversationRecord, messages: Sequence[Message], tz: tzinfo | None = None) -> str:
    """TXT download format: fixed header, then one block per message."""
    lines = [
        f'{HEAVY_RULE}\n',
        f'TITLE: {record.title}\n',
        f'DATE: {format_date(record.create_time, tz)} {format_time(record.create_time, tz)}\n',
        f'{HEAVY_RULE}\n\n',
    ]
    for msg in messages:
        lines.append(f'[{role_label(msg)}] ({format_time(msg.create_time, tz)}):\n')
        lines.append(f'{message_text(msg)}\n\n')
        lines.append(f'{LIGHT_RULE}\n\n')
    return ''.join(lines)


def format_plain_text(record: ConversationRecord, messages: Sequence[Message], tz: tzinfo | None = None) -> str:
    """Lighter layout used when copying a conversation to the clipboard."""
    text = (f'Title: {record.title}\n'
            f'Date: {format_date(record.create_time, tz)} {format_time(record.create_time, tz)}\n\n')
    for msg in messages:
        text += f'{role_label(msg)} - {format_time(msg.create_time, tz)}:\n{message_text(msg)}\n\n'
    return text


def export_filename(title: str, ext: str) -> str:
    return re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE).lower() + ext


def subset_filename(day: date | None = None) -> str:
    day = day or date.today()
    return f'chatgpt_export_subset_{day.isoformat()}.json'


def dump_record(record: ConversationRecord) -> str:
    """The record exactly as it was loaded."""
    return json.dumps(record.raw, indent=2, ensure_ascii=False)


def dump_records(records: Iterable[ConversationRecord]) -> str:
    return json.dumps([r.raw for r in records], indent=2, ensure_ascii=False)


def select_subset(records: Iterable[ConversationRecord], ids: set[str]) -> list[ConversationRecord]:
    """Selected records, in collection order."""
    return [r for r in records if r.id in ids]
