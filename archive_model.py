"""
Archive data model.

A conversations.json export is a list of conversation records. Each record
holds a "mapping": a flat dict of node id -> node, where nodes point at their
parent by id. We keep that arena shape as-is (read-only) rather than building
object graphs, since every consumer navigates by id lookup anyway.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from archive_logging import get_logger

logger = get_logger('model')


class ArchiveFormatError(ValueError):
    """The archive file is not a JSON list of conversation records."""


@dataclass(frozen=True)
class Author:
    role: str
    name: str | None = None
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class Content:
    content_type: str
    parts: tuple[Any, ...] | None = None
    # code / execution_output carry their payload here instead of in parts
    text: str | None = None

    def text_parts(self) -> list[str]:
        """String parts, plus the 'text' field of dict parts (multimodal)."""
        out = []
        for part in self.parts or ():
            if isinstance(part, str):
                out.append(part)
            elif isinstance(part, dict) and isinstance(part.get('text'), str):
                out.append(part['text'])
        return out

    def has_text(self) -> bool:
        return any(p for p in self.text_parts())


@dataclass(frozen=True)
class Message:
    id: str
    author: Author
    create_time: float | None = None
    content: Content | None = None
    status: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    recipient: str | None = None

    @property
    def role(self) -> str:
        return self.author.role


@dataclass(frozen=True)
class MessageNode:
    id: str
    message: Message | None = None
    parent: str | None = None
    children: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversationRecord:
    id: str
    title: str
    create_time: float | None
    update_time: float | None
    mapping: Mapping[str, MessageNode]
    current_node: str | None
    original_index: int = 0
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def node_count(self) -> int:
        return len(self.mapping)


def message_text(message: Message | None, sep: str = '\n') -> str:
    """Join a message's textual parts; empty string when there are none."""
    if message is None or message.content is None:
        return ''
    return sep.join(message.content.text_parts())


def _float_or_none(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _dict_or_empty(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_message(raw: dict[str, Any]) -> Message:
    author_raw = _dict_or_empty(raw.get('author'))
    author = Author(
        role=str(author_raw.get('role') or 'unknown'),
        name=author_raw.get('name'),
        metadata=author_raw.get('metadata') if isinstance(author_raw.get('metadata'), dict) else None,
    )

    content = None
    content_raw = raw.get('content')
    if isinstance(content_raw, dict):
        parts = content_raw.get('parts')
        text = content_raw.get('text')
        content = Content(
            content_type=str(content_raw.get('content_type') or ''),
            parts=tuple(parts) if isinstance(parts, list) else None,
            text=text if isinstance(text, str) else None,
        )

    recipient = raw.get('recipient')
    return Message(
        id=str(raw.get('id') or ''),
        author=author,
        create_time=_float_or_none(raw.get('create_time')),
        content=content,
        status=raw.get('status'),
        metadata=_dict_or_empty(raw.get('metadata')),
        recipient=recipient if isinstance(recipient, str) else None,
    )


def parse_node(node_id: str, raw: dict[str, Any]) -> MessageNode:
    msg_raw = raw.get('message')
    parent = raw.get('parent')
    children = raw.get('children') or []
    return MessageNode(
        id=str(raw.get('id') or node_id),
        message=parse_message(msg_raw) if isinstance(msg_raw, dict) else None,
        parent=str(parent) if parent is not None else None,
        children=tuple(str(c) for c in children),
    )


def parse_record(raw: dict[str, Any], original_index: int = 0) -> ConversationRecord:
    """Parse one raw conversation dict. Missing fields get neutral defaults."""
    mapping_raw = _dict_or_empty(raw.get('mapping'))
    mapping = {}
    for node_id, node in mapping_raw.items():
        if not isinstance(node, dict):
            logger.debug('Skipping malformed node %s', node_id)
            continue
        mapping[str(node_id)] = parse_node(str(node_id), node)

    current = raw.get('current_node')
    return ConversationRecord(
        id=str(raw.get('conversation_id') or raw.get('id') or ''),
        title=raw.get('title') if isinstance(raw.get('title'), str) else '',
        create_time=_float_or_none(raw.get('create_time')),
        update_time=_float_or_none(raw.get('update_time')),
        mapping=MappingProxyType(mapping),
        current_node=str(current) if current is not None else None,
        original_index=original_index,
        raw=raw,
    )


def parse_archive(data: Any) -> list[ConversationRecord]:
    """Parse a decoded conversations.json value, keeping input order."""
    if not isinstance(data, list):
        raise ArchiveFormatError('Expected the top-level JSON to be a list of conversations.')

    records = []
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            logger.warning('Skipping entry %d: not a conversation object', i)
            continue
        records.append(parse_record(raw, original_index=i))
    return records


def load_archive(filepath: Path) -> list[ConversationRecord]:
    """Load and parse a conversations.json file."""
    with open(filepath, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ArchiveFormatError(f'Failed to parse JSON: {e}') from e

    records = parse_archive(data)
    logger.info('Loaded %d conversations from %s', len(records), filepath)
    return records


def find_record(records: Iterable[ConversationRecord], conv_id: str) -> ConversationRecord | None:
    for record in records:
        if record.id == conv_id:
            return record
    return None
