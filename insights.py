"""
Process-trace extraction.

Scans the whole mapping, not just the active branch, for reasoning traces,
tool traffic, system context and finish metadata.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Sequence

from archive_model import ConversationRecord, Message, message_text

DEFAULT_MODEL_LABEL = 'Standard Engine'
DEDUP_PREFIX = 30


class InsightKind(str, Enum):
    THOUGHT = 'thought'
    SUMMARY = 'summary'
    SYSTEM = 'system'
    TOOL_CALL = 'tool_call'
    TOOL_RESPONSE = 'tool_response'
    DIAGNOSTIC = 'diagnostic'


@dataclass(frozen=True)
class Insight:
    id: str
    label: str
    value: str
    kind: InsightKind
    timestamp: float


class InsightKey(NamedTuple):
    id: str
    kind: InsightKind
    value_prefix: str


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def message_insights(msg: Message) -> list[Insight]:
    """All insights a single message yields, in a fixed order."""
    ts = msg.create_time or 0
    found = []

    def add(label: str, value: str, kind: InsightKind) -> None:
        found.append(Insight(msg.id, label, value, kind, ts))

    thought = msg.metadata.get('thought')
    if thought:
        add('Model Reasoning', _as_text(thought), InsightKind.THOUGHT)

    summary = msg.metadata.get('turn_summary')
    if summary:
        add('Turn Summary', _as_text(summary), InsightKind.SUMMARY)

    if msg.recipient and msg.recipient != 'all':
        add(f'Call: {msg.recipient}', message_text(msg) or 'Empty Call Payload', InsightKind.TOOL_CALL)

    if msg.role == 'tool':
        add(f"Result: {msg.author.name or 'External'}", message_text(msg) or 'Empty Response Payload',
            InsightKind.TOOL_RESPONSE)

    if msg.role == 'system' and msg.content is not None and msg.content.content_type == 'text':
        text = message_text(msg)
        if text:
            add('System Context', text, InsightKind.SYSTEM)

    finish = msg.metadata.get('finish_details')
    if finish:
        add('Exit State', json.dumps(finish, indent=2, ensure_ascii=False, default=str), InsightKind.DIAGNOSTIC)

    return found


def extract_insights(conversation: ConversationRecord) -> list[Insight]:
    """Deduplicated insights from every node, oldest first (stable on ties)."""
    seen: set[InsightKey] = set()
    results = []

    for node in conversation.mapping.values():
        if node.message is None:
            continue
        for insight in message_insights(node.message):
            key = InsightKey(insight.id, insight.kind, insight.value[:DEDUP_PREFIX])
            if key in seen:
                continue
            seen.add(key)
            results.append(insight)

    results.sort(key=lambda i: i.timestamp)
    return results


def model_slug(messages: Sequence[Message]) -> str:
    for msg in messages:
        slug = msg.metadata.get('model_slug')
        if slug:
            return str(slug)
    return DEFAULT_MODEL_LABEL
