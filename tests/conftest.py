"""Shared fixtures: raw export dicts and parsed records."""

from __future__ import annotations

from pathlib import Path
import json
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from archive_model import ConversationRecord, parse_record


def raw_message(msg_id, role, text=None, t=None, content_type='text', **extra):
    msg = {
        'id': msg_id,
        'author': {'role': role},
        'create_time': t,
        'content': {'content_type': content_type, 'parts': [text] if text is not None else []},
        'status': 'finished_successfully',
        'metadata': {},
    }
    msg.update(extra)
    return msg


def raw_conversation(conv_id, title, nodes, current_node, create_time=None, **extra):
    """nodes: list of (node_id, parent_id, message_dict_or_None)."""
    mapping = {}
    for node_id, parent, msg in nodes:
        mapping[node_id] = {'id': node_id, 'message': msg, 'parent': parent, 'children': []}
    for node_id, parent, _ in nodes:
        if parent in mapping:
            mapping[parent]['children'].append(node_id)
    conv = {
        'conversation_id': conv_id,
        'title': title,
        'create_time': create_time,
        'update_time': create_time,
        'mapping': mapping,
        'current_node': current_node,
    }
    conv.update(extra)
    return conv


def make_record(conv_id='c1', title='Untitled', nodes=None, current_node=None, create_time=None,
                original_index=0) -> ConversationRecord:
    nodes = nodes or []
    if current_node is None and nodes:
        current_node = nodes[-1][0]
    return parse_record(raw_conversation(conv_id, title, nodes, current_node, create_time), original_index)


@pytest.fixture
def hello_record() -> ConversationRecord:
    """A(root, no message) -> B(user 'hello', t=100) -> C(assistant 'hi there', t=105)."""
    return make_record('hello', 'Greetings', [
        ('A', None, None),
        ('B', 'A', raw_message('B', 'user', 'hello', 100)),
        ('C', 'B', raw_message('C', 'assistant', 'hi there', 105)),
    ], current_node='C', create_time=100)


@pytest.fixture
def archive_file(tmp_path) -> Path:
    data = [
        raw_conversation('c-python', 'Python packaging', [
            ('root', None, None),
            ('u1', 'root', raw_message('u1', 'user', 'How do I build a wheel?', 1000)),
            ('a1', 'u1', raw_message('a1', 'assistant', 'Use ```python -m build``` in the project.', 1010)),
        ], 'a1', create_time=1000),
        raw_conversation('c-garden', 'Garden plans', [
            ('root', None, None),
            ('u1', 'root', raw_message('u1', 'user', 'Which tomatoes grow well in shade?', 2000)),
            ('a1', 'u1', raw_message('a1', 'assistant', 'Cherry tomatoes tolerate partial shade.', 2010)),
        ], 'a1', create_time=2000),
        raw_conversation('c-empty', 'Scratch', [('root', None, None)], 'root', create_time=500),
    ]
    path = tmp_path / 'conversations.json'
    path.write_text(json.dumps(data), encoding='utf-8')
    return path
