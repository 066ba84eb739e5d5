"""
Ranked full-text search over a whole archive.

Uses Tantivy with its default tokenizer, which keeps stop words. This sits
next to the substring filter in list_view: the filter decides what the list
shows, this answers "where did I talk about X" with scored hits.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Sequence

import tantivy

from archive_logging import get_logger
from archive_model import ConversationRecord, Message, message_text

logger = get_logger('index')

SEARCH_FIELDS = ['text', 'title']


def indexable_text(msg: Message) -> str:
    """Text worth indexing for a message: its parts, else its code payload."""
    text = message_text(msg, sep=' ')
    if not text and msg.content is not None and msg.content.text:
        text = msg.content.text
    return text


def _phrase(query_str: str) -> str:
    return '"' + query_str.replace('\\', ' ').replace('"', ' ') + '"'


class ArchiveIndex:
    """Tantivy-based search index for conversation records."""

    def __init__(self, index_dir: str | None = None, in_memory: bool = False):
        self.index_dir = None if in_memory else (index_dir or tempfile.mkdtemp(prefix='conv_index_'))
        self._owns_dir = not in_memory and index_dir is None
        self.index = None
        self.conversations: dict[str, ConversationRecord] = {}
        self._setup_index()

    def _setup_index(self):
        # conv_id / node_id use the raw tokenizer so ids match as whole terms
        schema_builder = tantivy.SchemaBuilder()
        schema_builder.add_text_field('node_id', stored=True, tokenizer_name='raw')
        schema_builder.add_text_field('conv_id', stored=True, tokenizer_name='raw')
        schema_builder.add_text_field('title', stored=True)
        schema_builder.add_text_field('role', stored=True)
        schema_builder.add_text_field('text', stored=True)
        schema = schema_builder.build()

        if self.index_dir is None:
            self.index = tantivy.Index(schema)
        else:
            self.index = tantivy.Index(schema, path=self.index_dir)

    def add_records(
        self,
        records: Sequence[ConversationRecord],
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> int:
        """Index every message of every record; returns the message count."""
        writer = self.index.writer()
        msg_count = 0

        for i, record in enumerate(records):
            self.conversations[record.id] = record

            for node_id, node in record.mapping.items():
                msg = node.message
                if msg is None or msg.content is None:
                    continue
                text = indexable_text(msg)
                if not text.strip():
                    continue
                writer.add_document(tantivy.Document(
                    node_id=node_id,
                    conv_id=record.id,
                    title=record.title,
                    role=msg.role,
                    text=text,
                ))
                msg_count += 1

            if progress_callback and i % 50 == 0:
                progress_callback(i, len(records))

        writer.commit()
        self.index.reload()

        if progress_callback:
            progress_callback(len(records), len(records))

        logger.info('Indexed %d messages from %d conversations', msg_count, len(records))
        return msg_count

    def _parse(self, query_str: str):
        try:
            return self.index.parse_query(query_str, SEARCH_FIELDS)
        except ValueError:
            logger.debug('Query %r did not parse, retrying as a phrase', query_str)
            return self.index.parse_query(_phrase(query_str), SEARCH_FIELDS)

    def search(self, query_str: str, limit: int = 100) -> list[dict]:
        """Returns a list of {conv_id, title, node_id, role, text, score}."""
        if not query_str.strip():
            return []

        searcher = self.index.searcher()
        results = searcher.search(self._parse(query_str), limit)
        hits = []

        for score, doc_addr in results.hits:
            doc = searcher.doc(doc_addr)
            hits.append({
                'conv_id': doc['conv_id'][0],
                'title': doc['title'][0],
                'node_id': doc['node_id'][0],
                'role': doc['role'][0],
                'text': doc['text'][0],
                'score': score,
            })

        return hits

    def search_in_conversation(self, conv_id: str, query_str: str, limit: int = 1000) -> list[dict]:
        """Hits restricted to one conversation."""
        if not query_str.strip():
            return []

        searcher = self.index.searcher()
        scope = f'conv_id:{_phrase(conv_id)}'
        try:
            query = self.index.parse_query(f'{scope} AND ({query_str})', SEARCH_FIELDS)
        except ValueError:
            query = self.index.parse_query(f'{scope} AND {_phrase(query_str)}', SEARCH_FIELDS)

        results = searcher.search(query, limit)
        hits = []

        for score, doc_addr in results.hits:
            doc = searcher.doc(doc_addr)
            hits.append({
                'node_id': doc['node_id'][0],
                'role': doc['role'][0],
                'text': doc['text'][0],
                'score': score,
            })

        return hits

    def matching_conversations(self, query_str: str, limit: int = 500) -> set[str]:
        return {hit['conv_id'] for hit in self.search(query_str, limit)}

    def cleanup(self):
        """Remove the temporary index directory."""
        if self._owns_dir and self.index_dir and Path(self.index_dir).exists():
            shutil.rmtree(self.index_dir, ignore_errors=True)
