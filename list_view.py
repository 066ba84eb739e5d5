"""Filtering and ordering of the conversation list."""

import locale
import unicodedata
from enum import Enum
from typing import Callable, Iterable, Sequence

from archive_logging import get_logger
from archive_model import ConversationRecord, message_text

logger = get_logger('list')


class SortKey(str, Enum):
    ORIGINAL = 'original-order'
    DATE_DESC = 'date-desc'
    DATE_ASC = 'date-asc'
    LENGTH = 'length'
    TITLE = 'title'


SORT_LABELS = {
    SortKey.DATE_DESC: 'Date (Newest)',
    SortKey.DATE_ASC: 'Date (Oldest)',
    SortKey.LENGTH: 'Length (Longest)',
    SortKey.TITLE: 'Title (A-Z)',
    SortKey.ORIGINAL: 'Original Order',
}


def use_system_collation() -> bool:
    """Switch LC_COLLATE to the user's locale; False if it is unavailable."""
    try:
        locale.setlocale(locale.LC_COLLATE, '')
    except locale.Error as e:
        logger.warning('Falling back to the C collation: %s', e)
        return False
    return True


def _strip_accents(text: str) -> str:
    return ''.join(c for c in unicodedata.normalize('NFKD', text) if not unicodedata.combining(c))


def title_sort_key(title: str | None) -> tuple[str, str]:
    """Collation key for titles, case- and accent-insensitive.

    Accents only break ties, so 'Éclair' sorts with the e's even under the
    C locale.
    """
    folded = (title or '').casefold()
    return (locale.strxfrm(_strip_accents(folded)), locale.strxfrm(folded))


def _create_time(record: ConversationRecord) -> float:
    return record.create_time or 0


# (key function, descending)
_SORTS: dict[SortKey, tuple[Callable[[ConversationRecord], object], bool]] = {
    SortKey.ORIGINAL: (lambda r: r.original_index, False),
    SortKey.DATE_DESC: (_create_time, True),
    SortKey.DATE_ASC: (_create_time, False),
    SortKey.LENGTH: (lambda r: len(r.mapping), True),
    SortKey.TITLE: (lambda r: title_sort_key(r.title), False),
}


def _record_texts(record: ConversationRecord) -> Iterable[str]:
    for node in record.mapping.values():
        if node.message is not None and node.message.content is not None:
            yield message_text(node.message, sep=' ')


def conversation_has_content(record: ConversationRecord, term: str) -> bool:
    """Title or any message anywhere in the mapping contains term."""
    term_lower = term.lower()
    if term_lower in (record.title or '').lower():
        return True
    return any(term_lower in text.lower() for text in _record_texts(record))


def search_snippet(record: ConversationRecord, term: str, before: int = 25, after: int = 45) -> str | None:
    """Text around the first content match, for showing under the title."""
    if not term:
        return None
    term_lower = term.lower()
    for text in _record_texts(record):
        index = text.lower().find(term_lower)
        if index == -1:
            continue
        start = max(0, index - before)
        end = min(len(text), index + len(term) + after)
        return ('...' if start > 0 else '') + text[start:end] + ('...' if end < len(text) else '')
    return None


def filter_sort(
    records: Sequence[ConversationRecord],
    term: str,
    search_content: bool,
    sort_key: SortKey | str,
) -> list[ConversationRecord]:
    """Filtered, ordered copy of records. The input sequence is not touched."""
    result = list(records)

    if term.strip():
        if search_content:
            result = [r for r in result if conversation_has_content(r, term)]
        else:
            term_lower = term.lower()
            result = [r for r in result if term_lower in (r.title or '').lower()]

    key, descending = _SORTS[SortKey(sort_key)]
    result.sort(key=key, reverse=descending)
    return result


def toggle_selection(selected: set[str], conv_id: str) -> set[str]:
    return selected ^ {conv_id}


def all_selected(view: Sequence[ConversationRecord], selected: set[str]) -> bool:
    return bool(view) and all(r.id in selected for r in view)


def toggle_all(view: Sequence[ConversationRecord], selected: set[str]) -> set[str]:
    """Select every record in view, or deselect them if all already are."""
    ids = {r.id for r in view}
    if all_selected(view, selected):
        return selected - ids
    return selected | ids
