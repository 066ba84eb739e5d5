"""Reconstruct the active branch of a conversation as a flat message list."""

from archive_logging import get_logger
from archive_model import ConversationRecord, Message

logger = get_logger('linearize')


def is_displayable(message: Message) -> bool:
    """System messages only count when they carry non-empty text parts."""
    if message.content is None:
        return False
    if message.role != 'system':
        return True
    return message.content.content_type == 'text' and message.content.has_text()


def linearize(conversation: ConversationRecord) -> list[Message]:
    """Walk parent links from current_node to the root, oldest message first.

    Only the current branch is returned; abandoned siblings are never visited.
    A dangling id or a parent cycle ends the walk with what was collected.
    """
    messages = []
    seen = set()
    node_id = conversation.current_node

    while node_id:
        if node_id in seen:
            logger.warning('Parent cycle at node %s in conversation %s', node_id, conversation.id)
            break
        seen.add(node_id)

        node = conversation.mapping.get(node_id)
        if node is None:
            logger.debug('Dangling node %s in conversation %s', node_id, conversation.id)
            break

        if node.message is not None and is_displayable(node.message):
            messages.append(node.message)
        node_id = node.parent

    messages.reverse()
    return messages
