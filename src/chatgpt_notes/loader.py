"""Load ChatGPT exports and reduce conversation trees to linear threads."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import InvalidExportFormat
from .models import (
    ConversationThread,
    ExportConversation,
    ExportNode,
    Message,
    QAPair,
    Role,
)
from .state import pair_id

logger = logging.getLogger(__name__)


def parse_export(text: str | bytes) -> list[ExportConversation]:
    """
    Parse the contents of a conversations.json export.

    Raises:
        InvalidExportFormat: If the text is not JSON, is not a list of
            conversations, or any conversation fails validation.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidExportFormat(f"Invalid ChatGPT export format: {e}") from e

    if not isinstance(data, list):
        raise InvalidExportFormat(
            f"Invalid ChatGPT export format: expected a list of conversations, "
            f"got {type(data).__name__}"
        )

    conversations = []
    for position, raw in enumerate(data):
        try:
            conversations.append(ExportConversation.model_validate(raw))
        except ValidationError as e:
            raise InvalidExportFormat(
                f"Invalid ChatGPT export format: conversation {position} is malformed"
            ) from e
    return conversations


def _find_start_node(mapping: dict[str, ExportNode]) -> ExportNode | None:
    """Find the first user node whose parent carries the system message."""
    for node in mapping.values():
        if node.message is None or node.message.author.role != Role.USER:
            continue
        if node.parent is None:
            continue
        parent = mapping.get(node.parent)
        if parent is not None and parent.message is not None:
            if parent.message.author.role == Role.SYSTEM:
                return node
    return None


def extract_thread(conversation: ExportConversation) -> ConversationThread:
    """
    Reduce a conversation tree to its primary branch.

    Walks from the start node, always following the first child. Blank and
    system messages are skipped; tombstoned nodes are walked through.
    Conversations without a start node produce an empty thread.

    Raises:
        InvalidExportFormat: If the walk revisits a node (cyclic mapping).
    """
    thread = ConversationThread(
        conversation_id=conversation.id,
        title=conversation.title or "Untitled",
        create_time=conversation.create_time,
        update_time=conversation.update_time,
    )

    mapping = conversation.mapping
    current = _find_start_node(mapping)
    visited: set[str] = set()

    while current is not None:
        if current.id in visited:
            raise InvalidExportFormat(
                f"Invalid ChatGPT export format: cycle at node {current.id} "
                f"in conversation {conversation.id}"
            )
        visited.add(current.id)

        message = current.message
        if message is not None and message.author.role != Role.SYSTEM:
            content = message.content.text
            if content.strip():
                thread.messages.append(
                    Message(
                        id=current.id,
                        role=message.author.role,
                        content=content,
                        timestamp=message.create_time or 0,
                    )
                )

        # Only the first child is followed; later children are alternate branches
        current = mapping.get(current.children[0]) if current.children else None

    return thread


def extract_threads(conversations: list[ExportConversation]) -> list[ConversationThread]:
    """Extract the primary thread of every conversation, in export order."""
    return [extract_thread(conv) for conv in conversations]


def load_export(path: str | Path) -> list[ConversationThread]:
    """Read an export file from disk and extract its threads."""
    filepath = Path(path)
    try:
        text = filepath.read_bytes()
    except OSError as e:
        raise InvalidExportFormat(f"Cannot read export file {filepath}: {e}") from e

    threads = extract_threads(parse_export(text))
    logger.info(f"Loaded {len(threads)} conversations from {filepath}")
    return threads


def build_pairs(thread: ConversationThread) -> list[QAPair]:
    """
    Pair each assistant message with the user message right before it.

    An assistant message not preceded by a user message gets no prompt.
    """
    pairs = []
    previous: Message | None = None
    for msg in thread.messages:
        if msg.role == Role.ASSISTANT:
            prompt = previous if previous is not None and previous.role == Role.USER else None
            pairs.append(
                QAPair(
                    pair_id=pair_id(
                        thread.conversation_id,
                        prompt.id if prompt else None,
                        msg.id,
                    ),
                    conversation_id=thread.conversation_id,
                    prompt=prompt,
                    response=msg,
                )
            )
        previous = msg
    return pairs


def find_pair(thread: ConversationThread, target_pair_id: str) -> QAPair | None:
    """Look up a pair of the thread by id."""
    for pair in build_pairs(thread):
        if pair.pair_id == target_pair_id:
            return pair
    return None
