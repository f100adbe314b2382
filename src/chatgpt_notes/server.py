"""FastMCP server for ChatGPT Notes."""

import functools
import logging
import os
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .actions import (
    Workspace,
    default_note_title,
    ignore_pair,
    reset_pair,
    save_pair,
    summarize_thread,
)
from .config import (
    DEFAULT_FOLDER,
    DEFAULT_INCLUDE_TAGS,
    DEFAULT_INCLUDE_TIMESTAMPS,
    DEFAULT_INCLUDE_USER_PROMPTS,
    DEFAULT_TAGS,
    EXPORT_ENV,
    FOLDER_ENV,
    INCLUDE_PROMPTS_ENV,
    INCLUDE_TAGS_ENV,
    INCLUDE_TIMESTAMPS_ENV,
    TAGS_ENV,
    VAULT_ENV,
)
from .errors import InvalidExportFormat
from .loader import build_pairs, find_pair, load_export
from .models import ConversationThread, NoteOptions, QAPair

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# Create the MCP server
mcp = FastMCP("chatgpt-notes")


def _get_vault_root() -> str:
    """
    Get the vault directory notes are saved into.

    Uses CHATGPT_NOTES_VAULT, falling back to PWD/CWD.
    """
    vault = os.environ.get(VAULT_ENV)
    if vault:
        return vault
    return os.environ.get("PWD") or os.getcwd()


def _get_export_path(export_path: str | None) -> Path:
    path = export_path or os.environ.get(EXPORT_ENV)
    if not path:
        raise ValueError(f"No export file given. Pass export_path or set {EXPORT_ENV}.")
    return Path(path).expanduser()


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid {name} value: {value}, using default")
    return default


def get_note_options() -> NoteOptions:
    """Note rendering switches, with environment overrides."""
    return NoteOptions(
        include_timestamps=_env_flag(INCLUDE_TIMESTAMPS_ENV, DEFAULT_INCLUDE_TIMESTAMPS),
        include_user_prompt=_env_flag(INCLUDE_PROMPTS_ENV, DEFAULT_INCLUDE_USER_PROMPTS),
        include_tags=_env_flag(INCLUDE_TAGS_ENV, DEFAULT_INCLUDE_TAGS),
    )


def get_default_folder() -> str:
    return os.environ.get(FOLDER_ENV, DEFAULT_FOLDER)


def get_default_tags() -> str:
    return os.environ.get(TAGS_ENV, DEFAULT_TAGS)


@functools.lru_cache(maxsize=8)
def _get_workspace(root: str) -> Workspace:
    """Get or open the workspace for a vault (one per root via lru_cache)."""
    return Workspace.open(root)


@functools.lru_cache(maxsize=4)
def _load_threads_cached(path: str, mtime: float) -> tuple[ConversationThread, ...]:
    # mtime is part of the cache key so edited exports are re-read
    return tuple(load_export(path))


def _load_threads(export_path: str | None) -> tuple[ConversationThread, ...]:
    path = _get_export_path(export_path)
    try:
        mtime = path.stat().st_mtime
    except OSError as e:
        raise InvalidExportFormat(f"Cannot read export file {path}: {e}") from e
    return _load_threads_cached(str(path), mtime)


def _find_thread(conversation_id: str, export_path: str | None) -> ConversationThread:
    for thread in _load_threads(export_path):
        if thread.conversation_id == conversation_id:
            return thread
    raise ValueError(f"Conversation not found: {conversation_id}")


def _find_pair(thread: ConversationThread, pair_id: str) -> QAPair:
    pair = find_pair(thread, pair_id)
    if pair is None:
        raise ValueError(f"Response {pair_id} not found in conversation {thread.conversation_id}")
    return pair


@mcp.tool()
def list_conversations(export_path: str | None = None) -> dict:
    """
    List the conversations of a ChatGPT export with their processing status.

    Status is "unprocessed" (nothing saved or ignored yet), "partial", or
    "processed" (every response saved or ignored).

    Args:
        export_path: Path to conversations.json (default: CHATGPT_NOTES_EXPORT)

    Returns:
        Conversations with id, title, creation time, message and response
        counts, and status
    """
    workspace = _get_workspace(_get_vault_root())
    summaries = [
        summarize_thread(thread, workspace.state).model_dump(mode="json")
        for thread in _load_threads(export_path)
    ]
    return {"conversations": summaries, "total": len(summaries)}


@mcp.tool()
def show_conversation(conversation_id: str, export_path: str | None = None) -> dict:
    """
    Show the question/answer pairs of one conversation.

    Args:
        conversation_id: Id from list_conversations
        export_path: Path to conversations.json (default: CHATGPT_NOTES_EXPORT)

    Returns:
        The conversation summary, the suggested note title, and each pair
        with its pair_id, state, prompt and response
    """
    workspace = _get_workspace(_get_vault_root())
    thread = _find_thread(conversation_id, export_path)
    pairs = []
    for pair in build_pairs(thread):
        pairs.append(
            {
                "pair_id": pair.pair_id,
                "state": workspace.state.get_state(pair.pair_id).value,
                "prompt": pair.prompt.content if pair.prompt else None,
                "response": pair.response.content,
                "timestamp": pair.response.timestamp,
            }
        )
    return {
        "conversation": summarize_thread(thread, workspace.state).model_dump(mode="json"),
        "suggested_title": default_note_title(thread),
        "pairs": pairs,
    }


@mcp.tool()
def save_response(
    conversation_id: str,
    pair_id: str,
    title: str | None = None,
    folder: str | None = None,
    tags: str | None = None,
    export_path: str | None = None,
) -> dict:
    """
    Save one response as a Markdown note in the vault and mark it saved.

    An existing note with the same name is never overwritten; a numbered
    name like "Title (1).md" is used instead.

    Args:
        conversation_id: Id from list_conversations
        pair_id: Id from show_conversation
        title: Note title (default: "<conversation title> - Response")
        folder: Vault folder (default: CHATGPT_NOTES_FOLDER or "ChatGPT")
        tags: Comma-separated tags (default: CHATGPT_NOTES_TAGS or "chatgpt, ai")
        export_path: Path to conversations.json (default: CHATGPT_NOTES_EXPORT)

    Returns:
        The vault-relative path of the note and the new state
    """
    workspace = _get_workspace(_get_vault_root())
    thread = _find_thread(conversation_id, export_path)
    result = save_pair(
        workspace,
        thread,
        _find_pair(thread, pair_id),
        title=title,
        folder=get_default_folder() if folder is None else folder,
        tags=get_default_tags() if tags is None else tags,
        options=get_note_options(),
    )
    return result.model_dump(mode="json")


@mcp.tool()
def ignore_response(conversation_id: str, pair_id: str, export_path: str | None = None) -> dict:
    """
    Mark a response as ignored so it no longer counts as unprocessed.

    Args:
        conversation_id: Id from list_conversations
        pair_id: Id from show_conversation
        export_path: Path to conversations.json (default: CHATGPT_NOTES_EXPORT)
    """
    workspace = _get_workspace(_get_vault_root())
    thread = _find_thread(conversation_id, export_path)
    record = ignore_pair(workspace, _find_pair(thread, pair_id))
    return {"pair_id": record.pair_id, "state": record.state.value}


@mcp.tool()
def reset_response(conversation_id: str, pair_id: str, export_path: str | None = None) -> dict:
    """
    Return a saved or ignored response to new. Saved notes are left in place.

    Args:
        conversation_id: Id from list_conversations
        pair_id: Id from show_conversation
        export_path: Path to conversations.json (default: CHATGPT_NOTES_EXPORT)
    """
    workspace = _get_workspace(_get_vault_root())
    thread = _find_thread(conversation_id, export_path)
    record = reset_pair(workspace, _find_pair(thread, pair_id))
    return {"pair_id": record.pair_id, "state": record.state.value}


def main():
    """Run the MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
