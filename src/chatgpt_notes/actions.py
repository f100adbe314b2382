"""Save, ignore and reset actions on question/answer pairs."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from .allocator import allocate_note_path
from .config import DEFAULT_FOLDER, DEFAULT_TAGS, DEFAULT_TITLE_SUFFIX, MAX_CREATE_ATTEMPTS
from .documents import DocumentStore, VaultDocumentStore
from .errors import AlreadyExistsError, CorruptStateFile, PersistenceFailure
from .models import (
    ConversationSummary,
    ConversationThread,
    NoteOptions,
    PairRecord,
    PairState,
    QAPair,
    SaveResult,
)
from .serializer import render_note
from .state import PairStateStore

logger = logging.getLogger(__name__)


class Workspace:
    """A vault: its document store and the pair state persisted in it."""

    def __init__(self, documents: DocumentStore, state: PairStateStore | None = None):
        self.documents = documents
        self.state = state or PairStateStore(documents)

    @classmethod
    def open(cls, root: str | Path) -> "Workspace":
        """Open the vault at ``root`` and load its pair state."""
        workspace = cls(VaultDocumentStore(root))
        workspace.state.load()
        return workspace


def default_note_title(thread: ConversationThread) -> str:
    return f"{thread.title}{DEFAULT_TITLE_SUFFIX}"


def summarize_thread(thread: ConversationThread, state: PairStateStore) -> ConversationSummary:
    """Listing row for a conversation, with its processing status."""
    created = None
    if thread.create_time:
        created = datetime.fromtimestamp(thread.create_time, tz=timezone.utc)
    return ConversationSummary(
        conversation_id=thread.conversation_id,
        title=thread.title,
        created=created,
        message_count=len(thread.messages),
        response_count=thread.assistant_count,
        status=state.conversation_status(thread.conversation_id, thread.assistant_count),
    )


def _prompt_text(pair: QAPair) -> str | None:
    return pair.prompt.content if pair.prompt is not None else None


def save_pair(
    workspace: Workspace,
    thread: ConversationThread,
    pair: QAPair,
    *,
    title: str | None = None,
    folder: str | None = None,
    tags: str | None = None,
    options: NoteOptions | None = None,
    max_attempts: int = MAX_CREATE_ATTEMPTS,
) -> SaveResult:
    """
    Write a pair as a new note and mark it SAVED.

    A create that loses a race for its path is retried with that path
    excluded. Saving the same pair again produces another note rather than
    overwriting the first.

    Raises:
        AlreadyExistsError: If every attempt lost its race.
        TooManyCollisions: If the allocator runs out of names.
        PersistenceFailure: If the note or the state cannot be written. When
            the note was created, ``note_path`` is set and the note stays.
    """
    title = default_note_title(thread) if title is None else title
    folder = DEFAULT_FOLDER if folder is None else folder
    tags = DEFAULT_TAGS if tags is None else tags
    prompt = _prompt_text(pair)

    content = render_note(
        title,
        tags,
        prompt,
        pair.response.content,
        thread.title,
        pair.response.timestamp,
        options,
    )

    rejected: list[str] = []
    while True:
        path = None
        try:
            path = allocate_note_path(workspace.documents, title, folder, exclude=rejected)
            workspace.documents.create(path, content)
            break
        except AlreadyExistsError:
            rejected.append(path)
            if len(rejected) >= max_attempts:
                raise
            logger.warning(
                f"{path} was taken before it could be created, "
                f"retrying ({len(rejected)}/{max_attempts})"
            )
        except OSError as e:
            raise PersistenceFailure(f"Failed to create note {path or title}: {e}") from e

    try:
        workspace.state.update_state(
            pair.pair_id,
            PairState.SAVED,
            pair.conversation_id,
            prompt or "",
            pair.response.content,
        )
    except (PersistenceFailure, CorruptStateFile) as e:
        raise PersistenceFailure(
            f"Note saved to {path} but its state could not be recorded: {e}",
            note_path=path,
        ) from e

    return SaveResult(
        path=path,
        pair_id=pair.pair_id,
        state=PairState.SAVED,
        attempts=len(rejected) + 1,
    )


def _transition(workspace: Workspace, pair: QAPair, state: PairState) -> PairRecord:
    return workspace.state.update_state(
        pair.pair_id,
        state,
        pair.conversation_id,
        _prompt_text(pair) or "",
        pair.response.content,
    )


def ignore_pair(workspace: Workspace, pair: QAPair) -> PairRecord:
    """Mark a pair as deliberately skipped."""
    return _transition(workspace, pair, PairState.IGNORED)


def reset_pair(workspace: Workspace, pair: QAPair) -> PairRecord:
    """Return a pair to NEW. The record is kept, not deleted."""
    return _transition(workspace, pair, PairState.NEW)
