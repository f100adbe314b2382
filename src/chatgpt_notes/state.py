"""Stable pair identity and persisted pair lifecycle state."""

import hashlib
import json
import logging
import threading
import time

from pydantic import ValidationError

from .config import HASH_SAMPLE_LENGTH, PREVIEW_LENGTH, STATE_FILE_NAME
from .documents import DocumentStore
from .errors import AlreadyExistsError, CorruptStateFile, PersistenceFailure
from .models import ConversationStatus, PairRecord, PairState, PairStore

logger = logging.getLogger(__name__)

PAIR_ID_SEPARATOR = "_"
# Escaped components never contain a bare "%", so this cannot collide
NO_USER_MESSAGE = "%none"


def _escape_component(component: str) -> str:
    return component.replace("%", "%25").replace(PAIR_ID_SEPARATOR, "%5F")


def pair_id(
    conversation_id: str, user_message_id: str | None, assistant_message_id: str
) -> str:
    """
    Derive the identity of a question/answer pair from message ids.

    The id depends only on ids, never on content. Components are escaped so
    that distinct triples always yield distinct ids; plain ids come out as
    ``conversation_user_assistant``.
    """
    user = NO_USER_MESSAGE if user_message_id is None else _escape_component(user_message_id)
    return PAIR_ID_SEPARATOR.join(
        [_escape_component(conversation_id), user, _escape_component(assistant_message_id)]
    )


def content_hash(prompt: str, response: str) -> str:
    """
    Hash of the leading text of a pair, kept for future deduplication.

    This is an MD5 hex digest. Older state files carry a ``pairHash`` from a
    different string hash, so those values never equal a freshly computed one.
    """
    sample = json.dumps(
        {"userPrompt": prompt[:HASH_SAMPLE_LENGTH], "response": response[:HASH_SAMPLE_LENGTH]}
    )
    return hashlib.md5(sample.encode()).hexdigest()


def _now_ms() -> int:
    return int(time.time() * 1000)


def _empty_store() -> PairStore:
    return PairStore(last_updated=_now_ms())


def parse_state_document(content: str, path: str = STATE_FILE_NAME) -> PairStore:
    """
    Parse a persisted state document.

    Legacy conversation-level documents and unknown shapes reset to an empty
    store. Unparseable JSON, or a ``qaPairs`` document with invalid records,
    raises CorruptStateFile.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise CorruptStateFile(f"Pair state file {path} is not valid JSON: {e}") from e

    if isinstance(data, dict) and "qaPairs" in data:
        try:
            return PairStore.model_validate(data)
        except ValidationError as e:
            raise CorruptStateFile(f"Pair state file {path} has invalid records") from e

    if isinstance(data, dict) and "conversations" in data:
        logger.info(f"Discarding legacy conversation-level state in {path}")
    else:
        logger.warning(f"Unrecognized pair state shape in {path}, starting with empty state")
    return _empty_store()


def merge_pairs(
    persisted: dict[str, PairRecord], current: dict[str, PairRecord]
) -> dict[str, PairRecord]:
    """
    Merge two pair maps without dropping any pair.

    For a pair present in both, the later ``last_modified`` wins; ties go to
    ``current``.
    """
    merged = dict(persisted)
    for key, record in current.items():
        other = merged.get(key)
        if other is None or record.last_modified >= other.last_modified:
            merged[key] = record
    return merged


class PairStateStore:
    """
    In-memory pair states with write-through persistence.

    One instance owns the state document of a vault. All mutations are
    serialized by an internal lock, and every persistence merges with the
    document on disk under the document store's lock.
    """

    def __init__(self, documents: DocumentStore, path: str = STATE_FILE_NAME):
        self._documents = documents
        self._path = path
        self._store = _empty_store()
        self._lock = threading.RLock()

    @property
    def path(self) -> str:
        return self._path

    @property
    def last_updated(self) -> int:
        return self._store.last_updated

    def records(self) -> dict[str, PairRecord]:
        """Snapshot of all stored records keyed by pair id."""
        with self._lock:
            return dict(self._store.pairs)

    def get_record(self, pair_id: str) -> PairRecord | None:
        return self._store.pairs.get(pair_id)

    def get_state(self, pair_id: str) -> PairState:
        """State of a pair; pairs never recorded are NEW."""
        record = self._store.pairs.get(pair_id)
        return record.state if record else PairState.NEW

    def load(self) -> None:
        """
        Replace the in-memory state with the persisted document.

        A missing document gives an empty store.

        Raises:
            CorruptStateFile: If the document exists but cannot be parsed.
            PersistenceFailure: If the document exists but cannot be read.
        """
        with self._lock:
            self._store = self._read_persisted()
            logger.debug(f"Loaded {len(self._store.pairs)} pair records from {self._path}")

    def _read_persisted(self) -> PairStore:
        if self._documents.exists(self._path) is None:
            return _empty_store()
        try:
            content = self._documents.read(self._path)
        except UnicodeDecodeError as e:
            raise CorruptStateFile(f"Pair state file {self._path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise PersistenceFailure(f"Cannot read pair state from {self._path}: {e}") from e
        return parse_state_document(content, self._path)

    def update_state(
        self,
        pair_id: str,
        state: PairState,
        conversation_id: str,
        prompt: str,
        response: str,
    ) -> PairRecord:
        """
        Record a state transition and persist the whole store.

        The in-memory record is applied before persisting and is kept even if
        persisting fails.

        Raises:
            PersistenceFailure: If the document store rejects the write.
        """
        record = PairRecord(
            pair_id=pair_id,
            content_hash=content_hash(prompt, response),
            conversation_id=conversation_id,
            state=PairState(state),
            last_modified=_now_ms(),
            prompt_preview=prompt[:PREVIEW_LENGTH],
            response_preview=response[:PREVIEW_LENGTH],
        )
        with self._lock:
            self._store.pairs[pair_id] = record
            self._persist()
        return record

    def _persist(self):
        try:
            with self._documents.lock(self._path):
                on_disk = self._read_persisted()
                self._store = PairStore(
                    pairs=merge_pairs(on_disk.pairs, self._store.pairs),
                    last_updated=_now_ms(),
                )
                content = self._store.model_dump_json(by_alias=True, indent=2)
                if self._documents.exists(self._path) is None:
                    self._documents.create(self._path, content)
                else:
                    self._documents.write(self._path, content)
        except (OSError, AlreadyExistsError) as e:
            logger.exception(f"Failed to persist pair state to {self._path}")
            raise PersistenceFailure(f"Failed to save pair state: {e}") from e

    def conversation_status(
        self, conversation_id: str, total_assistant_messages: int | None = None
    ) -> ConversationStatus:
        """
        Aggregate status of a conversation.

        Without a total, only recorded pairs are considered. With a total,
        assistant messages that were never recorded count as NEW.
        """
        recorded = [r for r in self._store.pairs.values() if r.conversation_id == conversation_id]
        new_recorded = sum(1 for r in recorded if r.state == PairState.NEW)

        if total_assistant_messages is None:
            if not recorded:
                return ConversationStatus.UNPROCESSED
            return ConversationStatus.PARTIAL if new_recorded else ConversationStatus.PROCESSED

        processed = len(recorded) - new_recorded
        unrecorded = total_assistant_messages - len(recorded)
        total_new = new_recorded + unrecorded

        if total_new == 0:
            return ConversationStatus.PROCESSED
        if processed > 0:
            return ConversationStatus.PARTIAL
        return ConversationStatus.UNPROCESSED
