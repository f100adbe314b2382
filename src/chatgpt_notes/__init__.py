"""ChatGPT Notes - Turn ChatGPT export conversations into vault notes."""

from .actions import Workspace, ignore_pair, reset_pair, save_pair, summarize_thread
from .allocator import allocate_note_path, sanitize_title, split_path, unique_path
from .documents import DocumentStore, VaultDocumentStore
from .errors import (
    AlreadyExistsError,
    ChatGPTNotesError,
    CorruptStateFile,
    InvalidExportFormat,
    PersistenceFailure,
    TooManyCollisions,
)
from .loader import build_pairs, extract_thread, extract_threads, load_export, parse_export
from .models import (
    ConversationStatus,
    ConversationThread,
    Message,
    NoteOptions,
    PairRecord,
    PairState,
    QAPair,
)
from .serializer import render_note
from .state import PairStateStore, pair_id

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Workspace",
    "save_pair",
    "ignore_pair",
    "reset_pair",
    "summarize_thread",
    "allocate_note_path",
    "sanitize_title",
    "split_path",
    "unique_path",
    "DocumentStore",
    "VaultDocumentStore",
    "ChatGPTNotesError",
    "InvalidExportFormat",
    "CorruptStateFile",
    "AlreadyExistsError",
    "TooManyCollisions",
    "PersistenceFailure",
    "parse_export",
    "extract_thread",
    "extract_threads",
    "load_export",
    "build_pairs",
    "ConversationStatus",
    "ConversationThread",
    "Message",
    "NoteOptions",
    "PairRecord",
    "PairState",
    "QAPair",
    "render_note",
    "PairStateStore",
    "pair_id",
]
