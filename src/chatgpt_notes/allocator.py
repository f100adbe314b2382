"""Collision-free note paths in the vault namespace."""

import logging
from collections.abc import Collection

from .config import FORBIDDEN_FILENAME_CHARS, MAX_COLLISION_RETRIES, NOTE_EXTENSION
from .documents import DocumentStore
from .errors import TooManyCollisions

logger = logging.getLogger(__name__)

_SANITIZE_TABLE = str.maketrans({c: "-" for c in FORBIDDEN_FILENAME_CHARS})


def split_path(path: str) -> tuple[str, str, str]:
    """
    Split a path into (directory prefix, base name, extension).

    The prefix keeps its trailing slash and the extension keeps its dot; both
    are empty when absent. Only the last segment is searched for the dot.

    >>> split_path("Folder/Note.md")
    ('Folder/', 'Note', '.md')
    """
    slash = path.rfind("/")
    prefix, name = path[: slash + 1], path[slash + 1 :]
    dot = name.rfind(".")
    if dot < 0:
        return prefix, name, ""
    return prefix, name[:dot], name[dot:]


def sanitize_title(title: str) -> str:
    """Replace each character that is unsafe in file names with a dash."""
    return title.translate(_SANITIZE_TABLE)


def with_counter(path: str, counter: int) -> str:
    """``dir/name.ext`` -> ``dir/name (counter).ext``."""
    prefix, name, extension = split_path(path)
    return f"{prefix}{name} ({counter}){extension}"


def unique_path(
    documents: DocumentStore,
    candidate: str,
    *,
    exclude: Collection[str] = (),
    max_retries: int = MAX_COLLISION_RETRIES,
) -> str:
    """
    First free variant of ``candidate``: itself, then ``name (1).ext``,
    ``name (2).ext`` and so on. Paths in ``exclude`` count as taken.

    Raises:
        TooManyCollisions: If no free variant is found within ``max_retries``.
    """

    def taken(path: str) -> bool:
        return path in exclude or documents.exists(path) is not None

    final_path = candidate
    counter = 1
    while taken(final_path):
        if counter > max_retries:
            raise TooManyCollisions(candidate, max_retries)
        final_path = with_counter(candidate, counter)
        counter += 1
    return final_path


def allocate_note_path(
    documents: DocumentStore,
    title: str,
    directory: str = "",
    *,
    exclude: Collection[str] = (),
    max_retries: int = MAX_COLLISION_RETRIES,
) -> str:
    """
    Reserve a name for a new note titled ``title`` inside ``directory``.

    Creates the directory if it does not exist yet. Only a name is reserved;
    the caller still has to create the document and may lose a race for it.
    """
    folder = directory.strip()
    if folder and documents.exists(folder) is None:
        logger.debug(f"Creating folder {folder}")
        documents.create_directory(folder)

    filename = sanitize_title(title) + NOTE_EXTENSION
    candidate = f"{folder}/{filename}" if folder else filename
    return unique_path(documents, candidate, exclude=exclude, max_retries=max_retries)
