"""Error kinds raised by ChatGPT Notes."""


class ChatGPTNotesError(Exception):
    """Base class for all errors raised by this package."""


class InvalidExportFormat(ChatGPTNotesError):
    """The export file could not be parsed or has an unexpected shape."""


class CorruptStateFile(ChatGPTNotesError):
    """The persisted pair state exists but cannot be read back."""


class AlreadyExistsError(ChatGPTNotesError):
    """A document was created at a path that is already taken."""

    def __init__(self, path: str):
        super().__init__(f"Document already exists: {path}")
        self.path = path


class TooManyCollisions(ChatGPTNotesError):
    """No free name was found within the retry bound."""

    def __init__(self, path: str, attempts: int):
        super().__init__(
            f"Could not find a free name for {path} after {attempts} attempts. "
            "Pick a different title or folder."
        )
        self.path = path
        self.attempts = attempts


class PersistenceFailure(ChatGPTNotesError):
    """Writing to the document store failed.

    When raised after a note was already created, ``note_path`` names it so the
    caller can report the partial success.
    """

    def __init__(self, message: str, note_path: str | None = None):
        super().__init__(message)
        self.note_path = note_path
