"""Hierarchical document storage backing notes and pair state."""

import contextlib
import os
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol

from filelock import FileLock

from .errors import AlreadyExistsError


class DocumentStore(Protocol):
    """
    Storage primitives used by the allocator and the pair state store.

    Paths are vault-relative and ``/``-separated.
    """

    def exists(self, path: str) -> object | None:
        """Return the entry at ``path`` or None."""
        ...

    def read(self, path: str) -> str:
        """Return the content at ``path``; fails if absent."""
        ...

    def write(self, path: str, content: str) -> None:
        """Overwrite the content at ``path``."""
        ...

    def create(self, path: str, content: str) -> None:
        """Create a new document; raises AlreadyExistsError if taken."""
        ...

    def create_directory(self, path: str) -> None:
        """Create a directory (and its parents)."""
        ...

    def lock(self, path: str) -> AbstractContextManager:
        """Exclusive lock for a read-modify-write of ``path``."""
        ...


class VaultDocumentStore:
    """DocumentStore over a directory on the local filesystem."""

    def __init__(self, root: str | Path, lock_timeout: float = 10.0):
        self.root = Path(root)
        self.lock_timeout = lock_timeout

    def _resolve(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p]
        if ".." in parts:
            raise ValueError(f"Path escapes the vault: {path}")
        return self.root.joinpath(*parts)

    def exists(self, path: str) -> Path | None:
        target = self._resolve(path)
        return target if target.exists() else None

    def read(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8")

    def write(self, path: str, content: str) -> None:
        """Atomic write: temp file then rename."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        temp_file = target.with_name(f"{target.name}.tmp.{os.getpid()}")
        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(temp_file, target)
        except OSError:
            with contextlib.suppress(OSError):
                temp_file.unlink()
            raise

    def create(self, path: str, content: str) -> None:
        """Create exclusively, so that only one of two racing creates wins."""
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(target, "x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError as e:
            raise AlreadyExistsError(path) from e

    def create_directory(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def lock(self, path: str) -> FileLock:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(f"{target}.lock", timeout=self.lock_timeout)
