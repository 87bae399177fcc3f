"""File store abstract interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class FileStore(ABC):
    """Whole-file text storage used by the synchronizers.

    Implementations raise ``OSError`` on failure; callers translate it into
    the matching structured error.
    """

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        ...

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a UTF-8 file."""
        ...

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write a UTF-8 file, creating parent directories."""
        ...

    @abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        ...

    @abstractmethod
    def write_bytes(self, path: Path, content: bytes) -> None:
        ...

    @abstractmethod
    def list_files(self, root: Path) -> list[Path]:
        """List files below *root* (recursive), relative to it, sorted."""
        ...

    def read_lines(self, path: Path) -> list[str] | None:
        """Return the file's lines, or None if it does not exist."""
        if not self.is_file(path):
            return None
        return self.read_text(path).splitlines()
