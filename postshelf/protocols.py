"""Protocol definitions for Postshelf.

These protocols describe the two collaborators a PostStore depends on:
something that reads post files and something that lists configured
posts. Tests and host applications can substitute their own.
"""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .config import PostEntry


@runtime_checkable
class PostReader(Protocol):
    """Protocol for reading a post's source text."""

    @abstractmethod
    def read(self, path: Path) -> str:
        """Read a post file as text.

        Args:
            path: Path to the Markdown file.

        Returns:
            Decoded file contents.

        Raises:
            OSError: If the file is missing or unreadable.
        """
        ...


@runtime_checkable
class EntrySource(Protocol):
    """Protocol for listing configured posts in configuration order."""

    @abstractmethod
    def entries(self) -> list[PostEntry]:
        """Return the configured post entries."""
        ...
