"""Port interfaces for mdxref (hexagonal architecture)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class DocumentStorePort(ABC):
    """Port for reading and writing rendered Markdown documents."""

    @abstractmethod
    def read_text(self, path: str) -> str:
        """Read a rendered document.

        Args:
            path: Document path as recorded in its descriptor.

        Returns:
            The document content.

        Raises:
            DocumentIOError: If the document cannot be read.
        """

    @abstractmethod
    def write_text(self, path: str, content: str) -> None:
        """Overwrite a rendered document with new content.

        Args:
            path: Document path as recorded in its descriptor.
            content: The full new content.

        Raises:
            DocumentIOError: If the document cannot be written.
        """
