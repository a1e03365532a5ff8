"""Filesystem document store."""

from __future__ import annotations

from pathlib import Path

from mdxref.core.errors import DocumentIOError
from mdxref.core.interfaces import DocumentStorePort


class FilesystemDocumentStore(DocumentStorePort):
    """Reads and writes rendered documents as UTF-8 files.

    Relative document paths are resolved against ``root``.
    """

    def __init__(self, root: str | Path = ".") -> None:
        self.root = Path(root)

    def read_text(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(path, "read", str(e)) from e

    def write_text(self, path: str, content: str) -> None:
        try:
            self._resolve(path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise DocumentIOError(path, "write", str(e)) from e

    def _resolve(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.root / candidate
