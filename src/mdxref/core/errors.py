"""Error hierarchy for mdxref."""

from __future__ import annotations


class MdxrefError(Exception):
    """Base exception for all mdxref errors."""

    pass


class ConfigError(MdxrefError):
    """Configuration loading or validation error."""

    pass


class ManifestError(MdxrefError):
    """Batch manifest loading or validation error."""

    pass


class DocumentIOError(MdxrefError):
    """A rendered document could not be read or written."""

    def __init__(self, path: str, context: str, message: str) -> None:
        super().__init__(f"Cannot {context} {path}: {message}")
        self.path = path
        self.context = context
