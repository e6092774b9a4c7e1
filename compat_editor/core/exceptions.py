"""Exception hierarchy for the compatibility editor.

All errors derive from :class:`CompatEditorError` so callers can catch
broadly or specifically.  None of them is fatal: each one is scoped to the
single load / save / config write that raised it.
"""

from __future__ import annotations


class CompatEditorError(Exception):
    """Base class for all editor errors."""

    def __init__(self, location: object, reason: object) -> None:
        self.location = str(location)
        self.reason = str(reason)
        super().__init__(f"{self.location}: {self.reason}")


class ReadError(CompatEditorError):
    """Raised when a document path or resource cannot be read."""


class ParseError(CompatEditorError):
    """Raised when a document is not valid JSON or not a top-level array."""


class WriteError(CompatEditorError):
    """Raised when a document cannot be written to its target path."""


class ConfigError(CompatEditorError):
    """Raised when the side configuration cannot be written.

    Only ever logged; losing the remembered path just means the next
    session asks for a file again.
    """
