from __future__ import annotations

"""
Error Taxonomy.

Construction errors (DirectoryNotFound, NotADirectory) propagate to the caller.
ParseFailure is raised by the single-file load path and absorbed by the store.
LocaleNotFound is the only error of the steady-state lookup path.
"""


class LangManagerError(Exception):
    """Base class for every error raised by langmanager."""


class DirectoryNotFound(LangManagerError, FileNotFoundError):
    """The resource directory does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory does not exist: {path}")


class NotADirectory(LangManagerError, NotADirectoryError):
    """The resource path exists but is not a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path exists but is not a directory: {path}")


class ParseFailure(LangManagerError, ValueError):
    """A resource file could not be turned into a flat resource map."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Failed to parse '{filename}': {reason}")


class LocaleNotFound(LangManagerError, LookupError):
    """No resource file is loaded for the requested locale."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(f"Locale '{locale}' not found")
