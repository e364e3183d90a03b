from __future__ import annotations

"""
langmanager: hot-reloading JSON translation resources.
"""

from langmanager.domain.errors import (
    DirectoryNotFound,
    LangManagerError,
    LocaleNotFound,
    NotADirectory,
    ParseFailure,
)
from langmanager.manager import ResourceManager, Translator, open_manager

__version__ = "1.0.0"

__all__ = [
    "DirectoryNotFound",
    "LangManagerError",
    "LocaleNotFound",
    "NotADirectory",
    "ParseFailure",
    "ResourceManager",
    "Translator",
    "open_manager",
]
