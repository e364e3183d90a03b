from __future__ import annotations

"""
Unit tests for the error taxonomy.
"""

import pytest

from langmanager.domain.errors import (
    DirectoryNotFound,
    LangManagerError,
    LocaleNotFound,
    NotADirectory,
    ParseFailure,
)


@pytest.mark.parametrize("exc, builtin", [
    (DirectoryNotFound("/x"), FileNotFoundError),
    (NotADirectory("/x"), NotADirectoryError),
    (ParseFailure("en.json", "bad"), ValueError),
    (LocaleNotFound("de"), LookupError),
])
def test_errors_extend_builtin_counterparts(exc: Exception, builtin: type) -> None:
    assert isinstance(exc, LangManagerError)
    assert isinstance(exc, builtin)


def test_messages_identify_their_subject() -> None:
    assert str(DirectoryNotFound("/x")) == "Directory does not exist: /x"
    assert str(NotADirectory("/x/f")) == "Path exists but is not a directory: /x/f"
    assert str(ParseFailure("en.json", "bad")) == "Failed to parse 'en.json': bad"
    assert str(LocaleNotFound("de")) == "Locale 'de' not found"
