from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin adapter over the 'os' module providing the four capabilities the core
consumes: directory validation, directory listing, existence checks and text
reads. The store and the reconciler receive an instance so tests can swap in
an in-memory double.
"""

import os
import stat
from typing import List

from langmanager.domain.constants import DEFAULT_ENCODING
from langmanager.domain.errors import DirectoryNotFound, NotADirectory


class FileSystem:
    """
    Filesystem capabilities rooted at real disk paths.

    Attributes:
        encoding: Text encoding used by read_text().
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def validate_directory(self, path: str) -> str:
        """
        Ensure that a path names an existing directory.

        Args:
            path: Candidate directory path.

        Returns:
            str: The absolute path of the directory.

        Raises:
            DirectoryNotFound: If nothing exists at the path.
            NotADirectory: If the path exists but is not a directory.
        """
        abs_path = os.path.abspath(path)
        try:
            st = os.stat(abs_path)
        except FileNotFoundError:
            raise DirectoryNotFound(path) from None

        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectory(path)
        return abs_path

    def exists(self, path: str) -> bool:
        """
        Check whether a path exists.

        Returns False only on a definite 'not found'. Any other failure
        (permission denied, I/O error) propagates as OSError.
        """
        try:
            os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True

    def list_entries(self, path: str) -> List[str]:
        """Return the sorted names of the entries in a directory."""
        return sorted(os.listdir(path))

    def read_text(self, path: str) -> str:
        """Read a whole text file."""
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()