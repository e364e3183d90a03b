from __future__ import annotations

"""
Resource Store.

Owns the locale table (locale -> flat resource map) and exposes the only
operations allowed to mutate it: load_all, reload and evict. Read and parse
failures never escape the store: they are logged, recorded in 'failures' and
the previous entry for the locale is left untouched.
"""

import copy
import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional

from langmanager.core.flattener import flatten
from langmanager.domain.constants import DEFAULT_SEPARATOR, RESOURCE_EXTENSION
from langmanager.domain.errors import ParseFailure
from langmanager.domain.models import FlatResourceMap
from langmanager.infra.fs import FileSystem

logger = logging.getLogger(__name__)

ParseFn = Callable[[str], Any]


class ResourceStore:
    """
    In-memory table of flattened translation resources.

    Every mutation replaces a whole per-locale map in a single assignment,
    so concurrent readers see either the previous or the new version.
    """

    def __init__(
            self,
            directory: str,
            *,
            separator: str = DEFAULT_SEPARATOR,
            extension: str = RESOURCE_EXTENSION,
            fs: Optional[FileSystem] = None,
            parse: ParseFn = json.loads,
    ) -> None:
        """
        Args:
            directory: Directory the resource filenames are relative to.
            separator: Joiner used when flattening nested keys.
            extension: Recognized resource file extension.
            fs: Filesystem capability used to read files.
            parse: Text -> value tree parser.
        """
        self.directory = directory
        self.separator = separator
        self.extension = extension
        self._fs = fs or FileSystem()
        self._parse = parse
        self._table: Dict[str, FlatResourceMap] = {}
        self.failures: Dict[str, str] = {}

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------
    def accepts(self, filename: Optional[str]) -> bool:
        """True if the filename carries the recognized extension."""
        return bool(filename) and filename.endswith(self.extension) and filename != self.extension

    def locale_for(self, filename: str) -> str:
        """Entry name without the recognized extension ("en.i18n.json" -> "en")."""
        name = os.path.basename(filename)
        if self.extension and name.endswith(self.extension):
            return name[:-len(self.extension)]
        return os.path.splitext(name)[0]

    def path_for(self, filename: str) -> str:
        return os.path.join(self.directory, filename)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    def load_all(self, filenames: Iterable[str]) -> int:
        """
        Load every recognized file of a directory listing.

        Args:
            filenames: Entry names of the resource directory.

        Returns:
            int: Number of locales loaded successfully.
        """
        loaded = 0
        for filename in filenames:
            if not self.accepts(filename):
                continue
            if self.reload(filename):
                loaded += 1
        logger.debug(f"ResourceStore: Initial scan loaded {loaded} locale(s) from {self.directory}")
        return loaded

    def reload(self, filename: str) -> bool:
        """
        Re-read a single resource file and replace its locale entry.

        On a read or parse failure the current entry (if any) is kept as is,
        favoring stale translations over missing ones.

        Args:
            filename: Entry name inside the resource directory.

        Returns:
            bool: True if the locale entry was (re)loaded.
        """
        locale = self.locale_for(filename)
        try:
            resources = self._load(filename)
        except OSError as e:
            self._record_failure(filename, f"read error: {e}")
            return False
        except ParseFailure as e:
            self._record_failure(filename, e.reason)
            return False

        replaced = locale in self._table
        self._table[locale] = resources
        self.failures.pop(filename, None)
        logger.info(
            f"ResourceStore: {'Reloaded' if replaced else 'Loaded'} locale '{locale}' "
            f"({len(resources)} keys)"
        )
        return True

    def evict(self, locale: str) -> bool:
        """
        Drop a locale entry. Evicting an unknown locale is a no-op.

        Returns:
            bool: True if an entry was removed.
        """
        removed = self._table.pop(locale, None) is not None
        if removed:
            logger.info(f"ResourceStore: Evicted locale '{locale}'")
        return removed

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def lookup(self, locale: str) -> Optional[FlatResourceMap]:
        return self._table.get(locale)

    @property
    def locales(self) -> List[str]:
        return sorted(self._table)

    def snapshot(self) -> Dict[str, FlatResourceMap]:
        """Deep copy of the locale table."""
        return copy.deepcopy(self._table)

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------
    def _load(self, filename: str) -> FlatResourceMap:
        try:
            text = self._fs.read_text(self.path_for(filename))
        except UnicodeDecodeError as e:
            raise ParseFailure(filename, f"undecodable content: {e}") from e

        try:
            tree = self._parse(text)
        except ValueError as e:
            raise ParseFailure(filename, str(e)) from e
        except RecursionError as e:
            raise ParseFailure(filename, f"nesting too deep: {e}") from e

        try:
            return flatten(tree, self.separator)
        except TypeError as e:
            raise ParseFailure(filename, str(e)) from e
        except RecursionError as e:
            raise ParseFailure(filename, f"nesting too deep: {e}") from e

    def _record_failure(self, filename: str, reason: str) -> None:
        self.failures[filename] = reason
        logger.error(f"ResourceStore: Failed to load '{filename}': {reason}")
