from __future__ import annotations

"""
Resource Manager Facade.

Public entry point of the library. A ResourceManager validates its resource
directory, loads every '<locale>.json' file it contains and answers
get(locale, key, args) lookups. Once started, a polling watcher feeds
directory changes to a ChangeReconciler running on a single EventLoop thread,
so the in-memory translations follow the files on disk.

Usage:
    with ResourceManager.open("locales") as manager:
        manager.get("en", "greeting", {"name": "Alice"})   # -> "Hello Alice!"
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from langmanager.core.reconciler import ChangeReconciler
from langmanager.core.scheduler import EventLoop, Scheduler
from langmanager.core.store import ResourceStore
from langmanager.core.template import substitute
from langmanager.domain.config import ManagerConfig
from langmanager.domain.constants import DEFAULT_SEPARATOR
from langmanager.domain.errors import LocaleNotFound
from langmanager.domain.models import ChangeEvent
from langmanager.infra.fs import FileSystem
from langmanager.infra.watcher import DirectoryWatcher

logger = logging.getLogger(__name__)


class ResourceManager:
    """
    Locale-aware translation lookups backed by a directory of JSON files.

    Lookups are served from memory without locking. While watching, they
    may return the previous version of a file for up to one debounce window
    after it changed on disk.
    """

    def __init__(
            self,
            directory: str,
            separator: str = DEFAULT_SEPARATOR,
            *,
            config: Optional[ManagerConfig] = None,
            fs: Optional[FileSystem] = None,
            scheduler: Optional[Scheduler] = None,
    ) -> None:
        """
        Validate the directory and load its resource files.

        Args:
            directory: Resource directory.
            separator: Key separator. Ignored when config is given.
            config: Full validated configuration (overrides directory settings
                    other than the path itself).
            fs: Filesystem capability (defaults to the real disk).
            scheduler: Timer capability for the reconciler. Defaults to an
                       EventLoop. start() runs an EventLoop that is not yet
                       running and stop() halts only a loop start() launched.

        Raises:
            DirectoryNotFound: The directory does not exist.
            NotADirectory: The path is not a directory.
        """
        if config is None:
            config = ManagerConfig(directory=directory, separator=separator)
        self.config = config
        self._fs = fs or FileSystem(encoding=config.encoding)
        self.directory = self._fs.validate_directory(directory)

        self.store = ResourceStore(
            self.directory,
            separator=config.separator,
            extension=config.extension,
            fs=self._fs,
        )
        self._started_loop = False
        self._scheduler: Scheduler = scheduler or EventLoop()
        self.reconciler = ChangeReconciler(
            self.store,
            self._scheduler,
            fs=self._fs,
            debounce_seconds=config.debounce_seconds,
        )
        self._watcher: Optional[DirectoryWatcher] = None

        self.store.load_all(self._fs.list_entries(self.directory))
        logger.info(f"ResourceManager: {len(self.store.locales)} locale(s) ready in {self.directory}")

    @classmethod
    def open(cls, directory: str, separator: str = DEFAULT_SEPARATOR, **options: Any) -> "ResourceManager":
        """Alternate constructor mirroring open_manager()."""
        return cls(directory, separator, **options)

    # -------------------------------------------------------------------------
    # Lookup API
    # -------------------------------------------------------------------------
    def get(
            self,
            locale: str,
            key: str,
            args: Optional[Mapping[str, Any]] = None,
            **kwargs: Any,
    ) -> str:
        """
        Resolve a key for a locale and substitute its placeholders.

        Args:
            locale: Locale identifier (resource file base name).
            key: Flattened key path, e.g. 'buttons.confirm'.
            args: Placeholder values.
            **kwargs: Extra placeholder values, merged over args.

        Returns:
            str: The rendered translation, or the key itself when the locale
                 has no entry for it.

        Raises:
            LocaleNotFound: No resources are loaded for the locale.
        """
        resources = self.store.lookup(locale)
        if resources is None:
            raise LocaleNotFound(locale)

        template = resources.get(key)
        if template is None:
            logger.debug(f"ResourceManager: Missing key '{key}' in locale '{locale}'")
            return key

        values: Dict[str, Any] = dict(args or {})
        values.update(kwargs)
        return substitute(template, values)

    def translator(self, locale: str) -> "Translator":
        """
        Bind lookups to one locale.

        Raises:
            LocaleNotFound: The locale is not loaded right now.
        """
        if not self.has_locale(locale):
            raise LocaleNotFound(locale)
        return Translator(self, locale)

    def has_locale(self, locale: str) -> bool:
        return self.store.lookup(locale) is not None

    @property
    def locales(self) -> List[str]:
        return self.store.locales

    # -------------------------------------------------------------------------
    # Watch Lifecycle
    # -------------------------------------------------------------------------
    @property
    def is_watching(self) -> bool:
        return self._watcher is not None and self._watcher.is_running

    def start(self) -> "ResourceManager":
        """Start following directory changes. Idempotent."""
        if self.is_watching:
            return self
        if isinstance(self._scheduler, EventLoop) and not self._scheduler.is_running:
            self._scheduler.start()
            self._started_loop = True
        self._watcher = DirectoryWatcher(
            self.directory,
            self._dispatch,
            poll_interval=self.config.poll_interval,
        )
        self._watcher.start()
        return self

    def stop(self) -> None:
        """Stop watching. Pending reconciliations resume if start() is called again."""
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
        if self._started_loop and isinstance(self._scheduler, EventLoop):
            self._scheduler.stop()
            self._started_loop = False

    def __enter__(self) -> "ResourceManager":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _dispatch(self, event: ChangeEvent) -> None:
        """Hand a watcher event to the reconciler on the scheduler's thread."""
        if isinstance(self._scheduler, EventLoop):
            self._scheduler.submit(lambda: self.reconciler.handle(event))
        else:
            self.reconciler.handle(event)


class Translator:
    """
    Lookups bound to a single locale.

    The locale is resolved on every call, so a translator follows reloads
    and raises LocaleNotFound once its locale has been evicted.
    """

    def __init__(self, manager: ResourceManager, locale: str):
        self._manager = manager
        self.locale = locale

    def get(self, key: str, args: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> str:
        return self._manager.get(self.locale, key, args, **kwargs)

    def __repr__(self) -> str:
        return f"Translator(locale={self.locale!r})"


def open_manager(directory: str, separator: str = DEFAULT_SEPARATOR, **options: Any) -> ResourceManager:
    """
    Open a resource directory.

    Args:
        directory: Resource directory.
        separator: Key separator used for flattening.
        **options: Forwarded to ResourceManager (config, fs, scheduler).

    Raises:
        DirectoryNotFound: The directory does not exist.
        NotADirectory: The path is not a directory.
    """
    return ResourceManager(directory, separator, **options)
