from __future__ import annotations

"""
CLI Message Catalog.

The command line interface reads its own texts through a ResourceManager
pointed at the packaged 'locales' directory. The catalog locale comes from
the LANGMANAGER_LANG environment variable ('en' when unset or unknown).
"""

import os
from typing import Any, Optional

from langmanager.domain.constants import DEFAULT_CLI_LOCALE
from langmanager.manager import ResourceManager

LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "locales")
LANG_ENV_VAR = "LANGMANAGER_LANG"


class Messages:
    """Locale-bound access to the CLI message catalog."""

    def __init__(self, locale: Optional[str] = None, directory: str = LOCALES_DIR):
        self._manager = ResourceManager(directory)
        requested = _language_code(locale or os.environ.get(LANG_ENV_VAR, ""))
        self.locale = requested if self._manager.has_locale(requested) else DEFAULT_CLI_LOCALE

    def t(self, key: str, **kwargs: Any) -> str:
        return self._manager.get(self.locale, key, kwargs)


def _language_code(value: str) -> str:
    """'es_ES.UTF-8' -> 'es'."""
    code = value.strip().split(".")[0]
    return code.replace("-", "_").split("_")[0].lower()


messages = Messages()
