from __future__ import annotations

"""
Domain Constants.

Central defaults shared by the store, the reconciler and the configuration
layer.
"""

DEFAULT_SEPARATOR = "."
RESOURCE_EXTENSION = ".json"
DEFAULT_ENCODING = "utf-8"

# Seconds between the last change notification for a file and its reconciliation
DEFAULT_DEBOUNCE_SECONDS = 0.1

# Seconds between two directory snapshots of the polling watcher
DEFAULT_POLL_INTERVAL = 0.25

DEFAULT_CLI_LOCALE = "en"
