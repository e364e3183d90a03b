from __future__ import annotations

"""
Configuration Domain Management.

Builds the runtime configuration of a resource manager from three sources
(defaults, an optional JSON file and caller overrides) and validates the
merged result into an immutable ManagerConfig. Untrusted values are coerced
with warnings, or rejected outright in strict mode.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from langmanager.domain import constants as const

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ManagerConfig:
    """
    Validated settings for a ResourceManager.

    Attributes:
        directory: Directory holding the '<locale><extension>' resource files.
        separator: Joiner used when flattening nested keys.
        extension: Recognized resource file extension (with leading dot).
        encoding: Text encoding of the resource files.
        debounce_seconds: Debounce window of the change reconciler.
        poll_interval: Seconds between two snapshots of the polling watcher.
    """
    directory: str
    separator: str = const.DEFAULT_SEPARATOR
    extension: str = const.RESOURCE_EXTENSION
    encoding: str = const.DEFAULT_ENCODING
    debounce_seconds: float = const.DEFAULT_DEBOUNCE_SECONDS
    poll_interval: float = const.DEFAULT_POLL_INTERVAL

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default configuration dictionary.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "directory": os.getcwd(),
        "separator": const.DEFAULT_SEPARATOR,
        "extension": const.RESOURCE_EXTENSION,
        "encoding": const.DEFAULT_ENCODING,
        "debounce_seconds": const.DEFAULT_DEBOUNCE_SECONDS,
        "poll_interval": const.DEFAULT_POLL_INTERVAL,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str]) -> Dict[str, Any]:
    """
    Load a configuration file and merge it over the defaults.

    A missing, unreadable or malformed file is logged and ignored.

    Args:
        path: Location of a JSON configuration file, or None.

    Returns:
        Dict[str, Any]: The merged configuration dictionary.
    """
    config = get_default_config()
    if not path:
        return config

    if not os.path.exists(path):
        logger.warning(f"Config file not found at '{path}'. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{path}': {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file '{path}'. Using defaults.")
        return config

    unknown = sorted(set(data) - set(config))
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

    config.update({k: v for k, v in data.items() if k in config})
    return config


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[ManagerConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises on invalid values instead of falling back.

    Returns:
        Tuple[ManagerConfig, List[str]]: The validated configuration and
                                         the list of warnings produced.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return ManagerConfig(**defaults), warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    for field in ("directory", "encoding"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["separator"] = _as_separator(merged.get("separator"), warnings, strict)
    merged["extension"] = _as_extension(merged.get("extension"), warnings, strict)

    for field in ("debounce_seconds", "poll_interval"):
        merged[field] = _as_positive_float(
            merged.get(field), defaults[field], field, warnings, strict
        )

    clean = {k: merged[k] for k in defaults}
    return ManagerConfig(**clean), warnings


# -----------------------------------------------------------------------------
# Private Helpers: Type Coercion
# -----------------------------------------------------------------------------
def _reject(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")
    logger.warning(msg)


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _reject(
        f"Invalid field '{field}': expected str, received {type(value).__name__}.",
        warnings, strict,
    )
    return fallback


def _as_separator(value: Any, warnings: List[str], strict: bool) -> str:
    """Separators are kept verbatim (whitespace included) but never empty."""
    if isinstance(value, str) and value:
        return value

    if isinstance(value, str):
        _reject("Invalid field 'separator': must not be empty.", warnings, strict, ValueError)
    else:
        _reject(
            f"Invalid field 'separator': expected str, received {type(value).__name__}.",
            warnings, strict,
        )
    return const.DEFAULT_SEPARATOR


def _as_extension(value: Any, warnings: List[str], strict: bool) -> str:
    """Normalize an extension so it always carries its leading dot."""
    ext = _as_str(value, const.RESOURCE_EXTENSION, "extension", warnings, strict)
    if not ext.startswith("."):
        ext = f".{ext}"
    if ext == ".":
        _reject("Invalid field 'extension': must not be empty.", warnings, strict, ValueError)
        return const.RESOURCE_EXTENSION
    return ext


def _as_positive_float(
        value: Any,
        fallback: float,
        field: str,
        warnings: List[str],
        strict: bool,
) -> float:
    """Accept ints, floats and numeric strings strictly greater than zero."""
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = None
    else:
        number = None

    if number is None:
        _reject(
            f"Invalid field '{field}': expected number, received {type(value).__name__}.",
            warnings, strict,
        )
        return fallback

    if number <= 0:
        _reject(f"Invalid field '{field}': must be positive, got {number}.", warnings, strict, ValueError)
        return fallback

    return number
