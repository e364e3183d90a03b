from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command line schema and translates the parsed namespace into
configuration overrides and placeholder arguments.
"""

import argparse
from typing import Any, Dict, List, Optional

from langmanager.interface.messages import messages

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the langmanager CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="langmanager",
        description=messages.t("app.description"),
    )

    # --- Resource Location ---
    p.add_argument("-d", "--dir", dest="directory", default=None, help=messages.t("cli.args.dir"))
    p.add_argument("--config", dest="config_file", default=None, help=messages.t("cli.args.config"))
    p.add_argument("--separator", default=None, help=messages.t("cli.args.separator"))
    p.add_argument("--ext", dest="extension", default=None, help=messages.t("cli.args.ext"))

    # --- Lookup ---
    p.add_argument("-l", "--locale", default=None, help=messages.t("cli.args.locale"))
    p.add_argument("-k", "--key", default=None, help=messages.t("cli.args.key"))
    p.add_argument(
        "-a", "--arg",
        dest="args",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help=messages.t("cli.args.arg"),
    )

    # --- Actions ---
    p.add_argument("--list", action="store_true", help=messages.t("cli.args.list"))
    p.add_argument("--watch", action="store_true", help=messages.t("cli.args.watch"))
    p.add_argument("--dump-config", action="store_true", help=messages.t("cli.args.dump"))

    # --- Watch Timing ---
    p.add_argument("--debounce", dest="debounce_seconds", type=float, default=None,
                   help=messages.t("cli.args.debounce"))
    p.add_argument("--poll", dest="poll_interval", type=float, default=None,
                   help=messages.t("cli.args.poll"))

    # --- Output and Diagnostics ---
    p.add_argument("--json", dest="json_output", action="store_true", help=messages.t("cli.args.json"))
    p.add_argument("--debug", action="store_true", help=messages.t("cli.args.debug"))
    p.add_argument("--log-file", dest="log_file", default=None, help=messages.t("cli.args.log_file"))

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options given on the command line appear in the result.
    """
    candidates = {
        "directory": args.directory,
        "separator": args.separator,
        "extension": args.extension,
        "debounce_seconds": args.debounce_seconds,
        "poll_interval": args.poll_interval,
    }
    return {k: v for k, v in candidates.items() if v is not None}


def parse_placeholder_args(values: Optional[List[str]]) -> Dict[str, str]:
    """
    Turn repeated NAME=VALUE options into a placeholder mapping.

    Raises:
        ValueError: If an item has no '=' or an empty name.
    """
    out: Dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(messages.t("cli.errors.bad_arg", value=item))
        out[name] = value
    return out
