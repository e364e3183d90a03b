from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, optional JSON file, command line overrides), manager construction
and the requested action (dump config, list locales, resolve a key, watch).
"""

import json
import sys
import time
from typing import Any, Dict, List, Optional

from langmanager.core.template import placeholders
from langmanager.domain.config import load_config, validate_config
from langmanager.domain.errors import DirectoryNotFound, LocaleNotFound, NotADirectory
from langmanager.infra.logging import LoggingConfig, configure_logging, get_logger
from langmanager.interface.cli import args as cli_args
from langmanager.interface.messages import messages
from langmanager.manager import ResourceManager

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Logging bootstrap
    configure_logging(LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=args.log_file,
    ))

    # 2. Configuration hierarchy
    raw_conf = load_config(args.config_file)
    raw_conf.update(cli_args.args_to_overrides(args))
    config, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(config.to_dict(), ensure_ascii=False, indent=2))
        return EXIT_OK

    try:
        placeholder_args = cli_args.parse_placeholder_args(args.args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.key and not args.locale:
        print(f"ERROR: {messages.t('cli.errors.key_needs_locale')}", file=sys.stderr)
        return EXIT_USAGE

    if not (args.list or args.watch or args.key):
        print(messages.t("cli.errors.nothing_to_do"), file=sys.stderr)
        return EXIT_FAILURE

    # 3. Manager construction
    try:
        manager = ResourceManager(config.directory, config=config)
    except (DirectoryNotFound, NotADirectory) as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 4. Actions
    code = EXIT_OK
    if args.list:
        _print_locales(manager, args.json_output)

    if args.key:
        code = _print_lookup(manager, args.locale, args.key, placeholder_args, args.json_output)

    if args.watch and code == EXIT_OK:
        code = _watch(manager)

    return code

# -----------------------------------------------------------------------------
# ACTIONS
# -----------------------------------------------------------------------------

def _print_locales(manager: ResourceManager, as_json: bool) -> None:
    counts = {locale: len(manager.store.lookup(locale) or {}) for locale in manager.locales}
    failures = dict(manager.store.failures)

    if as_json:
        print(json.dumps({"locales": counts, "failures": failures}, ensure_ascii=False, indent=2))
        return

    print(messages.t("cli.status.locales", count=len(counts), path=manager.directory))
    for locale, keys in counts.items():
        print(messages.t("cli.status.locale_line", locale=locale, keys=keys))
    if failures:
        print(messages.t("cli.errors.failed_files", files=", ".join(sorted(failures))), file=sys.stderr)


def _print_lookup(
        manager: ResourceManager,
        locale: str,
        key: str,
        values: Dict[str, Any],
        as_json: bool,
) -> int:
    try:
        text = manager.get(locale, key, values)
    except LocaleNotFound:
        available = ", ".join(manager.locales) or "-"
        print(f"ERROR: {messages.t('cli.errors.locale_missing', locale=locale, available=available)}",
              file=sys.stderr)
        return EXIT_FAILURE

    unresolved = placeholders(text)
    if as_json:
        print(json.dumps(
            {"locale": locale, "key": key, "value": text, "unresolved": unresolved},
            ensure_ascii=False, indent=2,
        ))
    else:
        print(text)
        if unresolved:
            logger.warning(messages.t("cli.errors.unresolved", names=", ".join(unresolved)))
    return EXIT_OK


def _watch(manager: ResourceManager) -> int:
    print(messages.t("cli.status.watching", path=manager.directory))
    manager.start()
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        logger.warning(messages.t("cli.status.interrupted"))
        return EXIT_INTERRUPTED
    finally:
        manager.stop()

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
