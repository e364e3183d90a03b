from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI options to configuration overrides.
2. NAME=VALUE placeholder parsing.
3. Defaults for boolean flags.
"""

import pytest

from langmanager.interface.cli.args import (
    args_to_overrides,
    build_parser,
    parse_placeholder_args,
)


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_overrides_mapping():
    args = parse_args([
        "-d", "/srv/locales",
        "--separator", "/",
        "--ext", ".lang",
        "--debounce", "0.5",
        "--poll", "2",
    ])

    assert args_to_overrides(args) == {
        "directory": "/srv/locales",
        "separator": "/",
        "extension": ".lang",
        "debounce_seconds": 0.5,
        "poll_interval": 2.0,
    }


def test_cli_omitted_options_do_not_override():
    args = parse_args(["--list"])
    assert args_to_overrides(args) == {}
    assert args.list is True
    assert args.watch is False
    assert args.json_output is False


def test_cli_lookup_arguments():
    args = parse_args(["-l", "en", "-k", "greeting", "-a", "name=Alice", "--arg", "n=3"])

    assert args.locale == "en"
    assert args.key == "greeting"
    assert parse_placeholder_args(args.args) == {"name": "Alice", "n": "3"}


def test_placeholder_values_may_contain_equals():
    assert parse_placeholder_args(["expr=a=b", "empty="]) == {"expr": "a=b", "empty": ""}
    assert parse_placeholder_args(None) == {}


@pytest.mark.parametrize("bad", ["novalue", "=value", "  =x"])
def test_invalid_placeholder_args(bad):
    with pytest.raises(ValueError):
        parse_placeholder_args([bad])
