"""
reqtree.commands.config_cmd - Inspect the effective configuration.

- ``config show``: print the merged configuration as TOML
- ``config path``: print the configuration file in use
- ``config get KEY``: print one dotted key
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import tomlkit

from reqtree.config import find_config_file, get_config


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def run(args: argparse.Namespace) -> int:
    """Run the config command."""
    config_path = getattr(args, "config", None)
    action = getattr(args, "config_action", None)

    if action == "path":
        path = config_path or find_config_file(Path.cwd())
        if path is None:
            print("No configuration file found (using defaults)", file=sys.stderr)
            return 1
        print(path)
        return 0

    config = get_config(config_path)

    if action == "show":
        print(tomlkit.dumps(config.as_dict()), end="")
        return 0
    if action == "get":
        value = config.get(args.key)
        if value is None:
            print(f"Error: Unknown key {args.key}", file=sys.stderr)
            return 1
        print(_format_value(value))
        return 0

    print("Usage: reqtree config <show|path|get>", file=sys.stderr)
    return 1