"""
reqtree.config - Configuration loading and defaults.

Configuration lives in ``.reqtree.toml`` (found by walking up from the
working directory), optionally deep-merged with a git-ignored
``.reqtree.local.toml`` next to it, on top of ``DEFAULT_CONFIG``.
``REQTREE_<SECTION>_<KEY>`` environment variables are applied last.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError
from tomlkit.toml_document import TOMLDocument

from reqtree.config.defaults import DEFAULT_CONFIG

CONFIG_FILENAME = ".reqtree.toml"
LOCAL_CONFIG_FILENAME = ".reqtree.local.toml"
ENV_PREFIX = "REQTREE_"

_MISSING = object()


class ConfigLoader:
    """Read-only view over a merged configuration dict.

    Keys are addressed with dots: ``loader.get("server.port")``.
    """

    def __init__(self, data: dict[str, Any], path: Path | None = None) -> None:
        self._data = data
        self.path = path

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> ConfigLoader:
        return cls(data, path)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key, returning ``default`` when any part is missing."""
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict):
                return default
            node = node.get(part, _MISSING)
            if node is _MISSING:
                return default
        return node

    def section(self, key: str) -> dict[str, Any]:
        """Return a nested table, or an empty dict."""
        value = self.get(key, {})
        return value if isinstance(value, dict) else {}

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)


def parse_toml_document(content: str) -> TOMLDocument:
    """Parse TOML text into a round-trip tomlkit document."""
    return tomlkit.parse(content)


def parse_toml(content: str) -> dict[str, Any]:
    """Parse TOML text into plain Python containers."""
    return parse_toml_document(content).unwrap()


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested tables merge key by key; any other value in ``override``
    replaces the one in ``base``.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def find_config_file(start: Path) -> Path | None:
    """Find ``.reqtree.toml`` in ``start`` or any parent directory."""
    current = start.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _read_toml_file(path: Path) -> dict[str, Any]:
    try:
        return parse_toml(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e
    except ParseError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e


def _try_parse_env_value(raw: str) -> Any:
    """Interpret an environment variable value.

    JSON arrays/objects and ``true``/``false`` are decoded, integer
    literals become ints, everything else stays a string. Malformed JSON
    falls back to the raw string.
    """
    stripped = raw.strip()
    if stripped[:1] in ("[", "{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return raw
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(stripped)
    except ValueError:
        return raw


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Apply ``REQTREE_<SECTION>_<KEY>`` variables onto ``config`` in place.

    The section is matched against existing top-level tables (longest
    name first) so that sections containing underscores, such as
    ``tree_filter``, resolve correctly.
    """
    sections = sorted((k for k in config if isinstance(config[k], dict)), key=len, reverse=True)
    for env_name, raw in os.environ.items():
        if not env_name.startswith(ENV_PREFIX):
            continue
        rest = env_name[len(ENV_PREFIX) :].lower()
        section = next((s for s in sections if rest.startswith(s + "_")), None)
        if section is None:
            if "_" not in rest:
                continue
            section, key = rest.split("_", 1)
        else:
            key = rest[len(section) + 1 :]
        if not key:
            continue
        config.setdefault(section, {})
        if isinstance(config[section], dict):
            config[section][key] = _try_parse_env_value(raw)
    return config


def load_config(path: Path) -> ConfigLoader:
    """Load ``path`` merged over defaults, local overrides and env vars."""
    data = merge_configs(DEFAULT_CONFIG, _read_toml_file(path))
    local_path = path.parent / LOCAL_CONFIG_FILENAME
    if local_path.is_file():
        data = merge_configs(data, _read_toml_file(local_path))
    return ConfigLoader(_apply_env_overrides(data), path=path)


def get_config(config_path: Path | None = None, start: Path | None = None) -> ConfigLoader:
    """Resolve the configuration for a command.

    Uses ``config_path`` when given, otherwise searches upward from
    ``start`` (default: cwd). Without any file the defaults apply.
    """
    if config_path is None:
        config_path = find_config_file(start or Path.cwd())
    if config_path is None:
        return ConfigLoader(_apply_env_overrides(copy.deepcopy(DEFAULT_CONFIG)))
    return load_config(config_path)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ConfigLoader",
    "find_config_file",
    "get_config",
    "load_config",
    "merge_configs",
    "parse_toml",
    "parse_toml_document",
]
