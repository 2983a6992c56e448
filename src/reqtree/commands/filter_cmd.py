"""
reqtree.commands.filter_cmd - Evaluate the filter panel offline.

Runs one request snapshot against a catalog file and prints the
resulting filter state and tree plan.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from reqtree.config import ConfigLoader, get_config
from reqtree.filters.control import FilterPanelResult, RequirementFilterControl
from reqtree.filters.request import RequestInput
from reqtree.filters.settings import InMemorySettingsStore
from reqtree.services.catalog import load_catalog
from reqtree.services.labels import LabelCatalog
from reqtree.services.relations import ConfiguredRelationRegistry


def parse_fields(pairs: list[str]) -> list[tuple[str, str]]:
    """Split ``NAME=VALUE`` arguments; a bare ``NAME`` gets the value ``"1"``."""
    fields = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        fields.append((name.strip(), value if sep else "1"))
    return fields


def load_request(args: argparse.Namespace) -> RequestInput:
    """Build the request snapshot from ``--input`` JSON and ``--field`` pairs."""
    data: dict[str, Any] = {}
    if args.input:
        try:
            data = json.loads(Path(args.input).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot read request file {args.input}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Request file {args.input} must hold a JSON object")
    pairs: list[tuple[str, str]] = []
    for name, value in data.items():
        values = value if isinstance(value, list) else [value]
        pairs.extend((name, str(v)) for v in values if v is not None)
    pairs.extend(parse_fields(args.field or []))
    return RequestInput.from_pairs(pairs)


def build_control(config: ConfigLoader, catalog: Any) -> RequirementFilterControl:
    labels = LabelCatalog.from_config(config)
    return RequirementFilterControl(
        config,
        labels=labels,
        store=InMemorySettingsStore(),
        relations=ConfiguredRelationRegistry.from_config(config, labels),
        projects=catalog,
        custom_fields=catalog,
        assembler=catalog,
        counter=catalog,
    )


def format_text(result: FilterPanelResult) -> str:
    lines = [f"Project: {result.project_name} ({result.project_id})"]
    active = result.state.active.active_items()
    if active:
        lines.append("Active filters:")
        for key, value in active.items():
            lines.append(f"  {key}: {value}")
    else:
        lines.append("Active filters: none")
    if result.tree is not None:
        lines.append(f"Tree mode: {result.tree.mode.value}")
        lines.append(f"Root: {result.tree.root_node.name}")
        if result.tree.loader:
            lines.append(f"Loader: {result.tree.loader}")
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    """Run the filter command."""
    config = get_config(getattr(args, "config", None))
    catalog = load_catalog(config, getattr(args, "catalog", None))

    project = catalog.get_project(args.project)
    if project is None:
        print(f"Error: Unknown project {args.project}", file=sys.stderr)
        return 1

    request = load_request(args)
    result = build_control(config, catalog).run(
        request,
        project.id,
        project.name,
        locale=args.locale,
        build_tree=not args.no_tree,
    )

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_text(result))
    return 0
