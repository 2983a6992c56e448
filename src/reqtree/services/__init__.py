"""
reqtree.services - Collaborators consumed by the filter panel.

The filter core only talks to these protocols. ``reqtree.services.labels``,
``reqtree.services.relations`` and ``reqtree.services.catalog`` provide
configuration- and TOML-backed implementations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reqtree.filters.aggregator import ActiveFilterSet
    from reqtree.filters.custom_fields import CustomFieldDescriptor
    from reqtree.services.relations import RelationOptions

# Prefix a label lookup returns for keys that have no translation.
LOCALIZE_TAG = "LOCALIZE: "


@runtime_checkable
class LabelLookup(Protocol):
    """Localization lookup.

    A missing key yields ``LOCALIZE_TAG + key`` instead of failing; with
    ``warn=True`` implementations may additionally record the miss.
    """

    def label(self, key: str, locale: str | None = None, warn: bool = True) -> str: ...


@runtime_checkable
class CustomFieldRegistry(Protocol):
    """Custom fields linked to requirements of a project.

    Returns None when the project does not use custom fields at all.
    """

    def linked_custom_fields(self, project_id: int) -> list[CustomFieldDescriptor] | None: ...


@runtime_checkable
class RelationTypeRegistry(Protocol):
    """Requirement relation types as a select option list."""

    def relation_options(self, locale: str | None = None) -> RelationOptions: ...


@runtime_checkable
class ProjectDirectory(Protocol):
    """Per-project identity lookups."""

    def test_case_prefix(self, project_id: int) -> str: ...


@dataclass
class AssembledTree:
    """A materialized, filtered requirement hierarchy.

    Attributes:
        root_id: Id of the root (project) node.
        root_name: Display name of the root node, without count suffix.
        total_req_count: Number of requirements matching the filters.
        menustring: Serialized child nodes, empty when nothing matched.
        root_href: Link the client opens when the root node is clicked.
        extra: Additional root attributes passed through to the client.
    """

    root_id: int
    root_name: str
    total_req_count: int = 0
    menustring: str = ""
    root_href: str = ""
    extra: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class TreeAssembler(Protocol):
    """Builds the eager (pre-filtered) tree."""

    def assemble_tree(
        self,
        project_id: int,
        project_name: str,
        filters: ActiveFilterSet,
        options: dict[str, Any] | None = None,
    ) -> AssembledTree: ...


@runtime_checkable
class RequirementCounter(Protocol):
    """Counts all requirements of a project for the lazy root label."""

    def count_requirements(self, project_id: int) -> int: ...


__all__ = [
    "LOCALIZE_TAG",
    "AssembledTree",
    "CustomFieldRegistry",
    "LabelLookup",
    "ProjectDirectory",
    "RelationTypeRegistry",
    "RequirementCounter",
    "TreeAssembler",
]
