"""Project catalog - TOML-backed requirement data for the tree panel.

A small, in-memory stand-in for the requirement repository. It provides
every collaborator the filter panel needs:

- ProjectDirectory: test case prefix per project
- CustomFieldRegistry: custom fields linked to requirements
- RequirementCounter: total requirement count for the lazy root label
- TreeAssembler: the eager, pre-filtered tree
- Lazy child listing for the on-demand loader

Catalog layout::

    [[projects]]
    id = 1
    name = "Demo"
    prefix = "DEMO"

    [[projects.custom_fields]]
    id = 10
    type = "list"
    label = "cf_component"

    [[projects.specs]]
    id = 100
    doc_id = "SRS-1"
    title = "System"
    type = 3

    [[projects.specs.requirements]]
    id = 1001
    doc_id = "REQ-001"
    title = "Login"
    status = "D"
    type = 2
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from reqtree.config import parse_toml
from reqtree.filters.aggregator import ActiveFilterSet
from reqtree.filters.custom_fields import CustomFieldDescriptor
from reqtree.filters.facets import FacetName
from reqtree.services import AssembledTree

REQ_NODE_TYPE = "requirement"
SPEC_NODE_TYPE = "requirement_spec"


@dataclass
class CatalogRequirement:
    """A requirement as stored in the catalog."""

    id: int
    doc_id: str
    title: str
    status: str = ""
    type: int = 0
    expected_coverage: int = 0
    relations: list[str] = field(default_factory=list)
    testcases: list[str] = field(default_factory=list)
    custom_fields: dict[int, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogRequirement:
        return cls(
            id=int(data["id"]),
            doc_id=str(data.get("doc_id", "")),
            title=str(data.get("title", "")),
            status=str(data.get("status", "")),
            type=int(data.get("type", 0)),
            expected_coverage=int(data.get("expected_coverage", 0)),
            relations=[str(r) for r in data.get("relations", [])],
            testcases=[str(t) for t in data.get("testcases", [])],
            custom_fields={int(k): v for k, v in data.get("custom_fields", {}).items()},
        )

    def to_node(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": f"{self.doc_id}:{self.title}",
            "testlink_node_type": REQ_NODE_TYPE,
            "leaf": True,
        }


@dataclass
class CatalogSpec:
    """A requirement specification: requirements plus child specifications."""

    id: int
    doc_id: str
    title: str
    type: int = 0
    requirements: list[CatalogRequirement] = field(default_factory=list)
    specs: list[CatalogSpec] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogSpec:
        return cls(
            id=int(data["id"]),
            doc_id=str(data.get("doc_id", "")),
            title=str(data.get("title", "")),
            type=int(data.get("type", 0)),
            requirements=[CatalogRequirement.from_dict(r) for r in data.get("requirements", [])],
            specs=[CatalogSpec.from_dict(s) for s in data.get("specs", [])],
        )

    def iter_requirements(self) -> Iterator[CatalogRequirement]:
        yield from self.requirements
        for child in self.specs:
            yield from child.iter_requirements()

    def to_node(self, count: int, children: list[dict[str, Any]] | None = None) -> dict[str, Any]:
        node: dict[str, Any] = {
            "id": self.id,
            "text": f"{self.doc_id}:{self.title} ({count})",
            "testlink_node_type": SPEC_NODE_TYPE,
            "leaf": False,
        }
        if children is not None:
            node["children"] = children
            node["expanded"] = True
        return node


@dataclass
class CatalogProject:
    """A test project with its requirement specifications."""

    id: int
    name: str
    prefix: str = ""
    specs: list[CatalogSpec] = field(default_factory=list)
    custom_fields: list[CustomFieldDescriptor] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogProject:
        raw_fields = data.get("custom_fields")
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            prefix=str(data.get("prefix", "")),
            specs=[CatalogSpec.from_dict(s) for s in data.get("specs", [])],
            custom_fields=(
                [CustomFieldDescriptor.from_dict(f) for f in raw_fields]
                if raw_fields is not None
                else None
            ),
        )

    def iter_requirements(self) -> Iterator[CatalogRequirement]:
        for spec in self.specs:
            yield from spec.iter_requirements()

    def find_spec(self, spec_id: int) -> CatalogSpec | None:
        stack = list(self.specs)
        while stack:
            spec = stack.pop()
            if spec.id == spec_id:
                return spec
            stack.extend(spec.specs)
        return None


def _contains(needle: str, haystack: str) -> bool:
    return needle.casefold() in haystack.casefold()


def _custom_value_matches(wanted: Any, actual: Any) -> bool:
    if actual is None:
        return False
    wanted_set = {str(v) for v in wanted} if isinstance(wanted, list) else {str(wanted)}
    actual_set = {str(v) for v in actual} if isinstance(actual, list) else {str(actual)}
    return bool(wanted_set & actual_set)


def requirement_matches(
    req: CatalogRequirement, spec: CatalogSpec, filters: ActiveFilterSet
) -> bool:
    """Whether ``req`` (inside ``spec``) satisfies every active filter."""
    active = filters.active_items()
    checks = {
        FacetName.DOC_ID.value: lambda v: _contains(v, req.doc_id),
        FacetName.TITLE.value: lambda v: _contains(v, req.title),
        FacetName.STATUS.value: lambda v: req.status in v,
        FacetName.TYPE.value: lambda v: req.type in v,
        FacetName.SPEC_TYPE.value: lambda v: spec.type in v,
        FacetName.COVERAGE.value: lambda v: req.expected_coverage == v,
        FacetName.RELATION.value: lambda v: any(r in v for r in req.relations),
        FacetName.TC_ID.value: lambda v: any(_contains(v, tc) for tc in req.testcases),
        FacetName.CUSTOM_FIELDS.value: lambda v: all(
            _custom_value_matches(wanted, req.custom_fields.get(int(cf_id)))
            for cf_id, wanted in v.items()
        ),
    }
    return all(checks[key](value) for key, value in active.items() if key in checks)


class ProjectCatalog:
    """In-memory catalog of projects loaded from TOML."""

    def __init__(self, projects: list[CatalogProject] | None = None) -> None:
        self.projects: dict[int, CatalogProject] = {p.id: p for p in projects or []}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectCatalog:
        return cls([CatalogProject.from_dict(p) for p in data.get("projects", [])])

    @classmethod
    def from_toml(cls, path: Path) -> ProjectCatalog:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Cannot read catalog {path}: {e}") from e
        return cls.from_dict(parse_toml(content))

    def get_project(self, project_id: int) -> CatalogProject | None:
        return self.projects.get(project_id)

    def _project(self, project_id: int) -> CatalogProject:
        project = self.get_project(project_id)
        if project is None:
            raise KeyError(f"Unknown project: {project_id}")
        return project

    # ProjectDirectory
    def test_case_prefix(self, project_id: int) -> str:
        return self._project(project_id).prefix

    # CustomFieldRegistry
    def linked_custom_fields(self, project_id: int) -> list[CustomFieldDescriptor] | None:
        project = self.get_project(project_id)
        return project.custom_fields if project else None

    # RequirementCounter
    def count_requirements(self, project_id: int) -> int:
        return sum(1 for _ in self._project(project_id).iter_requirements())

    # TreeAssembler
    def assemble_tree(
        self,
        project_id: int,
        project_name: str,
        filters: ActiveFilterSet,
        options: dict[str, Any] | None = None,
    ) -> AssembledTree:
        """Build the filtered tree; specifications left empty are pruned."""
        project = self._project(project_id)

        def _walk(spec: CatalogSpec) -> tuple[dict[str, Any] | None, int]:
            children: list[dict[str, Any]] = []
            count = 0
            for child in spec.specs:
                node, child_count = _walk(child)
                if node is not None:
                    children.append(node)
                    count += child_count
            for req in spec.requirements:
                if requirement_matches(req, spec, filters):
                    children.append(req.to_node())
                    count += 1
            if count == 0:
                return None, 0
            return spec.to_node(count, children), count

        nodes: list[dict[str, Any]] = []
        total = 0
        for spec in project.specs:
            node, count = _walk(spec)
            if node is not None:
                nodes.append(node)
                total += count

        return AssembledTree(
            root_id=project.id,
            root_name=project_name,
            total_req_count=total,
            menustring=json.dumps(nodes) if nodes else "",
            root_href=f"javascript:TPROJECT_REQ_SPEC_MGMT({project.id})",
        )

    def children_of(self, project_id: int, node_id: int) -> list[dict[str, Any]] | None:
        """Direct children of the project root or of a specification.

        Returns None when ``node_id`` is neither.
        """
        project = self.get_project(project_id)
        if project is None:
            return None
        if node_id == project.id:
            specs, reqs = project.specs, []
        else:
            spec = project.find_spec(node_id)
            if spec is None:
                return None
            specs, reqs = spec.specs, spec.requirements
        nodes = [s.to_node(sum(1 for _ in s.iter_requirements())) for s in specs]
        nodes.extend(r.to_node() for r in reqs)
        return nodes


def load_catalog(config: Any, path: Path | None = None) -> ProjectCatalog:
    """Load the catalog named by ``path`` or by ``catalog.path`` in config.

    A relative ``catalog.path`` is resolved against the directory of the
    configuration file.
    """
    if path is None:
        configured = config.get("catalog.path", "")
        if not configured:
            raise ValueError("No catalog given (use --catalog or set catalog.path)")
        path = Path(configured)
        if not path.is_absolute() and config.path is not None:
            path = config.path.parent / path
    return ProjectCatalog.from_toml(path)
