"""Tree mode selection - eager (pre-filtered) vs lazy tree.

With any facet active the whole filtered tree is assembled up front and
reordering by drag and drop is switched off, since a filtered view does
not show the real sibling order. Otherwise only a root placeholder is
produced and the client loads children on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reqtree.filters.aggregator import ActiveFilterSet
from reqtree.services import RequirementCounter, TreeAssembler

LAZY_LOADER_PATH = "api/requirement-nodes"
DRAG_DROP_PATH = "api/requirement-nodes/move"
COOKIE_PREFIX_TEMPLATE = "req_specification_tproject_id_{root_id}_"
PROJECT_NODE_TYPE = "testproject"


class TreeMode(Enum):
    """How the requirement tree is delivered."""

    EAGER = "eager"
    LAZY = "lazy"

    @classmethod
    def select(cls, do_filtering: bool) -> TreeMode:
        return cls.EAGER if do_filtering else cls.LAZY


@dataclass
class RootNode:
    """Root (project) node of the requirement tree."""

    id: int
    name: str
    href: str = ""
    node_type: str = PROJECT_NODE_TYPE
    total_req_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "href": self.href,
            "testlink_node_type": self.node_type,
            "total_req_count": self.total_req_count,
        }


@dataclass
class DragAndDrop:
    """Client drag-and-drop wiring.

    ``backend_url`` names the endpoint a client would post node moves to.
    The bundled server does not serve it; a deployment that supports
    reordering mounts its own handler there.
    """

    enabled: bool = True
    backend_url: str = ""
    use_before_move_node: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "BackEndUrl": self.backend_url,
            "useBeforeMoveNode": self.use_before_move_node,
        }


@dataclass
class TreeRenderPlan:
    """What the page layer needs to render the requirement tree.

    Attributes:
        mode: Eager or lazy delivery.
        root_node: Root node with count suffix in its name.
        children: Serialized child nodes (eager) or ``"[]"`` (lazy).
        loader: Lazy loader URL, empty in eager mode.
        drag_drop: Drag-and-drop wiring.
        cookie_prefix: Prefix for the client's tree-state cookies.
        predicate: Filters the eager tree was built with, None when lazy.
    """

    mode: TreeMode
    root_node: RootNode
    children: str = "[]"
    loader: str = ""
    drag_drop: DragAndDrop = field(default_factory=DragAndDrop)
    cookie_prefix: str = ""
    predicate: ActiveFilterSet | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "root_node": self.root_node.to_dict(),
            "children": self.children,
            "loader": self.loader,
            "dragDrop": self.drag_drop.to_dict(),
            "cookiePrefix": self.cookie_prefix,
            "predicate": self.predicate.to_dict() if self.predicate is not None else None,
        }


def lazy_loader_url(base_href: str, project_id: int) -> str:
    return f"{base_href}{LAZY_LOADER_PATH}?root_node={project_id}&tproject_id={project_id}"


def build_tree_plan(
    *,
    project_id: int,
    project_name: str,
    active: ActiveFilterSet,
    do_filtering: bool,
    assembler: TreeAssembler,
    counter: RequirementCounter,
    base_href: str = "/",
) -> TreeRenderPlan:
    """Choose the tree mode once and produce the matching plan."""
    mode = TreeMode.select(do_filtering)
    drag_drop = DragAndDrop(enabled=True, backend_url=f"{base_href}{DRAG_DROP_PATH}")

    if mode is TreeMode.EAGER:
        tree = assembler.assemble_tree(
            project_id,
            project_name,
            active,
            {"for_printing": False, "exclude_branches": None},
        )
        root = RootNode(
            id=tree.root_id,
            name=f"{tree.root_name} ({tree.total_req_count})",
            href=tree.root_href,
            total_req_count=tree.total_req_count,
        )
        drag_drop.enabled = False
        plan = TreeRenderPlan(
            mode=mode,
            root_node=root,
            children=tree.menustring or "[]",
            drag_drop=drag_drop,
            predicate=active,
        )
    else:
        req_qty = counter.count_requirements(project_id)
        root = RootNode(
            id=project_id,
            name=f"{project_name} ({req_qty})",
            href=f"javascript:TPROJECT_REQ_SPEC_MGMT({project_id})",
            total_req_count=req_qty,
        )
        plan = TreeRenderPlan(
            mode=mode,
            root_node=root,
            loader=lazy_loader_url(base_href, project_id),
            drag_drop=drag_drop,
        )

    plan.cookie_prefix = COOKIE_PREFIX_TEMPLATE.format(root_id=root.id)
    return plan
