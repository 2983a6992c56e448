"""
reqtree - Requirement specification tree filtering

reqtree turns the requirement tree filter panel's raw form input into a
normalized filter state, and decides whether the requirement tree is
delivered pre-filtered or loaded lazily node by node.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("reqtree")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from reqtree.filters import (
    ActiveFilterSet,
    FacetName,
    FilterState,
    RequestInput,
    RequirementFilterControl,
    TreeMode,
    TreeRenderPlan,
    aggregate_filters,
)

__all__ = [
    "__version__",
    "ActiveFilterSet",
    "FacetName",
    "FilterState",
    "RequestInput",
    "RequirementFilterControl",
    "TreeMode",
    "TreeRenderPlan",
    "aggregate_filters",
]
