"""
reqtree.filters - Requirement tree filter engine.

Maps raw panel input plus configuration to a normalized filter state and
decides whether the requirement tree is built pre-filtered (eager) or
loaded on demand (lazy).
"""

from reqtree.filters.aggregator import ActiveFilterSet, FilterState, aggregate_filters
from reqtree.filters.control import FilterPanelResult, RequirementFilterControl
from reqtree.filters.custom_fields import (
    CustomFieldDescriptor,
    CustomFieldFilter,
    CustomFieldPanel,
    CustomFieldType,
)
from reqtree.filters.facets import ANY, STATUS_ANY, FacetName, NormalizedFilter
from reqtree.filters.normalizers import FilterContext
from reqtree.filters.request import RequestInput
from reqtree.filters.settings import (
    InMemorySettingsStore,
    SessionSettingsStore,
    SettingsStore,
)
from reqtree.filters.tree_mode import TreeMode, TreeRenderPlan

__all__ = [
    "ANY",
    "STATUS_ANY",
    "ActiveFilterSet",
    "CustomFieldDescriptor",
    "CustomFieldFilter",
    "CustomFieldPanel",
    "CustomFieldType",
    "FacetName",
    "FilterContext",
    "FilterPanelResult",
    "FilterState",
    "InMemorySettingsStore",
    "NormalizedFilter",
    "RequestInput",
    "RequirementFilterControl",
    "SessionSettingsStore",
    "SettingsStore",
    "TreeMode",
    "TreeRenderPlan",
    "aggregate_filters",
]
