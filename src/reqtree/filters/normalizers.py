"""Facet normalizers - One handler per built-in facet.

Each handler reads the facet's raw request value from a ``FilterContext``
and returns a ``NormalizedFilter`` (or None when the facet has no panel
row at all, e.g. coverage or relations switched off in configuration).
Handlers never raise on bad input: anything unusable is "not filtering".

Handlers are looked up through ``FACET_HANDLERS``; the custom-field facet
is handled by ``reqtree.filters.custom_fields``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from reqtree.filters.facets import (
    ANY,
    FACETS_BY_NAME,
    STATUS_ANY,
    FacetName,
    NormalizedFilter,
)
from reqtree.filters.request import RequestInput, read_raw
from reqtree.services import (
    CustomFieldRegistry,
    LabelLookup,
    ProjectDirectory,
    RelationTypeRegistry,
)
from reqtree.services.relations import RelationDirection, RelationOptions


@dataclass(frozen=True)
class FilterContext:
    """Everything one filter pass reads: request input, configuration and collaborators.

    Attributes:
        project_id: Project the tree belongs to.
        request: Frozen request snapshot.
        labels: Localization lookup.
        locale: Session locale, None for the configured default.
        enabled: Facets switched on in configuration.
        show_filters: Global switch for the whole filter panel.
        status_labels: Status code -> label key.
        type_labels: Requirement type code -> label key.
        spec_type_labels: Specification type code -> label key.
        coverage_enabled: Whether expected-coverage tracking is on.
        relations_enabled: Whether requirement relations are on.
        relation_registry: Source of relation options.
        projects: Source of the test case prefix.
        glue_character: Separator between test case prefix and number.
        custom_field_registry: Source of linked custom fields.
        date_format: strptime pattern for custom date fields.
        cf_collapsed: Current custom field panel collapse state.
    """

    project_id: int
    request: RequestInput
    labels: LabelLookup
    locale: str | None = None
    enabled: frozenset[FacetName] = field(default_factory=frozenset)
    show_filters: bool = True
    status_labels: dict[str, str] = field(default_factory=dict)
    type_labels: dict[str, str] = field(default_factory=dict)
    spec_type_labels: dict[str, str] = field(default_factory=dict)
    coverage_enabled: bool = False
    relations_enabled: bool = False
    relation_registry: RelationTypeRegistry | None = None
    projects: ProjectDirectory | None = None
    glue_character: str = "-"
    custom_field_registry: CustomFieldRegistry | None = None
    date_format: str = "%d/%m/%Y"
    cf_collapsed: bool = False

    @property
    def reset(self) -> bool:
        return self.request.reset_filters

    def raw(self, facet: FacetName) -> Any:
        return read_raw(self.request, FACETS_BY_NAME[facet])

    def any_label(self) -> str:
        return self.labels.label("any", self.locale)

    def option_items(self, label_keys: dict[str, str]) -> dict[str, str]:
        """Configured options with the "any" entry at the head."""
        items = {str(ANY): self.any_label()}
        for code, key in label_keys.items():
            items[str(code)] = self.labels.label(key, self.locale)
        return items


def _contains_sentinel(selection: Any, sentinel: Any) -> bool:
    if not isinstance(selection, list):
        return False
    return any(str(entry) == str(sentinel) for entry in selection)


def _select_options(
    facet: FacetName,
    ctx: FilterContext,
    items: dict[str, str],
    sentinel: Any = ANY,
) -> NormalizedFilter:
    """Shared rule for multi-select facets; an "any" pick clears the selection."""
    selection = ctx.raw(facet)
    if not selection or ctx.reset or _contains_sentinel(selection, sentinel):
        selection = None
    return NormalizedFilter.of(facet, selection, items)


def _text(facet: FacetName, ctx: FilterContext) -> NormalizedFilter:
    selection = ctx.raw(facet)
    if not selection or ctx.reset:
        selection = None
    return NormalizedFilter.of(facet, selection)


def normalize_doc_id(ctx: FilterContext) -> NormalizedFilter:
    return _text(FacetName.DOC_ID, ctx)


def normalize_title(ctx: FilterContext) -> NormalizedFilter:
    return _text(FacetName.TITLE, ctx)


def normalize_status(ctx: FilterContext) -> NormalizedFilter:
    items = ctx.option_items(ctx.status_labels)
    return _select_options(FacetName.STATUS, ctx, items, sentinel=STATUS_ANY)


def normalize_type(ctx: FilterContext) -> NormalizedFilter:
    return _select_options(FacetName.TYPE, ctx, ctx.option_items(ctx.type_labels))


def normalize_spec_type(ctx: FilterContext) -> NormalizedFilter:
    return _select_options(FacetName.SPEC_TYPE, ctx, ctx.option_items(ctx.spec_type_labels))


def normalize_coverage(ctx: FilterContext) -> NormalizedFilter | None:
    """Expected coverage threshold; only offered with coverage tracking on.

    Non-integer input and zero are treated as "not filtering".
    """
    if not ctx.coverage_enabled:
        return None
    raw = ctx.raw(FacetName.COVERAGE)
    selection = None
    if raw and not ctx.reset:
        try:
            selection = int(raw.strip()) or None
        except ValueError:
            selection = None
    return NormalizedFilter.of(FacetName.COVERAGE, selection)


def merge_equal_relations(options: RelationOptions) -> dict[str, str]:
    """Collapse each equal relation into a single option keyed by its type id.

    Equal relations are registered as ``"<id>_source"``; the suffix is
    stripped in place and a ``"<id>_destination"`` duplicate is dropped.
    """
    equal = set(options.equal_relations)
    suffix = "_" + RelationDirection.SOURCE.value
    merged: dict[str, str] = {}
    dropped: set[str] = set()
    for key in equal:
        type_id = key.removesuffix(suffix)
        dropped.add(RelationDirection.DESTINATION.option_key(type_id))
    for key, label in options.items.items():
        if key in equal:
            merged[key.removesuffix(suffix)] = label
        elif key not in dropped:
            merged[key] = label
    return merged


def normalize_relation(ctx: FilterContext) -> NormalizedFilter | None:
    """Relation type filter; options are only computed when relations are on."""
    if not ctx.relations_enabled or ctx.relation_registry is None:
        return None
    options = ctx.relation_registry.relation_options(ctx.locale)
    items = {str(ANY): ctx.any_label(), **merge_equal_relations(options)}
    return _select_options(FacetName.RELATION, ctx, items)


def tc_prefix_placeholder(ctx: FilterContext) -> str:
    """Project test case prefix plus glue, e.g. ``"PRJ-"``."""
    prefix = ctx.projects.test_case_prefix(ctx.project_id) if ctx.projects else ""
    return f"{prefix}{ctx.glue_character}"


def normalize_tc_id(ctx: FilterContext) -> NormalizedFilter:
    """Linked test case id.

    The bare prefix counts as nothing typed; the panel then shows the
    prefix as a placeholder while the facet stays inactive.
    """
    placeholder = tc_prefix_placeholder(ctx)
    selection = ctx.raw(FacetName.TC_ID)
    if not selection or selection == placeholder or ctx.reset:
        selection = None
    return NormalizedFilter(
        facet=FacetName.TC_ID,
        selected=selection or placeholder,
        active=selection,
    )


FacetHandler = Callable[[FilterContext], "NormalizedFilter | None"]

FACET_HANDLERS: dict[FacetName, FacetHandler] = {
    FacetName.DOC_ID: normalize_doc_id,
    FacetName.TITLE: normalize_title,
    FacetName.STATUS: normalize_status,
    FacetName.TYPE: normalize_type,
    FacetName.SPEC_TYPE: normalize_spec_type,
    FacetName.COVERAGE: normalize_coverage,
    FacetName.RELATION: normalize_relation,
    FacetName.TC_ID: normalize_tc_id,
}
