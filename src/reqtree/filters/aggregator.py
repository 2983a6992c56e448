"""Filter-state aggregation for one request.

``aggregate_filters`` runs the normalizer of every enabled built-in facet
and the custom-field coercer, then folds the results into:

- ``ActiveFilterSet``: facet key -> predicate value (None when inactive),
  with exactly one entry per facet; this is the query predicate handed to
  the tree assembler
- ``FilterState.do_filtering``: True iff any facet produced a value

Disabled facets are never evaluated, so stray or forged request values
for them cannot reach the predicate. Each facet is evaluated
independently; the result does not depend on evaluation order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from reqtree.filters.custom_fields import CustomFieldPanel, build_custom_field_panel
from reqtree.filters.facets import BUILTIN_FACETS, FacetName, NormalizedFilter
from reqtree.filters.normalizers import FACET_HANDLERS, FilterContext


class ActiveFilterSet(Mapping[str, Any]):
    """Immutable mapping of facet key to active value.

    Custom fields are grouped under ``filter_custom_fields`` as a
    ``{field id: value}`` mapping.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str) -> Any:
        if isinstance(key, FacetName):
            key = key.value
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ActiveFilterSet({dict(self._values)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def active_items(self) -> dict[str, Any]:
        """Only the facets that actually filter."""
        return {k: v for k, v in self._values.items() if v is not None}

    @property
    def any_active(self) -> bool:
        return any(v is not None for v in self._values.values())

    def to_dict(self) -> dict[str, Any]:
        data = dict(self._values)
        custom = data.get(FacetName.CUSTOM_FIELDS.value)
        if custom is not None:
            data[FacetName.CUSTOM_FIELDS.value] = {str(k): v for k, v in custom.items()}
        return data


@dataclass(frozen=True)
class FilterState:
    """Outcome of one filter pass.

    Attributes:
        filters: Panel row per built-in facet; None for facets that are
            disabled or have no row in this configuration.
        active: The query predicate.
        do_filtering: Whether any facet filters.
        custom_fields: Custom field panel, None when not offered.
        display_filters: Whether the filter panel is shown at all.
    """

    filters: Mapping[FacetName, NormalizedFilter | None] = field(default_factory=dict)
    active: ActiveFilterSet = field(default_factory=ActiveFilterSet)
    do_filtering: bool = False
    custom_fields: CustomFieldPanel | None = None
    display_filters: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_filters": self.display_filters,
            "do_filtering": self.do_filtering,
            "filters": {
                facet.value: (row.to_dict() if row is not None else None)
                for facet, row in self.filters.items()
                if facet is not FacetName.CUSTOM_FIELDS
            },
            "custom_fields": self.custom_fields.to_dict() if self.custom_fields else None,
            "active_filters": self.active.to_dict(),
        }


def _custom_field_panel(ctx: FilterContext) -> CustomFieldPanel | None:
    if ctx.custom_field_registry is None:
        return None
    fields = ctx.custom_field_registry.linked_custom_fields(ctx.project_id)
    if fields is None:
        return None
    return build_custom_field_panel(
        fields,
        ctx.request,
        reset=ctx.reset,
        date_format=ctx.date_format,
        labels=ctx.labels,
        locale=ctx.locale,
        collapsed=ctx.cf_collapsed,
    )


def aggregate_filters(ctx: FilterContext) -> FilterState:
    """Evaluate every configured facet against the request in ``ctx``."""
    keys = [d.key for d in BUILTIN_FACETS]
    if not ctx.show_filters:
        return FilterState(
            filters={d.name: None for d in BUILTIN_FACETS},
            active=ActiveFilterSet(dict.fromkeys(keys)),
        )

    rows: dict[FacetName, NormalizedFilter | None] = {}
    active: dict[str, Any] = {}
    panel: CustomFieldPanel | None = None

    for descriptor in BUILTIN_FACETS:
        facet = descriptor.name
        if facet not in ctx.enabled:
            rows[facet] = None
            active[descriptor.key] = None
            continue
        if facet is FacetName.CUSTOM_FIELDS:
            panel = _custom_field_panel(ctx)
            rows[facet] = None
            active[descriptor.key] = panel.selection if panel else None
            continue
        row = FACET_HANDLERS[facet](ctx)
        rows[facet] = row
        active[descriptor.key] = row.active if row is not None else None

    active_set = ActiveFilterSet(active)
    return FilterState(
        filters=rows,
        active=active_set,
        do_filtering=active_set.any_active,
        custom_fields=panel,
        display_filters=bool(ctx.enabled),
    )
