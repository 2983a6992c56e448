"""Facets - Built-in filter attributes of the requirement tree.

This module defines the static facet table and the per-facet result type:
- FacetName: The closed set of built-in facets (plus the custom-field facet)
- InputShape: How a facet's raw request value is parsed
- FacetDescriptor: Immutable metadata for one facet
- NormalizedFilter: The cleaned selection a normalizer produces
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# "Any" option for type, specification type and relation multi-selects.
ANY = 0
# Status codes are strings, so the status multi-select uses a string sentinel.
STATUS_ANY = "0"


class FacetName(Enum):
    """Filterable attributes of a requirement.

    The value doubles as the request field name and as the key in the
    active filter set handed to the tree assembler.
    """

    DOC_ID = "filter_doc_id"
    TITLE = "filter_title"
    STATUS = "filter_status"
    TYPE = "filter_type"
    SPEC_TYPE = "filter_spec_type"
    COVERAGE = "filter_coverage"
    RELATION = "filter_relation"
    TC_ID = "filter_tc_id"
    CUSTOM_FIELDS = "filter_custom_fields"


class InputShape(Enum):
    """Primitive shape of a raw request value."""

    STRING = "string"
    ARRAY_STRING = "array_string"
    ARRAY_INT = "array_int"
    INT = "int"
    # Custom fields are discovered at request time and read per field.
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class FacetDescriptor:
    """Static metadata for one facet.

    Attributes:
        name: Facet identifier.
        shape: How the raw request value is parsed.
        channel: Request channel the value is read from.
        has_options: Whether the panel shows an option list for this facet.
    """

    name: FacetName
    shape: InputShape
    channel: str = "POST"
    has_options: bool = False

    @property
    def key(self) -> str:
        return self.name.value


BUILTIN_FACETS: tuple[FacetDescriptor, ...] = (
    FacetDescriptor(FacetName.DOC_ID, InputShape.STRING),
    FacetDescriptor(FacetName.TITLE, InputShape.STRING),
    FacetDescriptor(FacetName.STATUS, InputShape.ARRAY_STRING, has_options=True),
    FacetDescriptor(FacetName.TYPE, InputShape.ARRAY_INT, has_options=True),
    FacetDescriptor(FacetName.SPEC_TYPE, InputShape.ARRAY_INT, has_options=True),
    FacetDescriptor(FacetName.COVERAGE, InputShape.INT),
    FacetDescriptor(FacetName.RELATION, InputShape.ARRAY_STRING, has_options=True),
    FacetDescriptor(FacetName.TC_ID, InputShape.STRING),
    FacetDescriptor(FacetName.CUSTOM_FIELDS, InputShape.DYNAMIC),
)

FACETS_BY_NAME: dict[FacetName, FacetDescriptor] = {d.name: d for d in BUILTIN_FACETS}


@dataclass(frozen=True)
class NormalizedFilter:
    """Result of normalizing one facet for one request.

    ``selected`` is what the panel shows for the facet; ``active`` is the
    value the tree is queried by, or None when the facet does not filter.
    The two differ only where the panel shows a placeholder: for the test
    case id facet with no id typed, ``selected`` holds the bare prefix
    (e.g. ``"DEMO-"``) while ``active`` is None. Code that needs to know
    whether a facet filters must read ``active``, never ``selected``.

    Attributes:
        facet: Facet this result belongs to.
        selected: Value displayed in the panel.
        active: Predicate value, None when inactive.
        items: Option list (key -> label) for select-style facets.
    """

    facet: FacetName
    selected: Any = None
    active: Any = None
    items: dict[str, str] | None = field(default=None, compare=False)

    @property
    def is_active(self) -> bool:
        return self.active is not None

    @classmethod
    def of(
        cls,
        facet: FacetName,
        selection: Any,
        items: dict[str, str] | None = None,
    ) -> NormalizedFilter:
        """Build a result whose displayed and predicate values coincide."""
        return cls(facet=facet, selected=selection, active=selection, items=items)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"selected": self.selected, "active": self.active}
        if self.items is not None:
            data["items"] = dict(self.items)
        return data
