"""Request snapshot for one filter-panel evaluation.

``RequestInput`` freezes the submitted form fields so that the filter
pass can be evaluated (and re-evaluated) against exactly the same input.
Raw values are extracted according to a facet's ``InputShape``; values
the input parser cannot read are dropped instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from reqtree.filters.facets import FacetDescriptor, InputShape

FALSE_FLAG_VALUES = frozenset({"", "0", "false", "off", "no"})


class RequestInput:
    """Immutable multi-valued view of submitted request fields."""

    def __init__(self, fields: Mapping[str, Iterable[str]] | None = None) -> None:
        frozen = {name: tuple(str(v) for v in values) for name, values in (fields or {}).items()}
        self._fields = MappingProxyType(frozen)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RequestInput:
        """Build from a plain dict; list/tuple values become multiple values."""
        fields: dict[str, list[str]] = {}
        for name, value in data.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                fields[name] = [str(v) for v in value]
            else:
                fields[name] = [str(value)]
        return cls(fields)

    @classmethod
    def from_multidict(cls, multidict: Any) -> RequestInput:
        """Build from a werkzeug ``MultiDict`` (e.g. ``request.values``)."""
        return cls({name: multidict.getlist(name) for name in multidict.keys()})

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> RequestInput:
        fields: dict[str, list[str]] = {}
        for name, value in pairs:
            fields.setdefault(name, []).append(value)
        return cls(fields)

    def has(self, name: str) -> bool:
        return name in self._fields

    def get(self, name: str, default: str | None = None) -> str | None:
        values = self._fields.get(name)
        if not values:
            return default
        return values[0]

    def getlist(self, name: str) -> list[str]:
        """All values of ``name``, also accepting the ``name[]`` spelling."""
        return list(self._fields.get(name, ())) + list(self._fields.get(f"{name}[]", ()))

    def names(self) -> list[str]:
        return list(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequestInput):
            return NotImplemented
        return dict(self._fields) == dict(other._fields)

    def __repr__(self) -> str:
        return f"RequestInput({dict(self._fields)!r})"

    @property
    def reset_filters(self) -> bool:
        """True when the reset button was submitted with a truthy value."""
        value = self.get("reset_filters")
        if value is None:
            return False
        return value.strip().lower() not in FALSE_FLAG_VALUES


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def read_raw(request: RequestInput, descriptor: FacetDescriptor) -> Any:
    """Read a facet's raw selection according to its input shape.

    Returns None for absent input. List shapes return a (possibly empty)
    list; integer lists silently drop entries that are not integers.
    """
    key = descriptor.key
    shape = descriptor.shape
    if shape is InputShape.STRING:
        value = request.get(key)
        return value.strip() if value is not None else None
    if shape is InputShape.ARRAY_STRING:
        return [v.strip() for v in request.getlist(key)]
    if shape is InputShape.ARRAY_INT:
        parsed = (_parse_int(v) for v in request.getlist(key))
        return [v for v in parsed if v is not None]
    if shape is InputShape.INT:
        return request.get(key)
    return None
