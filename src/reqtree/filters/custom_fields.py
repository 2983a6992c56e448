"""Custom fields - Dynamically typed filter rows.

Custom fields are discovered from the project at request time, so the
facet is an open list. Each field is coerced in three steps:

1. Type dispatch: read one raw value (plain, list) or compose one from
   the date parts (``_input``, ``_hour``, ``_minute``, ``_second``).
2. Date assembly: parse the localized date with the locale's pattern and
   combine it with the time parts into a POSIX timestamp.
3. Activation: the reset flag wins, empty input is inactive, list values
   get a ``|``-joined display string.

Partial or unparseable date input counts as "no value", never as an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from reqtree.filters.request import RequestInput
from reqtree.services import LOCALIZE_TAG, LabelLookup

CF_INPUT_NAME_PREFIX = "custom_field_"
CF_INPUT_SIZE = 32
CF_LIST_INPUT_SIZE = 3
LIST_DISPLAY_SEPARATOR = "|"

DATE_PART_SUFFIXES = ("_input", "_hour", "_minute", "_second")


class CustomFieldType(Enum):
    """Custom field type codes.

    Anything not list-, date- or text-area-typed is filtered as plain text.
    """

    STRING = 0
    NUMERIC = 1
    FLOAT = 2
    EMAIL = 3
    CHECKBOX = 5
    LIST = 6
    MULTISELECTION_LIST = 7
    DATE = 8
    RADIO = 9
    DATETIME = 10
    TEXT_AREA = 20

    @property
    def is_list(self) -> bool:
        return self in (CustomFieldType.LIST, CustomFieldType.MULTISELECTION_LIST)

    @classmethod
    def parse(cls, value: Any) -> CustomFieldType:
        """Accept a numeric code or a name such as ``"multiselection list"``."""
        if isinstance(value, CustomFieldType):
            return value
        if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
            return cls(int(value))
        return cls[str(value).strip().upper().replace(" ", "_")]


@dataclass(frozen=True)
class CustomFieldDescriptor:
    """A custom field linked to requirements.

    Attributes:
        id: Custom field id.
        type: Declared field type.
        label: Label key, localized for display.
        name: Internal field name.
    """

    id: int
    type: CustomFieldType
    label: str
    name: str = ""

    @property
    def input_name(self) -> str:
        return f"{CF_INPUT_NAME_PREFIX}{self.type.value}_{self.id}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomFieldDescriptor:
        name = data.get("name", "")
        return cls(
            id=int(data["id"]),
            type=CustomFieldType.parse(data.get("type", 0)),
            label=data.get("label", name),
            name=name,
        )


@dataclass(frozen=True)
class CustomFieldFilter:
    """Normalized state of one custom field row.

    Attributes:
        field: The field descriptor.
        selected: Value used for filtering, None when inactive.
        display_value: Value shown in the input (lists ``|``-joined).
        label: Localized label without missing-translation marker.
        size: Input width hint.
        visible: False for fields that get no panel row (text area).
    """

    field: CustomFieldDescriptor
    selected: Any = None
    display_value: str | None = None
    label: str = ""
    size: int = CF_INPUT_SIZE
    visible: bool = True

    @property
    def is_active(self) -> bool:
        return self.selected is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.field.id,
            "type": self.field.type.name.lower(),
            "input_name": self.field.input_name,
            "label": self.label,
            "value": self.display_value,
            "selected": self.selected,
            "size": self.size,
            "visible": self.visible,
        }


@dataclass(frozen=True)
class CustomFieldPanel:
    """All custom field rows of a request plus the collapse toggle state."""

    fields: tuple[CustomFieldFilter, ...] = ()
    collapsed: bool = False
    btn_label: str = ""

    @property
    def selection(self) -> dict[int, Any] | None:
        """Field id -> active value, or None when no field filters."""
        chosen = {f.field.id: f.selected for f in self.fields if f.is_active}
        return chosen or None

    @property
    def visible_fields(self) -> list[CustomFieldFilter]:
        return [f for f in self.fields if f.visible]

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [f.to_dict() for f in self.visible_fields],
            "collapsed": self.collapsed,
            "btn_label": self.btn_label,
        }


def split_localized_date(value: str, date_format: str) -> dict[str, int] | None:
    """Split a localized date string into year, month and day.

    Args:
        value: Date as typed, e.g. ``"15/01/2024"``.
        date_format: strptime pattern of the locale, e.g. ``"%d/%m/%Y"``.

    Returns:
        ``{"year", "month", "day"}`` or None if the string does not match.
    """
    try:
        parsed = datetime.strptime(value.strip(), date_format)
    except ValueError:
        return None
    return {"year": parsed.year, "month": parsed.month, "day": parsed.day}


def _to_timestamp(date_parts: dict[str, int], hour: int, minute: int, second: int) -> int | None:
    try:
        moment = datetime(
            date_parts["year"], date_parts["month"], date_parts["day"], hour, minute, second
        )
        # local time conversion fails near the ends of the calendar
        return int(moment.timestamp())
    except (ValueError, OverflowError, OSError):
        return None


def _present(request: RequestInput, name: str) -> str | None:
    value = request.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


@dataclass(frozen=True)
class _ReadContext:
    request: RequestInput
    date_format: str


def _read_plain(cf: CustomFieldDescriptor, ctx: _ReadContext) -> Any:
    return _present(ctx.request, cf.input_name)


def _read_list(cf: CustomFieldDescriptor, ctx: _ReadContext) -> Any:
    values = [v for v in ctx.request.getlist(cf.input_name) if v.strip() != ""]
    return values or None


def _read_date(cf: CustomFieldDescriptor, ctx: _ReadContext) -> Any:
    date_str = _present(ctx.request, cf.input_name + "_input")
    if date_str is None:
        return None
    date_parts = split_localized_date(date_str, ctx.date_format)
    if date_parts is None:
        return None
    return _to_timestamp(date_parts, 0, 0, 0)


def _read_datetime(cf: CustomFieldDescriptor, ctx: _ReadContext) -> Any:
    parts = [_present(ctx.request, cf.input_name + suffix) for suffix in DATE_PART_SUFFIXES]
    if any(p is None for p in parts):
        return None
    date_str, *time_parts = parts
    try:
        hour, minute, second = (int(p) for p in time_parts)
    except ValueError:
        return None
    date_parts = split_localized_date(date_str, ctx.date_format)
    if date_parts is None:
        return None
    return _to_timestamp(date_parts, hour, minute, second)


def _read_nothing(cf: CustomFieldDescriptor, ctx: _ReadContext) -> Any:
    return None


_Reader = Callable[[CustomFieldDescriptor, _ReadContext], Any]

_READERS: dict[CustomFieldType, _Reader] = {
    CustomFieldType.CHECKBOX: _read_list,
    CustomFieldType.LIST: _read_list,
    CustomFieldType.MULTISELECTION_LIST: _read_list,
    CustomFieldType.DATE: _read_date,
    CustomFieldType.DATETIME: _read_datetime,
    # too large for a filter row, never filters
    CustomFieldType.TEXT_AREA: _read_nothing,
}


def coerce_custom_field(
    cf: CustomFieldDescriptor,
    request: RequestInput,
    *,
    reset: bool,
    date_format: str,
    labels: LabelLookup,
    locale: str | None = None,
) -> CustomFieldFilter:
    """Normalize one custom field of the current request."""
    reader = _READERS.get(cf.type, _read_plain)
    value = None if reset else reader(cf, _ReadContext(request, date_format))

    display = value
    if isinstance(display, list):
        display = LIST_DISPLAY_SEPARATOR.join(str(v) for v in display)

    label = labels.label(cf.label, locale, warn=False).replace(LOCALIZE_TAG, "")

    return CustomFieldFilter(
        field=cf,
        selected=value,
        display_value=None if display is None else str(display),
        label=label,
        size=CF_LIST_INPUT_SIZE if cf.type.is_list else CF_INPUT_SIZE,
        visible=cf.type is not CustomFieldType.TEXT_AREA,
    )


def build_custom_field_panel(
    fields: list[CustomFieldDescriptor],
    request: RequestInput,
    *,
    reset: bool,
    date_format: str,
    labels: LabelLookup,
    locale: str | None = None,
    collapsed: bool = False,
) -> CustomFieldPanel:
    """Coerce every linked field and assemble the panel."""
    rows = tuple(
        coerce_custom_field(
            cf, request, reset=reset, date_format=date_format, labels=labels, locale=locale
        )
        for cf in fields
    )
    btn_key = "btn_show_cf" if collapsed else "btn_hide_cf"
    return CustomFieldPanel(
        fields=rows,
        collapsed=collapsed,
        btn_label=labels.label(btn_key, locale),
    )


__all__ = [
    "CF_INPUT_NAME_PREFIX",
    "CF_INPUT_SIZE",
    "CF_LIST_INPUT_SIZE",
    "CustomFieldDescriptor",
    "CustomFieldFilter",
    "CustomFieldPanel",
    "CustomFieldType",
    "build_custom_field_panel",
    "coerce_custom_field",
    "split_localized_date",
]
