"""Relations - Requirement relation types and their select options.

This module defines the relation types offered by the relation facet:
- RelationDirection: Which end of a relation a requirement sits on
- RelationType: A configured relation with a label per direction
- RelationOptions: The option list handed to the relation normalizer
- ConfiguredRelationRegistry: Relation types read from configuration
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from reqtree.services import LabelLookup


class RelationDirection(Enum):
    """Ends of a requirement relation.

    - SOURCE: The requirement declaring the relation ("parent of")
    - DESTINATION: The requirement on the receiving end ("child of")
    """

    SOURCE = "source"
    DESTINATION = "destination"

    def option_key(self, type_id: int | str) -> str:
        """Option key for this end of relation type ``type_id``."""
        return f"{type_id}_{self.value}"


@dataclass(frozen=True)
class RelationType:
    """A requirement relation type.

    Attributes:
        id: Numeric relation type id.
        source_label: Label key seen from the source requirement.
        destination_label: Label key seen from the destination requirement.
    """

    id: int
    source_label: str
    destination_label: str

    @property
    def is_equal(self) -> bool:
        """Direction-insensitive relation ("related to")."""
        return self.source_label == self.destination_label

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RelationType:
        source = data.get("source_label", "")
        return cls(
            id=int(data["id"]),
            source_label=source,
            destination_label=data.get("destination_label", source),
        )


@dataclass
class RelationOptions:
    """Relation select options before the equal-pair merge.

    Attributes:
        items: Option key (``"<id>_source"`` / ``"<id>_destination"``) -> label.
        equal_relations: Option keys of equal relation types; these are
            registered with a ``_source`` suffix only.
    """

    items: dict[str, str] = field(default_factory=dict)
    equal_relations: list[str] = field(default_factory=list)


class ConfiguredRelationRegistry:
    """Relation types from ``requirements.relations.types``."""

    def __init__(self, relation_types: list[RelationType], labels: LabelLookup) -> None:
        self.relation_types = relation_types
        self._labels = labels

    @classmethod
    def from_config(cls, config: Any, labels: LabelLookup) -> ConfiguredRelationRegistry:
        entries = config.get("requirements.relations.types", []) or []
        return cls([RelationType.from_dict(e) for e in entries], labels)

    def relation_options(self, locale: str | None = None) -> RelationOptions:
        options = RelationOptions()
        for rel in self.relation_types:
            source_key = RelationDirection.SOURCE.option_key(rel.id)
            options.items[source_key] = self._labels.label(rel.source_label, locale)
            if rel.is_equal:
                options.equal_relations.append(source_key)
            else:
                dest_key = RelationDirection.DESTINATION.option_key(rel.id)
                options.items[dest_key] = self._labels.label(rel.destination_label, locale)
        return options
