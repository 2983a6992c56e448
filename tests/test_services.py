"""Tests for the configuration-backed label and relation services."""

from reqtree.services import LabelLookup, RelationTypeRegistry
from reqtree.services.labels import LabelCatalog
from reqtree.services.relations import (
    ConfiguredRelationRegistry,
    RelationDirection,
    RelationType,
)


class TestLabelCatalog:
    def test_lookup_in_locale(self):
        labels = LabelCatalog({"en_GB": {"any": "[Any]"}, "de_DE": {"any": "[Alle]"}})
        assert labels.label("any", "de_DE") == "[Alle]"
        assert isinstance(labels, LabelLookup)

    def test_falls_back_to_default_locale(self):
        labels = LabelCatalog({"en_GB": {"any": "[Any]"}})
        assert labels.label("any", "fr_FR") == "[Any]"

    def test_missing_key_is_marked_and_recorded(self):
        labels = LabelCatalog({"en_GB": {}})
        assert labels.label("nope") == "LOCALIZE: nope"
        assert ("en_GB", "nope") in labels.missing

    def test_warn_false_does_not_record(self):
        labels = LabelCatalog({"en_GB": {}})
        labels.label("nope", warn=False)
        assert labels.missing == set()

    def test_from_config(self, config):
        labels = LabelCatalog.from_config(config)
        assert labels.default_locale == "en_GB"
        assert labels.label("req_status_draft") == "Draft"


class TestRelations:
    def test_option_key(self):
        assert RelationDirection.SOURCE.option_key(3) == "3_source"
        assert RelationDirection.DESTINATION.option_key("3") == "3_destination"

    def test_equal_type(self):
        assert RelationType(3, "rel", "rel").is_equal
        assert not RelationType(1, "parent", "child").is_equal

    def test_from_dict_defaults_destination_to_source(self):
        rel = RelationType.from_dict({"id": "4", "source_label": "twin"})
        assert rel == RelationType(4, "twin", "twin")

    def test_options_register_equal_types_once(self, labels):
        registry = ConfiguredRelationRegistry(
            [
                RelationType(1, "req_rel_parent_of", "req_rel_child_of"),
                RelationType(3, "req_rel_related_to", "req_rel_related_to"),
            ],
            labels,
        )
        options = registry.relation_options()
        assert isinstance(registry, RelationTypeRegistry)
        assert options.items == {
            "1_source": "parent of",
            "1_destination": "child of",
            "3_source": "related to",
        }
        assert options.equal_relations == ["3_source"]

    def test_from_config(self, config, labels):
        registry = ConfiguredRelationRegistry.from_config(config, labels)
        assert [r.id for r in registry.relation_types] == [1, 2, 3]
