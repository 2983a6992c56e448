"""Tests for the TOML project catalog."""

import json

import pytest

from reqtree.config import ConfigLoader
from reqtree.filters.aggregator import ActiveFilterSet
from reqtree.filters.custom_fields import CustomFieldType
from reqtree.services import (
    CustomFieldRegistry,
    ProjectDirectory,
    RequirementCounter,
    TreeAssembler,
)
from reqtree.services.catalog import ProjectCatalog, load_catalog


def _filters(**active):
    return ActiveFilterSet({f"filter_{k}": v for k, v in active.items()})


def _req_ids(nodes):
    found = []
    for node in nodes:
        if node["testlink_node_type"] == "requirement":
            found.append(node["id"])
        found.extend(_req_ids(node.get("children", [])))
    return sorted(found)


def _assemble(catalog, **active):
    tree = catalog.assemble_tree(1, "Demo", _filters(**active))
    nodes = json.loads(tree.menustring) if tree.menustring else []
    return tree, nodes


class TestLoading:
    def test_projects(self, catalog):
        assert sorted(catalog.projects) == [1, 2]
        assert catalog.get_project(1).name == "Demo"
        assert catalog.get_project(99) is None

    def test_implements_collaborator_protocols(self, catalog):
        assert isinstance(catalog, ProjectDirectory)
        assert isinstance(catalog, CustomFieldRegistry)
        assert isinstance(catalog, RequirementCounter)
        assert isinstance(catalog, TreeAssembler)

    def test_missing_file_raises_value_error(self, tmp_path):
        with pytest.raises(ValueError, match="Cannot read catalog"):
            ProjectCatalog.from_toml(tmp_path / "missing.toml")

    def test_load_catalog_resolves_relative_to_config(self, tmp_path, config_data):
        (tmp_path / "cat.toml").write_text('[[projects]]\nid = 4\nname = "X"\n')
        config_data["catalog"]["path"] = "cat.toml"
        config = ConfigLoader.from_dict(config_data, path=tmp_path / ".reqtree.toml")
        assert list(load_catalog(config).projects) == [4]

    def test_load_catalog_needs_a_path(self, config):
        with pytest.raises(ValueError, match="No catalog"):
            load_catalog(config)


class TestLookups:
    def test_test_case_prefix(self, catalog):
        assert catalog.test_case_prefix(1) == "DEMO"

    def test_custom_fields(self, catalog):
        fields = catalog.linked_custom_fields(1)
        assert [f.id for f in fields] == [10, 11, 13]
        assert fields[0].type is CustomFieldType.LIST
        assert fields[2].type is CustomFieldType.TEXT_AREA

    def test_project_without_custom_fields(self, catalog):
        assert catalog.linked_custom_fields(2) is None

    def test_count_requirements(self, catalog):
        assert catalog.count_requirements(1) == 4
        assert catalog.count_requirements(2) == 1


class TestAssembleTree:
    def test_doc_id_substring_case_insensitive(self, catalog):
        tree, nodes = _assemble(catalog, doc_id="req-00")
        assert tree.total_req_count == 2
        assert _req_ids(nodes) == [1001, 1002]
        assert [n["id"] for n in nodes] == [100]

    def test_status_membership(self, catalog):
        _, nodes = _assemble(catalog, status=["D"])
        assert _req_ids(nodes) == [1001, 2001]

    def test_spec_type_keeps_ancestors(self, catalog):
        tree, nodes = _assemble(catalog, spec_type=[1])
        assert _req_ids(nodes) == [1101]
        assert nodes[0]["id"] == 100
        assert nodes[0]["children"][0]["id"] == 110
        assert tree.total_req_count == 1

    def test_type_and_coverage(self, catalog):
        _, nodes = _assemble(catalog, type=[2], coverage=2)
        assert _req_ids(nodes) == [1002]

    def test_relation_key(self, catalog):
        _, nodes = _assemble(catalog, relation=["3"])
        assert _req_ids(nodes) == [1001]

    def test_test_case_substring(self, catalog):
        _, nodes = _assemble(catalog, tc_id="DEMO-1")
        assert _req_ids(nodes) == [1001, 1002]

    def test_custom_field_list_overlap(self, catalog):
        _, nodes = _assemble(catalog, custom_fields={10: ["API"]})
        assert _req_ids(nodes) == [1002]

    def test_custom_field_equality(self, catalog):
        _, nodes = _assemble(catalog, custom_fields={11: "bob"})
        assert _req_ids(nodes) == [1101]

    def test_no_match_gives_empty_payload(self, catalog):
        tree, nodes = _assemble(catalog, title="nothing like this")
        assert tree.total_req_count == 0
        assert tree.menustring == ""

    def test_spec_label_carries_match_count(self, catalog):
        _, nodes = _assemble(catalog, status=["D", "R"])
        assert nodes[0]["text"] == "SRS-1:System (2)"

    def test_inactive_facets_do_not_filter(self, catalog):
        tree, _ = _assemble(catalog, title=None, status=None)
        assert tree.total_req_count == 4

    def test_unknown_project(self, catalog):
        with pytest.raises(KeyError):
            catalog.assemble_tree(99, "Nope", _filters())


class TestChildren:
    def test_project_root_lists_top_specs(self, catalog):
        children = catalog.children_of(1, 1)
        assert [c["id"] for c in children] == [100, 200, 300]
        assert children[0]["text"] == "SRS-1:System (3)"
        assert all(c["leaf"] is False for c in children)

    def test_spec_lists_child_specs_then_requirements(self, catalog):
        children = catalog.children_of(1, 100)
        assert [c["id"] for c in children] == [110, 1001, 1002]
        assert children[1]["leaf"] is True

    def test_unknown_node(self, catalog):
        assert catalog.children_of(1, 4242) is None
        assert catalog.children_of(99, 1) is None
