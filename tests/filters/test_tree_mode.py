"""Tests for eager/lazy tree planning."""

from reqtree.filters.aggregator import ActiveFilterSet
from reqtree.filters.tree_mode import TreeMode, build_tree_plan, lazy_loader_url


def _plan(assembler, counter, active=None, do_filtering=False, base_href="/"):
    return build_tree_plan(
        project_id=1,
        project_name="Demo",
        active=active or ActiveFilterSet({"filter_title": None}),
        do_filtering=do_filtering,
        assembler=assembler,
        counter=counter,
        base_href=base_href,
    )


class TestTreeModeSelect:
    def test_select(self):
        assert TreeMode.select(True) is TreeMode.EAGER
        assert TreeMode.select(False) is TreeMode.LAZY


class TestLazyPlan:
    def test_root_placeholder_with_unfiltered_count(self, assembler, counter):
        plan = _plan(assembler, counter)
        assert plan.mode is TreeMode.LAZY
        assert plan.root_node.name == "Demo (7)"
        assert plan.root_node.href == "javascript:TPROJECT_REQ_SPEC_MGMT(1)"
        assert plan.root_node.node_type == "testproject"
        assert plan.children == "[]"
        assert plan.predicate is None

    def test_assembler_not_called(self, assembler, counter):
        _plan(assembler, counter)
        assert assembler.calls == []
        assert counter.calls == [1]

    def test_loader_url(self, assembler, counter):
        plan = _plan(assembler, counter, base_href="http://host/app/")
        assert plan.loader == "http://host/app/api/requirement-nodes?root_node=1&tproject_id=1"
        assert lazy_loader_url("/", 5) == "/api/requirement-nodes?root_node=5&tproject_id=5"

    def test_drag_and_drop_enabled(self, assembler, counter):
        plan = _plan(assembler, counter)
        assert plan.drag_drop.enabled is True
        assert plan.drag_drop.backend_url == "/api/requirement-nodes/move"
        assert plan.drag_drop.use_before_move_node is True

    def test_cookie_prefix(self, assembler, counter):
        assert _plan(assembler, counter).cookie_prefix == "req_specification_tproject_id_1_"


class TestEagerPlan:
    def test_assembled_tree_with_count_suffix(self, assembler, counter):
        active = ActiveFilterSet({"filter_title": "Log"})
        plan = _plan(assembler, counter, active=active, do_filtering=True)
        assert plan.mode is TreeMode.EAGER
        assert plan.root_node.name == "Demo (2)"
        assert plan.children == '[{"id": 100}]'
        assert plan.loader == ""
        assert plan.predicate == active

    def test_drag_and_drop_disabled(self, assembler, counter):
        plan = _plan(assembler, counter, do_filtering=True)
        assert plan.drag_drop.enabled is False

    def test_assembler_receives_predicate_once(self, assembler, counter):
        active = ActiveFilterSet({"filter_title": "Log"})
        _plan(assembler, counter, active=active, do_filtering=True)
        assert len(assembler.calls) == 1
        project_id, name, filters, options = assembler.calls[0]
        assert (project_id, name) == (1, "Demo")
        assert filters is active
        assert options == {"for_printing": False, "exclude_branches": None}
        assert counter.calls == []

    def test_empty_result_serializes_as_empty_list(self, assembler, counter):
        assembler.total = 0
        assembler.menustring = ""
        plan = _plan(assembler, counter, do_filtering=True)
        assert plan.children == "[]"
        assert plan.root_node.name == "Demo (0)"

    def test_to_dict(self, assembler, counter):
        data = _plan(assembler, counter, do_filtering=True).to_dict()
        assert data["mode"] == "eager"
        assert data["dragDrop"]["enabled"] is False
        assert data["cookiePrefix"] == "req_specification_tproject_id_1_"
