"""Tests for the request snapshot and raw value extraction."""

import pytest
from werkzeug.datastructures import MultiDict

from reqtree.filters.facets import FACETS_BY_NAME, FacetName
from reqtree.filters.request import RequestInput, read_raw


def _raw(fields, facet):
    return read_raw(RequestInput.from_dict(fields), FACETS_BY_NAME[facet])


class TestRequestInput:
    def test_from_dict_splits_lists(self):
        req = RequestInput.from_dict({"a": "1", "b": ["x", "y"], "c": None})
        assert req.get("a") == "1"
        assert req.getlist("b") == ["x", "y"]
        assert not req.has("c")

    def test_getlist_accepts_bracket_spelling(self):
        req = RequestInput.from_pairs([("filter_status[]", "D"), ("filter_status[]", "R")])
        assert req.getlist("filter_status") == ["D", "R"]

    def test_from_multidict(self):
        req = RequestInput.from_multidict(MultiDict([("filter_type", "1"), ("filter_type", "2")]))
        assert req.getlist("filter_type") == ["1", "2"]

    def test_snapshot_is_immutable(self):
        source = {"filter_title": ["x"]}
        req = RequestInput.from_dict(source)
        source["filter_title"].append("y")
        assert req.getlist("filter_title") == ["x"]
        with pytest.raises(TypeError):
            req._fields["filter_title"] = ("z",)

    def test_equality(self):
        assert RequestInput.from_dict({"a": "1"}) == RequestInput.from_pairs([("a", "1")])

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1", True),
            ("yes", True),
            ("", False),
            (None, False),
            ("0", False),
            ("False", False),
            (" off ", False),
            ("no", False),
        ],
    )
    def test_reset_flag(self, value, expected):
        assert RequestInput.from_dict({"reset_filters": value}).reset_filters is expected


class TestReadRaw:
    def test_string_is_trimmed(self):
        assert _raw({"filter_doc_id": "  REQ-1 "}, FacetName.DOC_ID) == "REQ-1"

    def test_absent_string_is_none(self):
        assert _raw({}, FacetName.TITLE) is None

    def test_array_int_drops_non_integers(self):
        assert _raw({"filter_type": ["1", "x", " 3 "]}, FacetName.TYPE) == [1, 3]

    def test_array_string(self):
        assert _raw({"filter_status": ["D", "R"]}, FacetName.STATUS) == ["D", "R"]

    def test_int_shape_keeps_raw_text(self):
        assert _raw({"filter_coverage": "abc"}, FacetName.COVERAGE) == "abc"

    def test_dynamic_shape_reads_nothing(self):
        assert _raw({"filter_custom_fields": "x"}, FacetName.CUSTOM_FIELDS) is None
