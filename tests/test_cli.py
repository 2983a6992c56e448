"""Tests for the reqtree command-line interface."""

import json

import pytest

from reqtree.cli import create_parser, main
from reqtree.commands.filter_cmd import parse_fields


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test from an empty directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("reqtree.config.find_config_file", lambda start: None)
    monkeypatch.setattr("reqtree.commands.config_cmd.find_config_file", lambda start: None)
    return tmp_path


def _filter(sample_catalog_path, *extra):
    return ["filter", "--catalog", str(sample_catalog_path), "--project", "1", *extra]


class TestParser:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "reqtree" in capsys.readouterr().out

    def test_filter_requires_project(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["filter"])

    def test_parse_fields(self):
        assert parse_fields(["a=1", "b", "c=x=y"]) == [("a", "1"), ("b", "1"), ("c", "x=y")]


class TestFilterCommand:
    def test_json_output_lazy(self, sample_catalog_path, capsys):
        assert main(_filter(sample_catalog_path, "--format", "json")) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["do_filtering"] is False
        assert data["tree"]["mode"] == "lazy"
        assert data["tree"]["root_node"]["name"] == "Demo (4)"

    def test_text_output_eager(self, sample_catalog_path, capsys):
        assert main(_filter(sample_catalog_path, "--field", "filter_status=D")) == 0
        out = capsys.readouterr().out
        assert "filter_status: ['D']" in out
        assert "Tree mode: eager" in out
        assert "Root: Demo (2)" in out

    def test_bare_reset_field(self, sample_catalog_path, capsys):
        args = _filter(
            sample_catalog_path, "--field", "filter_status=D", "--field", "reset_filters"
        )
        assert main(args) == 0
        assert "Active filters: none" in capsys.readouterr().out

    def test_request_file(self, sample_catalog_path, tmp_path, capsys):
        request = tmp_path / "request.json"
        request.write_text(json.dumps({"filter_type": ["2"], "filter_doc_id": "REQ-002"}))
        args = _filter(sample_catalog_path, "--input", str(request), "--format", "json")
        assert main(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["active_filters"]["filter_type"] == [2]
        assert data["tree"]["root_node"]["name"] == "Demo (1)"

    def test_no_tree(self, sample_catalog_path, capsys):
        args = _filter(sample_catalog_path, "--no-tree", "--format", "json")
        assert main(args) == 0
        assert json.loads(capsys.readouterr().out)["tree"] is None

    def test_unknown_project(self, sample_catalog_path, capsys):
        args = ["filter", "--catalog", str(sample_catalog_path), "--project", "42"]
        assert main(args) == 1
        assert "Unknown project 42" in capsys.readouterr().err

    def test_missing_catalog_reports_error(self, capsys):
        assert main(["filter", "--project", "1"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_verbose_reraises(self):
        with pytest.raises(ValueError):
            main(["-v", "filter", "--project", "1"])


class TestConfigCommand:
    def test_get(self, capsys):
        assert main(["config", "get", "server.port"]) == 0
        assert capsys.readouterr().out.strip() == "8080"

    def test_get_bool(self, capsys):
        assert main(["config", "get", "tree_filter.requirements.show_filters"]) == 0
        assert capsys.readouterr().out.strip() == "true"

    def test_get_unknown_key(self, capsys):
        assert main(["config", "get", "nope.nothing"]) == 1
        assert "Unknown key" in capsys.readouterr().err

    def test_show(self, capsys):
        assert main(["config", "show"]) == 0
        out = capsys.readouterr().out
        assert "[server]" in out
        assert "glue_character" in out

    def test_path_without_file(self, capsys):
        assert main(["config", "path"]) == 1

    def test_path_with_explicit_file(self, tmp_path, capsys):
        path = tmp_path / "my.toml"
        path.write_text("[server]\nport = 1\n")
        assert main(["--config", str(path), "config", "path"]) == 0
        assert capsys.readouterr().out.strip() == str(path)

    def test_config_file_feeds_filter(self, tmp_path, sample_catalog_path, capsys):
        path = tmp_path / "my.toml"
        path.write_text(f'[catalog]\npath = "{sample_catalog_path.as_posix()}"\n')
        assert main(["--config", str(path), "filter", "--project", "2"]) == 0
        assert "Root: Bare (1)" in capsys.readouterr().out
