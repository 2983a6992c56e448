"""Shared fixtures for the reqtree test suite."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from reqtree.config import DEFAULT_CONFIG, ConfigLoader
from reqtree.filters.facets import FacetName
from reqtree.filters.normalizers import FilterContext
from reqtree.filters.request import RequestInput
from reqtree.services.catalog import ProjectCatalog
from reqtree.services.labels import LabelCatalog
from reqtree.services.relations import ConfiguredRelationRegistry
from tests.filter_test_helpers import (
    RecordingAssembler,
    RecordingCounter,
    RecordingRelations,
    StaticCustomFields,
    StaticProjects,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_CATALOG = FIXTURES_DIR / "sample_catalog.toml"


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Mutable copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def config(config_data) -> ConfigLoader:
    return ConfigLoader.from_dict(config_data)


@pytest.fixture
def labels(config) -> LabelCatalog:
    return LabelCatalog.from_config(config)


@pytest.fixture
def relations(config, labels) -> RecordingRelations:
    return RecordingRelations(ConfiguredRelationRegistry.from_config(config, labels))


@pytest.fixture
def assembler() -> RecordingAssembler:
    return RecordingAssembler()


@pytest.fixture
def counter() -> RecordingCounter:
    return RecordingCounter()


@pytest.fixture
def sample_catalog_path() -> Path:
    return SAMPLE_CATALOG


@pytest.fixture
def catalog() -> ProjectCatalog:
    return ProjectCatalog.from_toml(SAMPLE_CATALOG)


@pytest.fixture
def make_context(labels, relations, config):
    """Factory for a FilterContext with every facet enabled.

    Coverage and relations are switched on; keyword arguments override
    any FilterContext field.
    """

    def _make(fields: dict[str, Any] | None = None, **overrides: Any) -> FilterContext:
        kwargs: dict[str, Any] = {
            "project_id": 1,
            "request": RequestInput.from_dict(fields or {}),
            "labels": labels,
            "enabled": frozenset(FacetName),
            "status_labels": config.section("requirements.status_labels"),
            "type_labels": config.section("requirements.type_labels"),
            "spec_type_labels": config.section("requirement_specs.type_labels"),
            "coverage_enabled": True,
            "relations_enabled": True,
            "relation_registry": relations,
            "projects": StaticProjects("PRJ"),
            "custom_field_registry": StaticCustomFields(None),
        }
        kwargs.update(overrides)
        return FilterContext(**kwargs)

    return _make
