"""Requirement tree filter control.

Runs one request through the panel: resolve settings, normalize every
facet, then decide how the tree is delivered. All configuration is read
once per request; the collaborators are injected so the control can be
driven by the Flask app, the CLI or tests alike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reqtree.config import ConfigLoader
from reqtree.filters.aggregator import FilterState, aggregate_filters
from reqtree.filters.facets import BUILTIN_FACETS, FacetName
from reqtree.filters.normalizers import FilterContext
from reqtree.filters.request import RequestInput
from reqtree.filters.settings import (
    DEFAULT_MODE,
    ResolvedSetting,
    SettingsStore,
    resolve_cf_collapsed,
    resolve_refresh_on_action,
)
from reqtree.filters.tree_mode import TreeRenderPlan, build_tree_plan
from reqtree.services import (
    CustomFieldRegistry,
    LabelLookup,
    ProjectDirectory,
    RelationTypeRegistry,
    RequirementCounter,
    TreeAssembler,
)

FILTER_CONFIG_SECTION = "tree_filter.requirements"
FALLBACK_DATE_FORMAT = "%d/%m/%Y"


@dataclass
class FilterPanelResult:
    """Everything the page needs for one render of the requirement tree panel."""

    project_id: int
    project_name: str
    settings: dict[str, ResolvedSetting] = field(default_factory=dict)
    state: FilterState = field(default_factory=FilterState)
    tree: TreeRenderPlan | None = None
    display_settings: bool = False
    filter_mode_choice_enabled: bool = False

    @property
    def do_filtering(self) -> bool:
        return self.state.do_filtering

    def to_dict(self) -> dict[str, Any]:
        data = {
            "project_id": self.project_id,
            "project_name": self.project_name,
            "display_settings": self.display_settings,
            "filter_mode_choice_enabled": self.filter_mode_choice_enabled,
            "settings": {k: s.to_dict() for k, s in self.settings.items()},
        }
        data.update(self.state.to_dict())
        data["tree"] = self.tree.to_dict() if self.tree is not None else None
        return data


class RequirementFilterControl:
    """Filter panel of the requirement specification tree."""

    def __init__(
        self,
        config: ConfigLoader,
        *,
        labels: LabelLookup,
        store: SettingsStore,
        relations: RelationTypeRegistry | None = None,
        projects: ProjectDirectory | None = None,
        custom_fields: CustomFieldRegistry | None = None,
        assembler: TreeAssembler | None = None,
        counter: RequirementCounter | None = None,
        mode: str = DEFAULT_MODE,
    ) -> None:
        self.config = config
        self.labels = labels
        self.store = store
        self.relations = relations
        self.projects = projects
        self.custom_fields = custom_fields
        self.assembler = assembler
        self.counter = counter
        self.mode = mode

    # ─────────────────────────────────────────────────────────────────
    # Configuration
    # ─────────────────────────────────────────────────────────────────

    def enabled_facets(self) -> frozenset[FacetName]:
        section = self.config.section(FILTER_CONFIG_SECTION)
        return frozenset(d.name for d in BUILTIN_FACETS if section.get(d.key, False))

    def date_format(self, locale: str | None) -> str:
        locale = locale or self.config.get("locales.default", "en_GB")
        formats = self.config.section("locales.date_formats")
        return formats.get(locale, FALLBACK_DATE_FORMAT)

    def build_context(
        self,
        request: RequestInput,
        project_id: int,
        locale: str | None = None,
        cf_collapsed: bool = False,
    ) -> FilterContext:
        cfg = self.config
        return FilterContext(
            project_id=project_id,
            request=request,
            labels=self.labels,
            locale=locale,
            enabled=self.enabled_facets(),
            show_filters=bool(cfg.get(f"{FILTER_CONFIG_SECTION}.show_filters", True)),
            status_labels=cfg.section("requirements.status_labels"),
            type_labels=cfg.section("requirements.type_labels"),
            spec_type_labels=cfg.section("requirement_specs.type_labels"),
            coverage_enabled=bool(cfg.get("requirements.expected_coverage_management", False)),
            relations_enabled=bool(cfg.get("requirements.relations.enable", False)),
            relation_registry=self.relations,
            projects=self.projects,
            glue_character=cfg.get("testcase.glue_character", "-"),
            custom_field_registry=self.custom_fields,
            date_format=self.date_format(locale),
            cf_collapsed=cf_collapsed,
        )

    # ─────────────────────────────────────────────────────────────────
    # Request steps
    # ─────────────────────────────────────────────────────────────────

    def init_settings(self, request: RequestInput, project_id: int) -> dict[str, ResolvedSetting]:
        refresh = resolve_refresh_on_action(
            request,
            self.store,
            project_id,
            automatic_tree_refresh=self.config.get(
                f"{FILTER_CONFIG_SECTION}.automatic_tree_refresh", 0
            ),
            mode=self.mode,
        )
        return {refresh.key: refresh}

    def init_filters(
        self, request: RequestInput, project_id: int, locale: str | None = None
    ) -> FilterState:
        collapsed = resolve_cf_collapsed(request, self.store)
        ctx = self.build_context(request, project_id, locale, cf_collapsed=collapsed)
        return aggregate_filters(ctx)

    def build_tree_menu(
        self, project_id: int, project_name: str, state: FilterState
    ) -> TreeRenderPlan:
        if self.assembler is None or self.counter is None:
            raise ValueError("Tree assembly needs both a tree assembler and a requirement counter")
        return build_tree_plan(
            project_id=project_id,
            project_name=project_name,
            active=state.active,
            do_filtering=state.do_filtering,
            assembler=self.assembler,
            counter=self.counter,
            base_href=self.config.get("server.base_href", "/"),
        )

    def run(
        self,
        request: RequestInput,
        project_id: int,
        project_name: str,
        locale: str | None = None,
        build_tree: bool = True,
    ) -> FilterPanelResult:
        """Resolve settings and filters, then (optionally) plan the tree."""
        settings = self.init_settings(request, project_id)
        state = self.init_filters(request, project_id, locale)
        tree = self.build_tree_menu(project_id, project_name, state) if build_tree else None
        return FilterPanelResult(
            project_id=project_id,
            project_name=project_name,
            settings=settings,
            state=state,
            tree=tree,
            display_settings=bool(settings),
            filter_mode_choice_enabled=bool(
                self.config.get(f"{FILTER_CONFIG_SECTION}.advanced_filter_mode_choice", False)
            ),
        )
