"""reqtree.server.app - Flask app factory and REST API routes.

A thin HTTP wrapper: every request is turned into a ``RequestInput``
snapshot and handed to ``RequirementFilterControl``. Panel preferences
are kept in the Flask session.

State:
    _state = {"config": config, "catalog": catalog, "labels": labels,
              "relations": relations, "build_time": time.time()}
"""

from __future__ import annotations

import time
from typing import Any

from flask import Flask, jsonify, request, session
from flask_cors import CORS

from reqtree import __version__
from reqtree.config import ConfigLoader
from reqtree.filters.control import RequirementFilterControl
from reqtree.filters.request import RequestInput
from reqtree.filters.settings import SessionSettingsStore
from reqtree.services.catalog import ProjectCatalog
from reqtree.services.labels import LabelCatalog
from reqtree.services.relations import ConfiguredRelationRegistry


def _int_arg(name: str) -> int | None:
    raw = request.values.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def create_app(config: ConfigLoader, catalog: ProjectCatalog) -> Flask:
    """Create the Flask application with REST API routes.

    Args:
        config: Merged reqtree configuration.
        catalog: Project catalog serving requirement data.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)
    app.secret_key = config.get("server.secret_key", "reqtree-dev")

    CORS(app)

    # Disable browser caching; the panel state changes with every submit
    @app.after_request
    def _no_cache(response):
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return response

    labels = LabelCatalog.from_config(config)
    _state: dict[str, Any] = {
        "config": config,
        "catalog": catalog,
        "labels": labels,
        "relations": ConfiguredRelationRegistry.from_config(config, labels),
        "build_time": time.time(),
    }

    def _control() -> RequirementFilterControl:
        cat = _state["catalog"]
        return RequirementFilterControl(
            _state["config"],
            labels=_state["labels"],
            store=SessionSettingsStore(session),
            relations=_state["relations"],
            projects=cat,
            custom_fields=cat,
            assembler=cat,
            counter=cat,
        )

    # ─────────────────────────────────────────────────────────────────
    # Filter panel
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/filter-panel", methods=["GET", "POST"])
    def api_filter_panel():
        """GET|POST /api/filter-panel?tproject_id=<id> - Evaluate the filter panel."""
        project_id = _int_arg("tproject_id")
        if project_id is None:
            return jsonify({"error": "tproject_id parameter required"}), 400
        project = _state["catalog"].get_project(project_id)
        if project is None:
            return jsonify({"error": f"project not found: {project_id}"}), 404

        snapshot = RequestInput.from_multidict(request.values)
        locale = request.values.get("locale") or None
        result = _control().run(snapshot, project.id, project.name, locale=locale)
        return jsonify(result.to_dict())

    # ─────────────────────────────────────────────────────────────────
    # Lazy tree loader
    # ─────────────────────────────────────────────────────────────────

    @app.route("/api/requirement-nodes")
    def api_requirement_nodes():
        """GET /api/requirement-nodes?root_node=<id>&tproject_id=<id> - Child nodes."""
        project_id = _int_arg("tproject_id")
        node_id = _int_arg("root_node")
        if project_id is None or node_id is None:
            return jsonify({"error": "root_node and tproject_id parameters required"}), 400
        children = _state["catalog"].children_of(project_id, node_id)
        if children is None:
            return jsonify({"error": f"node not found: {node_id}"}), 404
        return jsonify(children)

    @app.route("/api/status")
    def api_status():
        """GET /api/status - Projects and requirement counts."""
        cat = _state["catalog"]
        return jsonify(
            {
                "version": __version__,
                "build_time": _state["build_time"],
                "projects": [
                    {
                        "id": p.id,
                        "name": p.name,
                        "requirement_count": cat.count_requirements(p.id),
                    }
                    for p in cat.projects.values()
                ],
            }
        )

    return app
