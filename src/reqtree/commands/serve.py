"""
reqtree.commands.serve - Run the requirement tree panel server.
"""

from __future__ import annotations

import argparse

from reqtree.config import get_config
from reqtree.server import create_app
from reqtree.services.catalog import load_catalog


def run(args: argparse.Namespace) -> int:
    """Start the Flask server."""
    config = get_config(getattr(args, "config", None))
    catalog = load_catalog(config, getattr(args, "catalog", None))
    port = args.port or config.get("server.port", 8080)

    if not getattr(args, "quiet", False):
        print(
            f"""
======================================
  reqtree Server
======================================

Catalog:  {len(catalog.projects)} project(s)
Server:   http://{args.host}:{port}

Press Ctrl+C to stop
"""
        )

    app = create_app(config, catalog)
    try:
        app.run(host=args.host, port=port, debug=False)
    except KeyboardInterrupt:
        print("\nServer stopped.")

    return 0
