"""reqtree.server - Flask REST API server for the requirement tree panel.

Exposes the filter panel, the lazy node loader and a status endpoint
over HTTP.
"""

from reqtree.server.app import create_app

__all__ = ["create_app"]
