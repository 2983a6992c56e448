"""
reqtree.commands - CLI command implementations
"""

__all__ = [
    "config_cmd",
    "filter_cmd",
    "serve",
]
