"""
reqtree.cli - Command-line interface.

Main entry point for the reqtree CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from reqtree import __version__
from reqtree.commands import config_cmd, filter_cmd, serve


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="reqtree",
        description="Requirement specification tree filtering",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reqtree filter --project 1 --field filter_status=D
  reqtree filter --project 1 --input request.json --format json
  reqtree serve --catalog catalog.toml --port 8080

Configuration:
  reqtree config path           # Show config file location
  reqtree config show           # View all settings
  reqtree config get server.port

For detailed command help: reqtree <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"reqtree {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # filter command
    filter_parser = subparsers.add_parser(
        "filter",
        help="Evaluate the filter panel for one request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  reqtree filter --project 1                            # Lazy tree, no filters
  reqtree filter --project 1 --field filter_doc_id=REQ  # Eager, filtered tree
  reqtree filter --project 1 --field filter_type=2 --field filter_type=3
  reqtree filter --project 1 --field reset_filters      # Reset wins

Request files hold a JSON object of field name to value (or list of values).
""",
    )
    filter_parser.add_argument(
        "--catalog",
        type=Path,
        help="Project catalog TOML (default: catalog.path from config)",
        metavar="PATH",
    )
    filter_parser.add_argument(
        "--project",
        type=int,
        required=True,
        help="Project id",
        metavar="ID",
    )
    filter_parser.add_argument(
        "--field",
        action="append",
        help="Request field NAME=VALUE (repeatable)",
        metavar="NAME=VALUE",
    )
    filter_parser.add_argument(
        "--input",
        type=Path,
        help="JSON file with request fields",
        metavar="PATH",
    )
    filter_parser.add_argument(
        "--locale",
        help="Locale for labels and date parsing (default: locales.default)",
    )
    filter_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    filter_parser.add_argument(
        "--no-tree",
        action="store_true",
        help="Only resolve filters, do not plan the tree",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the filter panel REST server",
    )
    serve_parser.add_argument(
        "--catalog",
        type=Path,
        help="Project catalog TOML (default: catalog.path from config)",
        metavar="PATH",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        help="Port (default: server.port from config)",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="View configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("show", help="Show the merged configuration")
    config_subparsers.add_parser("path", help="Show the configuration file path")
    get_parser = config_subparsers.add_parser("get", help="Get a configuration value")
    get_parser.add_argument("key", help="Dotted key, e.g. server.port")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "filter":
            return filter_cmd.run(args)
        elif args.command == "serve":
            return serve.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
