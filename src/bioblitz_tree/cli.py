"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import functools
import http.server
import sys
from pathlib import Path

import requests

from bioblitz_tree import __version__
from bioblitz_tree.config import get_settings
from bioblitz_tree.errors import ReportError
from bioblitz_tree.flows.report import build_report


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="bioblitz-tree",
        description="Circular tree of life for the taxa observed in an iNaturalist project",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'report' command - run the whole pipeline
    report_parser = subparsers.add_parser("report", help="Build the tree report")
    report_parser.add_argument(
        "--project",
        type=str,
        default=None,
        help="iNaturalist project slug or id (default: project_id from settings)",
    )
    report_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: output_dir from settings)",
    )

    subparsers.add_parser("info", help="Show application info")

    # 'serve' command - serve built report locally
    serve_parser = subparsers.add_parser("serve", help="Serve the report locally")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def cmd_report(args: argparse.Namespace) -> int:
    """Handle the 'report' command."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    try:
        result = build_report(project_id=args.project, output_dir=args.output_dir)
    except (ReportError, requests.RequestException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for path in result["outputs"]:
        print(f"  wrote {path}")
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Project: {settings.project_id}")
    print(f"Output: {settings.output_dir}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the built report locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port
    site_dir = Path(settings.output_dir)

    if not site_dir.exists():
        print("No output directory found. Run 'bioblitz-tree report' first.", file=sys.stderr)
        return 1

    handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_dir))

    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Serving report on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")

    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "report": cmd_report,
        "info": cmd_info,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
