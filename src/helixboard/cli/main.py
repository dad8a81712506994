#!/usr/bin/env python3
"""
Helixboard CLI - Main entry point.

Usage:
    helixboard                               # Serve, metadata from local HelixDB /introspect
    helixboard local-file                    # Serve, metadata from helixdb-cfg files
    helixboard cloud https://my.helix.cloud  # Serve, metadata from a cloud HelixDB
    helixboard parse-schema schema.hx        # Print the parsed schema as JSON
    helixboard parse-queries queries.hx      # Print the endpoint listing as JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

import uvicorn

from .. import __version__
from ..app import create_app
from ..config import AppConfig, Settings
from ..core.defs import DataSource
from ..core.errors import SchemaLoadError
from ..core.query_parser import endpoints_from_queries, parse_queries_file
from ..core.schema_parser import parse_schema_file
from ..core.utils import canonicalize

SERVE = "serve"


def _print_json(value: Any) -> None:
    print(json.dumps(canonicalize(value), indent=2))


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server."""
    source = DataSource(args.source)
    if source is DataSource.CLOUD and not args.cloud_url:
        print("Error: Cloud URL is required for cloud mode")
        print("Usage: helixboard cloud <cloud_url>")
        return 1

    settings = Settings()
    config = AppConfig(
        source=source,
        settings=settings,
        cloud_url=args.cloud_url,
        helix_port=args.port,
    )

    if source is DataSource.LOCAL_INTROSPECT:
        print("Starting server in local-introspect mode")
        print(f"Using local HelixDB introspect endpoint: {config.helix_url}/introspect")
    elif source is DataSource.LOCAL_FILE:
        print("Starting server in local-file mode")
        print(f"Reading from {config.schema_file_path} and {config.queries_file_path}")
    else:
        print("Starting server in cloud mode")
        print(f"Using cloud HelixDB endpoint: {config.helix_url}/introspect")
        if config.api_key:
            print("Authentication: Using API key from HELIX_API_KEY environment variable")
        else:
            print("Authentication: No API key found, connecting without authentication")

    host = args.host or settings.HOST
    port = args.listen_port or settings.PORT
    print(f"Server running on http://{host}:{port}")

    uvicorn.run(create_app(config), host=host, port=port, log_level=args.log_level.lower())
    return 0


def cmd_parse_schema(args: argparse.Namespace) -> int:
    """Parse a schema file and print it as JSON."""
    try:
        schema = parse_schema_file(args.file)
    except SchemaLoadError as e:
        print(f"Error: {e}")
        return 1

    _print_json(schema.model_dump())
    return 0


def cmd_parse_queries(args: argparse.Namespace) -> int:
    """Parse a queries file and print the endpoint listing as JSON."""
    try:
        queries = parse_queries_file(args.file)
    except SchemaLoadError as e:
        print(f"Error: {e}")
        return 1

    _print_json([endpoint.model_dump() for endpoint in endpoints_from_queries(queries)])
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="helixboard",
        description="Helixboard - REST API over a HelixDB schema and its queries",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve (default)
    serve_parser = subparsers.add_parser(SERVE, help="Run the API server (default)")
    serve_parser.add_argument(
        "source",
        nargs="?",
        default=DataSource.LOCAL_INTROSPECT.value,
        choices=[source.value for source in DataSource],
        help="Where schema and query metadata come from",
    )
    serve_parser.add_argument("cloud_url", nargs="?", help="HelixDB URL (cloud mode only)")
    serve_parser.add_argument(
        "--port", "-p", type=int,
        help="Local HelixDB port (default: $HELIX_PORT or 6969)",
    )
    serve_parser.add_argument("--host", help="Address to listen on (default: $HOST)")
    serve_parser.add_argument("--listen-port", type=int, help="Port to listen on (default: $PORT)")
    serve_parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    # parse-schema
    schema_parser = subparsers.add_parser("parse-schema", help="Print a parsed schema file as JSON")
    schema_parser.add_argument("file", help="Path to schema.hx")

    # parse-queries
    queries_parser = subparsers.add_parser("parse-queries", help="Print the endpoints of a queries file as JSON")
    queries_parser.add_argument("file", help="Path to queries.hx")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    argv = list(sys.argv[1:] if args is None else args)

    commands = {
        SERVE: cmd_serve,
        "parse-schema": cmd_parse_schema,
        "parse-queries": cmd_parse_queries,
    }

    # Bare `helixboard [source] [cloud_url]` means serve
    if not argv or (argv[0] not in commands and argv[0] not in ("-h", "--help", "--version")):
        argv.insert(0, SERVE)

    parsed = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(parsed, "log_level", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
