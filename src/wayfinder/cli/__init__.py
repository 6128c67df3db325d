"""Wayfinder CLI — inspect a route table and try paths against it.

Entry point registered as ``wayfinder`` in ``pyproject.toml``::

    [project.scripts]
    wayfinder = "wayfinder.cli:main"
"""

import argparse
import logging
import os
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wayfinder`` command."""
    parser = argparse.ArgumentParser(
        prog="wayfinder",
        description="Wayfinder — path routing and layout resolution for catch-all pages.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log registration and lookup details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wayfinder routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes and layouts")
    routes_parser.add_argument("router", help="Import string (e.g. myapp.pages:router)")

    # -- wayfinder match --------------------------------------------------
    match_parser = subparsers.add_parser(
        "match", help="Show which route and layout a path resolves to"
    )
    match_parser.add_argument("router", help="Import string (e.g. myapp.pages:router)")
    match_parser.add_argument("path", help="Request path (e.g. /admin/users)")
    match_parser.add_argument(
        "--api",
        action="store_true",
        help="Resolve against API routes (path relative to the API namespace)",
    )
    match_parser.add_argument(
        "--method", default="GET", help="HTTP method for --api (default: GET)"
    )

    # -- wayfinder render -------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render a path with its layouts")
    render_parser.add_argument("router", help="Import string (e.g. myapp.pages:router)")
    render_parser.add_argument("path", help="Request path (e.g. /admin/users)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Import strings are resolved relative to the working directory
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    if args.command == "routes":
        from wayfinder.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from wayfinder.cli._match import run_match

        run_match(args)
    elif args.command == "render":
        from wayfinder.cli._render import run_render

        run_render(args)
