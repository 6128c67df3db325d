"""``wayfinder match`` — show how a single path resolves.

Uses the registry lookups only; no handler is called.
"""

import argparse

from wayfinder.cli._resolve import load_router_or_exit
from wayfinder.routing.segments import join_path, split_path


def run_match(args: argparse.Namespace) -> None:
    """Print the selected route, its parameters, and the layout chain.

    Exits with status 1 when no route matches.
    """
    router = load_router_or_exit(args.router)
    registry = router.registry

    if args.api:
        path = join_path((router.config.api_prefix, *split_path(args.path)))
        match = registry.resolve_route(path, kind="api", method=args.method)
    else:
        path = join_path(args.path)
        match = registry.resolve_route(path, kind="page")

    print(f"path:    {path}")
    if match is None:
        print("route:   (none)")
    else:
        route = match.route
        method = f" [{route.method}]" if route.method else ""
        print(f"route:   {route.path}{method} (priority {route.priority})")
        for name, value in match.path_params.items():
            print(f"  {name} = {value!r}")

    if not args.api:
        chain = registry.layout_chain(path)
        print(f"layouts: {' > '.join(chain.paths()) if chain else '(none)'}")

    if match is None:
        raise SystemExit(1)
