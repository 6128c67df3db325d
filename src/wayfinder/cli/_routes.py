"""``wayfinder routes`` — list registered routes and layouts.

Prints both collections in lookup order (descending priority), which
is the order candidates are tried for a request.
"""

import argparse

from wayfinder.cli._resolve import load_router_or_exit


def _print_table(header: tuple[str, ...], rows: list[tuple[str, ...]]) -> None:
    widths = [max(len(header[i]), *(len(row[i]) for row in rows)) for i in range(len(header))]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths[:-1]) + "  {}"
    print(fmt.format(*header))
    print("-" * min(sum(widths) + 2 * (len(widths) - 1), 80))
    for row in rows:
        print(fmt.format(*row))


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of KIND, METHOD, PATTERN, PRIORITY, and handler name."""
    router = load_router_or_exit(args.router)
    registry = router.registry

    routes = registry.routes
    if not routes:
        print("No routes registered.")
    else:
        rows: list[tuple[str, ...]] = []
        for route in routes:
            handler_name = getattr(route.handler, "__name__", str(route.handler))
            if route.name:
                handler_name = f"{handler_name} ({route.name})"
            rows.append(
                (route.kind, route.method or "-", route.path, str(route.priority), handler_name)
            )
        _print_table(("KIND", "METHOD", "PATTERN", "PRIORITY", "HANDLER"), rows)

    layouts = registry.layouts
    if layouts:
        print()
        rows = [
            (
                layout.path,
                str(layout.priority),
                getattr(layout.handler, "__name__", str(layout.handler)),
            )
            for layout in layouts
        ]
        _print_table(("LAYOUT", "PRIORITY", "HANDLER"), rows)
