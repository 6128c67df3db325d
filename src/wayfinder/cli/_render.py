"""``wayfinder render`` — render a path through its page and layouts.

Runs the async dispatcher on an ``anyio`` event loop and prints the
result.  Handy for checking layout composition without a web server.
"""

import argparse
import sys
from typing import Any

import anyio

from wayfinder.cli._resolve import load_router_or_exit
from wayfinder.errors import NotFound


def run_render(args: argparse.Namespace) -> None:
    """Render ``args.path`` and print it; exit 1 on ``NotFound``."""
    router = load_router_or_exit(args.router)

    async def _render() -> Any:
        return await router.render(args.path)

    try:
        content = anyio.run(_render)
    except NotFound as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if content is None:
        print("(no content)")
    else:
        print(content)
