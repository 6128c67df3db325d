"""Locating the route table a ``wayfinder`` subcommand inspects.

``routes``, ``match`` and ``render`` all take the same positional
argument: ``"module:attribute"`` naming the ``Router`` that a catch-all
page module builds at import time.
"""

import importlib
import sys

from wayfinder.router import Router

DEFAULT_ATTRIBUTE = "router"


def resolve_router(import_string: str) -> Router:
    """Import the module and return its ``Router``.

    ``"pages"`` is shorthand for ``"pages:router"``.  When the attribute
    is a zero-argument factory rather than a ``Router`` it is called, so
    a module can build its route table lazily.

    Raises:
        ModuleNotFoundError: The module cannot be imported.
        AttributeError: The module has no such attribute.
        TypeError: The attribute is neither a Router nor a factory
            returning one, or the factory raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name or DEFAULT_ATTRIBUTE)

    if callable(obj) and not isinstance(obj, Router):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Router factory {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Router):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wayfinder.Router instance"
        raise TypeError(msg)
    return obj


def load_router_or_exit(import_string: str) -> Router:
    """Like ``resolve_router()``, but print the problem and exit with status 1."""
    try:
        return resolve_router(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
