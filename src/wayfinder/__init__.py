"""Wayfinder — path routing and layout resolution for catch-all pages.

Registers page routes, API routes, and layouts against ``:param`` and
wildcard patterns, picks the most specific match for a path, and calls
the matching handler.

Basic usage::

    from wayfinder import Router

    router = Router()

    @router.page("/")
    def home(params):
        return "Home"

    @router.page("/:slug")
    def post(params):
        return f"Post {params['slug']}"

    content = await router.render(["hello-world"])
"""

__version__ = "0.1.0"
__all__ = [
    "NO_CONTENT",
    "ConfigurationError",
    "Dispatcher",
    "HTTPError",
    "Metadata",
    "MethodNotAllowed",
    "NotFound",
    "PageResult",
    "Response",
    "RouteRegistry",
    "Router",
    "RouterConfig",
    "WayfinderError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wayfinder`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from wayfinder.router import Router

        return Router

    if name == "RouterConfig":
        from wayfinder.config import RouterConfig

        return RouterConfig

    if name == "RouteRegistry":
        from wayfinder.routing.registry import RouteRegistry

        return RouteRegistry

    if name in ("Dispatcher", "PageResult"):
        from wayfinder import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name in ("Response", "NO_CONTENT"):
        from wayfinder.http import response as _resp

        return getattr(_resp, name)

    if name == "Metadata":
        from wayfinder.metadata import Metadata

        return Metadata

    if name in (
        "WayfinderError",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
    ):
        from wayfinder import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
