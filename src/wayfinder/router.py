"""The Router — registration decorators plus request-time resolution.

A ``Router`` bundles a ``RouteRegistry`` and a ``Dispatcher`` behind
one object, the way a catch-all page module wants to use them::

    router = Router()

    @router.page("/:slug", metadata=lambda p: {"title": p["slug"]})
    async def slug_page(params):
        return f"<h1>{params['slug']}</h1>"

    @router.layout("/admin/*")
    def admin_layout(content, path):
        return f"<main class='admin'>{content}</main>"

    @router.api("/billing/webhook", method="POST")
    async def webhook(params, request):
        return Response("ok")

    html = await router.render(["admin"])
"""

from collections.abc import Callable
from typing import Any

from wayfinder.config import RouterConfig
from wayfinder.dispatch import Dispatcher, PageResult
from wayfinder.http.response import Response
from wayfinder.metadata import Metadata
from wayfinder.routing.registry import RouteRegistry
from wayfinder.routing.route import (
    Handler,
    Layout,
    LayoutHandler,
    MetadataProducer,
    Route,
    RouteKind,
)
from wayfinder.routing.segments import PathLike


class Router:
    """Route table and dispatcher for one catch-all entry point."""

    __slots__ = ("_dispatcher", "_registry", "config")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._registry = RouteRegistry(self.config)
        self._dispatcher = Dispatcher(self._registry)

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    # -- Registration --

    def add_route(
        self,
        pattern: str,
        handler: Handler,
        kind: RouteKind = "page",
        method: str | None = None,
        metadata: MetadataProducer | None = None,
        *,
        name: str | None = None,
    ) -> Route:
        """Register a route directly.  See ``RouteRegistry.register_route``."""
        return self._registry.register_route(pattern, handler, kind, method, metadata, name=name)

    def add_layout(self, pattern: str, handler: LayoutHandler) -> Layout:
        """Register a layout directly."""
        return self._registry.register_layout(pattern, handler)

    def page(
        self,
        pattern: str,
        *,
        metadata: MetadataProducer | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a page handler via decorator.

        Args:
            pattern: Path pattern. Use ``:name`` for parameters and a
                trailing ``*`` for a subtree.
            metadata: Optional producer called with the parameters when
                the page's metadata is requested.
            name: Optional route name, shown by ``wayfinder routes``.
        """

        def decorator(func: Handler) -> Handler:
            self._registry.register_route(pattern, func, "page", None, metadata, name=name)
            return func

        return decorator

    def api(
        self,
        pattern: str,
        *,
        method: str | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register an API handler via decorator.

        The pattern is relative to the API namespace and *method*
        defaults to ``RouterConfig.default_api_method``.  The handler
        must return a ``Response`` or ``NO_CONTENT``.
        """

        def decorator(func: Handler) -> Handler:
            self._registry.register_route(pattern, func, "api", method, name=name)
            return func

        return decorator

    def layout(self, pattern: str) -> Callable[[LayoutHandler], LayoutHandler]:
        """Register a layout handler via decorator."""

        def decorator(func: LayoutHandler) -> LayoutHandler:
            self._registry.register_layout(pattern, func)
            return func

        return decorator

    def freeze(self) -> None:
        """End registration.  Further ``add_*``/decorator calls raise."""
        self._registry.freeze()

    # -- Resolution --

    async def resolve_page(self, segments: PathLike, request: Any = None) -> PageResult | None:
        return await self._dispatcher.resolve_page(segments, request)

    async def resolve_layout_for(
        self,
        segments: PathLike,
        content: Any,
        *,
        page: PageResult | None = None,
    ) -> Any:
        return await self._dispatcher.resolve_layout_for(segments, content, page=page)

    async def resolve_api_request(
        self,
        segments: PathLike,
        method: str,
        request: Any = None,
    ) -> Response:
        return await self._dispatcher.resolve_api_request(segments, method, request)

    async def resolve_metadata(self, segments: PathLike) -> Metadata:
        return await self._dispatcher.resolve_metadata(segments)

    async def render(self, segments: PathLike, request: Any = None) -> Any:
        return await self._dispatcher.render(segments, request)

    def __repr__(self) -> str:
        return f"Router({self._registry!r})"
