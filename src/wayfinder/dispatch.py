"""Request-time dispatch over a route registry.

The dispatcher is where absence becomes an error: registry lookups
return ``None`` when nothing matches, and the methods here decide
whether that means ``NotFound``, an identity pass-through, or empty
metadata.

Page resolution returns a ``PageResult`` that carries the matched
route.  Layout resolution takes that value explicitly, so nothing about
one request is stored on the dispatcher and concurrent requests never
see each other's state::

    page = await dispatcher.resolve_page(["admin"])
    html = await dispatcher.resolve_layout_for(None, page.content, page=page)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wayfinder._internal.invoke import invoke
from wayfinder.errors import MethodNotAllowed, NotFound
from wayfinder.http.response import (
    NO_CONTENT,
    Response,
    no_content_response,
    server_error_response,
)
from wayfinder.metadata import Metadata, coerce_metadata
from wayfinder.routing.segments import PathLike, join_path, split_path

if TYPE_CHECKING:
    from wayfinder.config import RouterConfig
    from wayfinder.routing.registry import RouteRegistry
    from wayfinder.routing.route import Route, RouteMatch

logger = logging.getLogger("wayfinder.dispatch")


@dataclass(frozen=True, slots=True)
class PageResult:
    """Outcome of a page resolution.

    Attributes:
        content: Whatever the page handler returned.
        path: Canonical request path (``/a/b``).
        match: The matched route and its parameters.
    """

    content: Any
    path: str
    match: RouteMatch

    @property
    def route_pattern(self) -> str:
        return self.match.route.path

    @property
    def params(self) -> dict[str, str]:
        return self.match.path_params


class Dispatcher:
    """Resolves paths against a ``RouteRegistry`` and calls handlers.

    All resolution methods are coroutines; handlers may be sync or
    async.  Handler exceptions propagate to the caller unchanged.
    """

    __slots__ = ("_registry",)

    def __init__(self, registry: RouteRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def _config(self) -> RouterConfig:
        # API paths are stored under the registry's prefix, so its config is the only one
        return self._registry.config

    def is_reserved(self, path: str) -> bool:
        """Whether *path* is an asset request that never reaches a route."""
        return path in self._config.reserved_paths

    # -- Pages --

    async def resolve_page(self, segments: PathLike, request: Any = None) -> PageResult | None:
        """Resolve *segments* to a page route and call its handler.

        Returns ``None`` for reserved asset paths such as
        ``/favicon.ico``.  Raises ``NotFound`` when no page route
        matches.
        """
        path = join_path(segments)
        if self.is_reserved(path):
            logger.debug("Reserved path %s, no content", path)
            return None

        match = self._registry.resolve_route(path, kind="page")
        if match is None:
            logger.debug("No route found for %s", path)
            raise NotFound(f"No route matches {path!r}")

        content = await self._call_route(match.route, match.path_params, request)
        return PageResult(content=content, path=path, match=match)

    async def resolve_layout_for(
        self,
        segments: PathLike,
        content: Any,
        *,
        page: PageResult | None = None,
    ) -> Any:
        """Wrap *content* in the layout matching the path.

        The path comes from *segments*, or from ``page.path`` when
        *segments* is ``None`` (the root path when both are ``None``).
        Without a matching layout *content* is returned unchanged.
        """
        path = self._layout_path(segments, page)
        match = self._registry.resolve_layout(path)
        if match is None:
            return content
        return await invoke(match.layout.handler, content, path)

    async def resolve_layout_chain_for(
        self,
        segments: PathLike,
        content: Any,
        *,
        page: PageResult | None = None,
    ) -> Any:
        """Wrap *content* in every matching layout, innermost first."""
        path = self._layout_path(segments, page)
        chain = self._registry.layout_chain(path)
        for layout in reversed(chain.layouts):
            content = await invoke(layout.handler, content, path)
        return content

    async def render(self, segments: PathLike, request: Any = None) -> Any:
        """Resolve the page for *segments* and wrap it in its layout(s).

        With ``RouterConfig(nest_layouts=True)`` the whole layout chain
        is applied; otherwise only the innermost layout.  Returns
        ``None`` for reserved paths and raises ``NotFound`` like
        ``resolve_page()``.
        """
        page = await self.resolve_page(segments, request)
        if page is None:
            return None
        if self._config.nest_layouts:
            return await self.resolve_layout_chain_for(None, page.content, page=page)
        return await self.resolve_layout_for(None, page.content, page=page)

    # -- API --

    async def resolve_api_request(
        self,
        segments: PathLike,
        method: str,
        request: Any = None,
    ) -> Response:
        """Resolve an API request and call its handler.

        *segments* are relative to the API namespace: ``["billing",
        "webhook"]`` resolves against routes registered as
        ``/billing/webhook`` with ``kind="api"``.

        Raises ``NotFound`` when no API route matches and
        ``MethodNotAllowed`` (a ``NotFound``) when routes match the
        path but none for *method*.  A handler result that is neither a
        ``Response`` nor ``NO_CONTENT`` is logged and replaced with a
        generic 500 response.
        """
        path = join_path((self._config.api_prefix, *split_path(segments)))
        method = method.upper()

        match = self._registry.resolve_route(path, kind="api", method=method)
        if match is None:
            allowed = self._registry.allowed_methods(path)
            if allowed:
                logger.debug(
                    "Method %s not allowed for %s (allowed: %s)", method, path, sorted(allowed)
                )
                raise MethodNotAllowed(allowed)
            logger.debug("No API route found for %s %s", method, path)
            raise NotFound(f"No route matches {method} {path!r}")

        result = await self._call_route(match.route, match.path_params, request)
        if isinstance(result, Response):
            return result
        if result is NO_CONTENT:
            return no_content_response()

        logger.error(
            "API handler %s for %s %s returned %s, not a Response; answering 500",
            getattr(match.route.handler, "__name__", repr(match.route.handler)),
            method,
            path,
            type(result).__name__,
        )
        return server_error_response()

    # -- Metadata --

    async def resolve_metadata(self, segments: PathLike) -> Metadata:
        """Produce metadata for the page at *segments*.

        Never raises: a reserved path, a missing route, a route without
        a producer, a failing producer, or an unusable result all give
        empty ``Metadata()``.
        """
        path = join_path(segments)
        if self.is_reserved(path):
            return Metadata()

        match = self._registry.resolve_route(path, kind="page")
        if match is None or match.route.metadata is None:
            return Metadata()

        try:
            value = await invoke(match.route.metadata, dict(match.path_params))
            metadata = coerce_metadata(value)
        except Exception:
            logger.exception("Metadata producer for %s failed", match.route.path)
            return Metadata()

        if metadata is None:
            if value is not None:
                logger.warning(
                    "Metadata producer for %s returned %s, ignoring",
                    match.route.path,
                    type(value).__name__,
                )
            return Metadata()
        return metadata

    # -- Internals --

    @staticmethod
    def _layout_path(segments: PathLike, page: PageResult | None) -> str:
        if segments is None and page is not None:
            return page.path
        return join_path(segments)

    @staticmethod
    async def _call_route(route: Route, params: dict[str, str], request: Any) -> Any:
        # Handlers get their own copy so they cannot alter the match
        if route.accepts_request:
            return await invoke(route.handler, dict(params), request)
        return await invoke(route.handler, dict(params))
