"""Route and layout registry with priority-ordered linear lookup.

Routes and layouts are registered during setup and kept in two
collections sorted by descending priority (stable, so equal priorities
keep registration order).  Lookups scan the collections in order; the
tables are expected to be small and statically declared.
"""

import inspect
import logging

from wayfinder.config import RouterConfig
from wayfinder.errors import ConfigurationError
from wayfinder.routing.pattern import (
    extract_params,
    is_exact_match,
    matches,
    parse_pattern,
    rank,
)
from wayfinder.routing.route import (
    ROUTE_KINDS,
    Handler,
    Layout,
    LayoutChain,
    LayoutHandler,
    LayoutMatch,
    MetadataProducer,
    Route,
    RouteKind,
    RouteMatch,
)
from wayfinder.routing.segments import PathLike, join_path, split_path

logger = logging.getLogger("wayfinder.routing")

HTTP_METHODS: frozenset[str] = frozenset(
    {"CONNECT", "DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT", "TRACE"}
)


def _accepts_request(handler: Handler) -> bool:
    """Whether *handler* can take a second positional argument."""
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2


def _by_priority(item: Route | Layout) -> int:
    return -item.priority


class RouteRegistry:
    """Owns the ordered route and layout collections.

    Usage::

        registry = RouteRegistry()
        registry.register_route("/admin", admin_page)
        registry.register_route("/:slug", slug_page)
        registry.register_layout("/admin/*", admin_layout)

        match = registry.resolve_route("/admin")
        match.route.path         # "/admin"

    Registration is a single-writer setup phase.  Call ``freeze()`` when
    it is over; lookups are plain reads and safe to run concurrently
    once no more registration happens.
    """

    __slots__ = ("_config", "_dirty", "_frozen", "_layouts", "_routes")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self._config = config or RouterConfig()
        self._routes: list[Route] = []
        self._layouts: list[Layout] = []
        self._dirty = False
        self._frozen = False

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes in lookup order (descending priority)."""
        self._ensure_sorted()
        return tuple(self._routes)

    @property
    def layouts(self) -> tuple[Layout, ...]:
        """All layouts in lookup order (descending priority)."""
        self._ensure_sorted()
        return tuple(self._layouts)

    # -- Registration --

    def register_route(
        self,
        pattern: str,
        handler: Handler,
        kind: RouteKind = "page",
        method: str | None = None,
        metadata: MetadataProducer | None = None,
        *,
        name: str | None = None,
    ) -> Route:
        """Register a page or API route and return it.

        API patterns are stored under the API namespace (``/api`` by
        default) so they never collide with page patterns.  The method
        only applies to API routes and defaults to ``GET``.

        Raises ``ConfigurationError`` for an unknown kind, an unknown
        HTTP method, or a malformed pattern.
        """
        self._check_not_frozen()

        if kind not in ROUTE_KINDS:
            msg = f"Unknown route kind {kind!r}. Expected one of: {', '.join(sorted(ROUTE_KINDS))}"
            raise ConfigurationError(msg)

        if kind == "api":
            method = (method or self._config.default_api_method).upper()
            if method not in HTTP_METHODS:
                msg = f"Unknown HTTP method {method!r} for API route {pattern!r}"
                raise ConfigurationError(msg)
            parsed = parse_pattern(join_path((self._config.api_prefix, *split_path(pattern))))
        else:
            if method is not None:
                msg = f"Page route {pattern!r} cannot declare a method ({method!r})"
                raise ConfigurationError(msg)
            parsed = parse_pattern(pattern)

        route = Route(
            pattern=parsed,
            handler=handler,
            kind=kind,
            priority=rank(parsed),
            method=method,
            metadata=metadata,
            name=name,
            accepts_request=_accepts_request(handler),
        )
        self._routes.append(route)
        self._mark_unsorted()
        logger.debug(
            "Registered %s route %s%s (priority %d)",
            kind,
            route.path,
            f" [{method}]" if method else "",
            route.priority,
        )
        return route

    def register_layout(self, pattern: str, handler: LayoutHandler) -> Layout:
        """Register a layout for *pattern* and return it."""
        self._check_not_frozen()
        parsed = parse_pattern(pattern)
        layout = Layout(pattern=parsed, handler=handler, priority=rank(parsed))
        self._layouts.append(layout)
        self._mark_unsorted()
        logger.debug("Registered layout %s (priority %d)", layout.path, layout.priority)
        return layout

    def freeze(self) -> None:
        """End the registration phase.  No more routes or layouts can be added."""
        self._ensure_sorted()
        self._frozen = True

    # -- Lookup --

    def resolve_route(
        self,
        path: PathLike,
        *,
        kind: RouteKind | None = None,
        method: str | None = None,
    ) -> RouteMatch | None:
        """Find the best route for *path*, or ``None``.

        Candidates are scanned in priority order.  When several match,
        the first decisive rule wins:

        1. more concrete pattern segments
        2. no parameters over parameters
        3. exact match over non-exact match

        Otherwise the earlier (higher priority, then earlier registered)
        candidate is kept.  *kind* and *method* restrict the candidates.
        """
        self._ensure_sorted()
        parts = split_path(path)
        wanted_method = method.upper() if method else None

        best: Route | None = None
        best_params: dict[str, str] = {}
        for route in self._routes:
            if kind is not None and route.kind != kind:
                continue
            if wanted_method is not None and route.method != wanted_method:
                continue
            if not matches(parts, route.pattern):
                continue
            if best is None or _beats(route, best, parts):
                best = route
                best_params = extract_params(parts, route.pattern)

        if best is None:
            return None
        return RouteMatch(route=best, path_params=best_params)

    def allowed_methods(self, path: PathLike) -> frozenset[str]:
        """HTTP methods of the API routes whose pattern matches *path*."""
        self._ensure_sorted()
        parts = split_path(path)
        return frozenset(
            route.method
            for route in self._routes
            if route.kind == "api" and route.method and matches(parts, route.pattern)
        )

    def resolve_layout(self, path: PathLike) -> LayoutMatch | None:
        """Return the highest-priority layout whose pattern matches *path*.

        Layouts are matched against the path itself, so a layout applies
        even when no route resolves for that path.
        """
        self._ensure_sorted()
        parts = split_path(path)
        for layout in self._layouts:
            if matches(parts, layout.pattern):
                return LayoutMatch(layout=layout, path_params=extract_params(parts, layout.pattern))
        return None

    def layout_chain(self, path: PathLike) -> LayoutChain:
        """Every layout matching *path*, outermost (least specific) first."""
        self._ensure_sorted()
        parts = split_path(path)
        found = [layout for layout in self._layouts if matches(parts, layout.pattern)]
        return LayoutChain(layouts=tuple(reversed(found)))

    # -- Internals --

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot register routes or layouts after the registry is frozen."
            raise RuntimeError(msg)

    def _mark_unsorted(self) -> None:
        if self._config.sort_on_register:
            self._sort()
        else:
            self._dirty = True

    def _ensure_sorted(self) -> None:
        if self._dirty:
            self._sort()

    def _sort(self) -> None:
        # list.sort is stable: equal priorities keep registration order
        self._routes.sort(key=_by_priority)
        self._layouts.sort(key=_by_priority)
        self._dirty = False

    def __repr__(self) -> str:
        return f"RouteRegistry(routes={len(self._routes)}, layouts={len(self._layouts)})"


def _beats(candidate: Route, best: Route, parts: tuple[str, ...]) -> bool:
    """Tie-break between two matching routes; True if *candidate* wins."""
    # Specificity counts concrete segments only, not the trailing "*".
    # Counting it would let /admin/* beat the literal /admin for "/admin".
    cand_spec = candidate.pattern.specificity
    best_spec = best.pattern.specificity
    if cand_spec != best_spec:
        return cand_spec > best_spec

    cand_params = candidate.pattern.has_params
    best_params = best.pattern.has_params
    if cand_params != best_params:
        return not cand_params

    return is_exact_match(parts, candidate.pattern) and not is_exact_match(parts, best.pattern)
