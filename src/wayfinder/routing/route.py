"""Route, Layout, and match-result frozen dataclasses."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias

from wayfinder.routing.pattern import Pattern

RouteKind: TypeAlias = Literal["page", "api"]
Handler: TypeAlias = Callable[..., Any]
LayoutHandler: TypeAlias = Callable[[Any, str], Any]
MetadataProducer: TypeAlias = Callable[[dict[str, str]], Any | Awaitable[Any]]

ROUTE_KINDS: frozenset[str] = frozenset({"page", "api"})


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    Created by ``RouteRegistry.register_route()``.  The pattern and
    priority never change after registration; the registry owns the
    route and its position in the ordering.

    Attributes:
        pattern: Parsed pattern.  API routes carry the namespace prefix.
        handler: Called with the parameter mapping (and the request
            context when it accepts a second positional argument).
        kind: ``"page"`` or ``"api"``.
        priority: Rank computed at registration.
        method: HTTP method for API routes, ``None`` for pages.
        metadata: Optional producer of page metadata.
        name: Optional name for introspection.
        accepts_request: Whether *handler* takes the request context.
    """

    pattern: Pattern
    handler: Handler
    kind: RouteKind
    priority: int
    method: str | None = None
    metadata: MetadataProducer | None = None
    name: str | None = None
    accepts_request: bool = False

    @property
    def path(self) -> str:
        return self.pattern.source


@dataclass(frozen=True, slots=True)
class Layout:
    """A registered layout wrapping every page under its pattern."""

    pattern: Pattern
    handler: LayoutHandler
    priority: int

    @property
    def path(self) -> str:
        return self.pattern.source


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup.  Recomputed per request."""

    route: Route
    path_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LayoutMatch:
    """Result of a successful layout lookup."""

    layout: Layout
    path_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LayoutChain:
    """Matching layouts ordered from outermost to innermost.

    The outermost layout is the least specific one (e.g. ``/*``); the
    innermost is the one ``resolve_layout()`` would pick on its own.
    """

    layouts: tuple[Layout, ...] = ()

    def __len__(self) -> int:
        return len(self.layouts)

    def __bool__(self) -> bool:
        return bool(self.layouts)

    @property
    def innermost(self) -> Layout | None:
        return self.layouts[-1] if self.layouts else None

    def paths(self) -> tuple[str, ...]:
        return tuple(layout.path for layout in self.layouts)

