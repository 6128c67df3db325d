"""Wayfinder exception hierarchy.

Shared across the registry, dispatcher, and router facade so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class WayfinderError(Exception):
    """Base for all wayfinder-specific errors."""


class ConfigurationError(WayfinderError):
    """Raised when a route or layout registration is invalid.

    Typically raised by ``parse_pattern()`` while registering, so bad
    patterns fail at setup time instead of on the first request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WayfinderError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher when a page or API path cannot be served.
    The surrounding framework glue decides how to render it.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(
        self,
        detail: str = "Not Found",
        *,
        status: int = 404,
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(status=status, detail=detail, headers=headers)


class MethodNotAllowed(NotFound):  # noqa: N818 — conventional name in web frameworks
    """405 — an API pattern matched but not for this HTTP method.

    Subclasses ``NotFound`` so callers that only care about absence
    handle both the same way.  Carries an ``Allow`` header listing the
    methods that are registered for the path.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            detail or default_detail,
            status=405,
            headers=(("Allow", allow_value),),
        )

    @property
    def allowed(self) -> frozenset[str]:
        """Methods registered for the path, parsed back from the Allow header."""
        for name, value in self.headers:
            if name == "Allow":
                return frozenset(m.strip() for m in value.split(",") if m.strip())
        return frozenset()
