"""API response value with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Final


@dataclass(frozen=True, slots=True)
class Response:
    """A response returned by API route handlers.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def json(cls, data: Any, *, status: int = 200) -> Response:
        """Build a JSON response from any ``json.dumps``-able value."""
        return cls(
            body=json_module.dumps(data),
            status=status,
            content_type="application/json",
        )

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


class _NoContent:
    """Sentinel type for an explicit "no content" handler result."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_CONTENT"

    def __bool__(self) -> bool:
        return False


NO_CONTENT: Final = _NoContent()
"""Return this from an API handler to answer with an empty 204."""


def no_content_response() -> Response:
    """The response an explicit ``NO_CONTENT`` result is turned into."""
    return Response(body="", status=204, content_type="")


def server_error_response() -> Response:
    """Generic 500 used in place of a malformed handler result."""
    return Response(body="Internal Server Error", status=500)
