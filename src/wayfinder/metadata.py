"""Page metadata value.

A metadata producer attached to a page route returns either a
``Metadata`` instance or a plain mapping with the same keys; anything
else, or nothing at all, is treated as empty metadata.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_KNOWN_KEYS = frozenset({"title", "description", "keywords"})


@dataclass(frozen=True, slots=True)
class Metadata:
    """Document metadata for a resolved page.

    Attributes:
        title: Document title.
        description: Short summary for search engines and link previews.
        keywords: Search keywords.
        extra: Any other keys a producer returned (``openGraph``,
            ``robots``, ...), passed through untouched.
    """

    title: str | None = None
    description: str | None = None
    keywords: tuple[str, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and not self.keywords
            and not self.extra
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Metadata:
        """Build metadata from a producer's mapping result.

        ``keywords`` may be a single comma-separated string or any
        iterable of strings.
        """
        keywords = data.get("keywords") or ()
        if isinstance(keywords, str):
            keywords = tuple(k.strip() for k in keywords.split(",") if k.strip())
        else:
            keywords = tuple(str(k) for k in keywords)
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            keywords=keywords,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def as_dict(self) -> dict[str, Any]:
        """Flatten back to a plain dict, omitting unset fields."""
        result: dict[str, Any] = {}
        if self.title is not None:
            result["title"] = self.title
        if self.description is not None:
            result["description"] = self.description
        if self.keywords:
            result["keywords"] = list(self.keywords)
        result.update(self.extra)
        return result


def coerce_metadata(value: Any) -> Metadata | None:
    """Turn a producer result into ``Metadata``; ``None`` if unusable."""
    if isinstance(value, Metadata):
        return value
    if isinstance(value, Mapping):
        return Metadata.from_mapping(value)
    return None
