"""Pattern parsing, ranking, matching, and parameter extraction.

Patterns use ``:name`` for a parameter segment and a trailing ``*`` for
a wildcard that covers a whole subtree::

    /admin              literal
    /:slug/nested       parameterized
    /admin/*            wildcard (matches /admin and everything below)

Matching is a plain segment-by-segment comparison.  Every function here
is total over parsed patterns: a mismatch yields ``False`` or an empty
mapping, never an exception.
"""

from dataclasses import dataclass
from functools import lru_cache

from wayfinder.errors import ConfigurationError
from wayfinder.routing.segments import PathLike, join_path, split_path

PARAM_MARKER = ":"
WILDCARD = "*"

# Base ranks per pattern class; the segment count is added on top.
WILDCARD_RANK = 200
PARAM_RANK = 300
LITERAL_RANK = 400


@dataclass(frozen=True, slots=True)
class PatternSegment:
    """A parsed segment of a pattern.

    Literal:   ``admin``  (is_param=False)
    Param:     ``:slug``  (is_param=True, param_name="slug")
    Wildcard:  ``*``      (is_wildcard=True)
    """

    value: str
    is_param: bool = False
    is_wildcard: bool = False

    @property
    def param_name(self) -> str | None:
        return self.value[len(PARAM_MARKER) :] if self.is_param else None

    def accepts(self, part: str) -> bool:
        """Whether a single concrete path segment satisfies this specifier."""
        if self.is_param:
            return bool(part)
        return self.value == part


@dataclass(frozen=True, slots=True)
class Pattern:
    """A parsed, validated pattern.  Immutable once built."""

    source: str
    segments: tuple[PatternSegment, ...]

    def __str__(self) -> str:
        return self.source

    @property
    def is_wildcard(self) -> bool:
        return bool(self.segments) and self.segments[-1].is_wildcard

    @property
    def has_params(self) -> bool:
        return any(seg.is_param for seg in self.segments)

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(seg.param_name for seg in self.segments if seg.param_name)

    @property
    def prefix(self) -> tuple[PatternSegment, ...]:
        """Segments before the trailing wildcard (all segments otherwise)."""
        return self.segments[:-1] if self.is_wildcard else self.segments

    @property
    def specificity(self) -> int:
        """Number of concrete (non-wildcard) segments."""
        return len(self.prefix)


@lru_cache(maxsize=1024)
def _parse(source: str) -> Pattern:
    parts = split_path(source)
    segments: list[PatternSegment] = []
    seen: set[str] = set()

    for index, part in enumerate(parts):
        if part == WILDCARD:
            if index != len(parts) - 1:
                msg = f"Wildcard must be the last segment of a pattern: {source!r}"
                raise ConfigurationError(msg)
            segments.append(PatternSegment(part, is_wildcard=True))
        elif part.startswith(PARAM_MARKER):
            name = part[len(PARAM_MARKER) :]
            if not name:
                msg = f"Parameter segment without a name in pattern {source!r}"
                raise ConfigurationError(msg)
            if name in seen:
                msg = f"Duplicate parameter {name!r} in pattern {source!r}"
                raise ConfigurationError(msg)
            seen.add(name)
            segments.append(PatternSegment(part, is_param=True))
        elif part.startswith("{") and part.endswith("}"):
            msg = (
                f"Pattern {source!r} uses {{param}} syntax. "
                f"Parameters are written as :param, e.g. /users/:id"
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PatternSegment(part))

    return Pattern(source=join_path(parts), segments=tuple(segments))


def parse_pattern(pattern: str | Pattern) -> Pattern:
    """Parse a pattern string into a ``Pattern``.

    Already-parsed patterns pass through unchanged.

    Raises ``ConfigurationError`` for a wildcard that is not the last
    segment, an unnamed or duplicated parameter, or ``{param}`` syntax.
    """
    if isinstance(pattern, Pattern):
        return pattern
    return _parse(pattern)


def rank(pattern: str | Pattern) -> int:
    """Compute the registration priority of *pattern*.

    Wildcard patterns rank lowest, then parameterized ones, then fully
    literal ones.  Within a class, more segments rank higher::

        rank("/admin/*")       -> 202
        rank("/:slug/nested")  -> 302
        rank("/admin")         -> 401
    """
    parsed = parse_pattern(pattern)
    count = len(parsed.segments)
    if parsed.is_wildcard:
        return WILDCARD_RANK + count
    if parsed.has_params:
        return PARAM_RANK + count
    return LITERAL_RANK + count


def matches(path: PathLike, pattern: str | Pattern) -> bool:
    """Whether *path* matches *pattern*.

    Non-wildcard patterns require the same number of segments.  Wildcard
    patterns require the path to start with the prefix before ``*``; the
    bare prefix itself matches too, so ``/admin/*`` covers ``/admin``.
    """
    parsed = parse_pattern(pattern)
    parts = split_path(path)

    if parsed.is_wildcard:
        prefix = parsed.prefix
        if len(parts) < len(prefix):
            return False
        return all(seg.accepts(part) for seg, part in zip(prefix, parts, strict=False))

    if len(parts) != len(parsed.segments):
        return False
    return all(seg.accepts(part) for seg, part in zip(parsed.segments, parts, strict=True))


def extract_params(path: PathLike, pattern: str | Pattern) -> dict[str, str]:
    """Bind parameter names in *pattern* to the matching segments of *path*.

    Keys appear in left-to-right pattern order.  A parameter with no
    path segment at its position is omitted.  A literal mismatch yields
    an empty mapping, never a partial one.  The wildcard binds nothing.
    """
    parsed = parse_pattern(pattern)
    parts = split_path(path)
    params: dict[str, str] = {}

    for index, seg in enumerate(parsed.prefix):
        part = parts[index] if index < len(parts) else None
        if seg.is_param:
            if part:
                params[seg.param_name or ""] = part
        elif seg.value != part:
            return {}

    return params


def is_exact_match(path: PathLike, pattern: str | Pattern) -> bool:
    """Whether *path* equals *pattern* with every parameter emptied.

    Only parameter-free patterns can match a normalized path exactly;
    used as the last tie-break between otherwise equal candidates.
    """
    parsed = parse_pattern(pattern)
    emptied = "/".join("" if seg.is_param else seg.value for seg in parsed.segments)
    return join_path(path) == "/" + emptied
