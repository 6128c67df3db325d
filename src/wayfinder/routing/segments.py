"""Path normalization.

Every path the engine sees, whether a URL string or the segment list
captured by a catch-all route, is reduced to a tuple of non-empty
segments.  The root path is the empty tuple and joins back to ``"/"``.
"""

from collections.abc import Iterable

PathLike = str | Iterable[str] | None


def split_path(path: PathLike) -> tuple[str, ...]:
    """Normalize *path* into its non-empty segments.

    Examples::

        split_path("/a//b/")        -> ("a", "b")
        split_path(["a", "", "b"])  -> ("a", "b")
        split_path(None)            -> ()
    """
    if path is None:
        return ()
    if isinstance(path, str):
        return tuple(part for part in path.split("/") if part)
    parts: list[str] = []
    for item in path:
        parts.extend(part for part in item.split("/") if part)
    return tuple(parts)


def join_path(segments: PathLike) -> str:
    """Join segments into the canonical ``/a/b`` form (``/`` for root)."""
    return "/" + "/".join(split_path(segments))
