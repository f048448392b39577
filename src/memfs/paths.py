"""Path and URI helpers for the in-memory filesystem.

Paths are plain tuples of name segments starting at the root. The helpers
here only split on ``/`` and drop empty segments; ``.`` and ``..`` are
ordinary names and case is preserved.
"""
from __future__ import annotations

from typing import Sequence, Tuple, Union

Segments = Tuple[str, ...]
PathLike = Union[str, Sequence[str]]

ROOT: Segments = ()


def to_segments(path: PathLike) -> Segments:
    """Split ``"/a/b"`` style strings; pass segment sequences through."""

    if isinstance(path, str):
        return tuple(part for part in path.split("/") if part)
    segments = tuple(path)
    for segment in segments:
        if not isinstance(segment, str) or not segment or "/" in segment:
            raise ValueError(f"Invalid path segment: {segment!r}")
    return segments


def format_path(segments: Sequence[str]) -> str:
    return "/" + "/".join(segments)


def parent_of(segments: Segments) -> Segments:
    return segments[:-1]


def is_ancestor(ancestor: Segments, path: Segments) -> bool:
    """Return True when ``ancestor`` is ``path`` itself or one of its parents."""

    return len(ancestor) <= len(path) and path[: len(ancestor)] == ancestor


def parse_uri(uri: str, *, scheme: str) -> Segments:
    """Parse ``scheme:/a/b`` into segments, rejecting foreign schemes."""

    prefix, sep, rest = uri.partition(":")
    if not sep or prefix != scheme:
        raise ValueError(f"URI {uri!r} does not use the {scheme!r} scheme")
    # Authority-style URIs (memfs:///a) carry an empty authority.
    if rest.startswith("//"):
        rest = rest[2:]
    return to_segments(rest)


def format_uri(segments: Sequence[str], *, scheme: str) -> str:
    return f"{scheme}:{format_path(segments)}"
