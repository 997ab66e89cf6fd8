"""Remote path handling.

    Paths inside a file share are always relative to the share root and never
    carry a drive letter or a share name. Callers tend to build them by string
    concatenation with whatever separator their platform prefers, so parsing
    accepts both forward and back slashes and comparisons are always made on
    the individual segments. Rendering always uses a forward slash.
"""
from __future__ import annotations
import typing as t
from azfileshare.exc import PathOutsideMappingError


REMOTE_SEPARATOR = "/"
_SEPARATORS = ("/", "\\")


def _split_segments(path: str) -> list[str]:
    for sep in _SEPARATORS[1:]:
        path = path.replace(sep, REMOTE_SEPARATOR)
    return [x for x in path.split(REMOTE_SEPARATOR) if x not in ("", ".")]


class RemotePath:
    """Immutable path of a file or directory relative to the root of a share."""

    __slots__ = ("_segments",)

    def __init__(self, segments: t.Iterable[str] = ()):
        cleaned = []
        for segment in segments:
            cleaned.extend(_split_segments(str(segment)))
        self._segments = tuple(cleaned)

    @staticmethod
    def parse(path: t.Union[str, RemotePath, None]) -> RemotePath:
        """Build a path from a string, or return the path if it already is one. None is the share root."""
        if path is None:
            return RemotePath()
        if isinstance(path, RemotePath):
            return path
        return RemotePath(_split_segments(path))

    @staticmethod
    def from_segments(segments: t.Iterable[str]) -> RemotePath:
        """Build a path from names that are used as-is; a name holding a separator is refused."""
        segments = tuple(str(x) for x in segments)
        for segment in segments:
            if segment in ("", ".", "..") or any(sep in segment for sep in _SEPARATORS):
                raise PathOutsideMappingError(f"[{segment}] is not a valid name for a file or directory in a share", 1005)
        path = RemotePath()
        path._segments = segments
        return path

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def is_root(self) -> bool:
        return not self._segments

    def name(self) -> str:
        return self._segments[-1] if self._segments else ""

    def parent(self) -> RemotePath:
        """The containing directory; the root is its own parent."""
        return RemotePath(self._segments[:-1])

    def joinpath(self, *others: t.Union[str, RemotePath]) -> RemotePath:
        segments = list(self._segments)
        for other in others:
            segments.extend(RemotePath.parse(other).segments)
        return RemotePath(segments)

    def __truediv__(self, other: t.Union[str, RemotePath]) -> RemotePath:
        return self.joinpath(other)

    def is_relative_to(self, other: t.Union[str, RemotePath]) -> bool:
        other = RemotePath.parse(other)
        n = len(other.segments)
        return self._segments[:n] == other.segments

    def relative_to(self, other: t.Union[str, RemotePath]) -> RemotePath:
        """Strip the given ancestor from the front of this path."""
        other = RemotePath.parse(other)
        if not self.is_relative_to(other):
            raise PathOutsideMappingError(f"Remote path [{self}] is not below [{other}]", 1001)
        return RemotePath(self._segments[len(other.segments):])

    def __eq__(self, other):
        if isinstance(other, RemotePath):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self):
        return hash(self._segments)

    def __len__(self):
        return len(self._segments)

    def __str__(self):
        return REMOTE_SEPARATOR.join(self._segments)

    def __repr__(self):
        return f"RemotePath({str(self)!r})"


def split_remote_path(path: t.Union[str, RemotePath]) -> tuple[RemotePath, str]:
    """Split a combined remote path into its directory and its leaf name.

        Without any separator, the directory is the share root (an empty path)
        and the leaf is the whole string.
    """
    path = RemotePath.parse(path)
    return path.parent(), path.name()
