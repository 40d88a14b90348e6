"""
torrtree Tree: Base Classes and Data Structures.

This module provides the foundation shared by every tree builder:
- FileRecord: Immutable file entry as reported by the download client
- PathEntry: A record with its path split into segments
- segment(): Path segmenter
- StringInterner: Bidirectional segment <-> id table
- TreeBuildError: Raised when a build invariant is broken
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from torrtree.core.constants import (
    FIRST_SEGMENT_ID,
    PATH_SEPARATOR,
    ErrorCode,
    RecordPath,
    Segment,
    SegmentId,
)
from torrtree.core.validators import ValidationError


class TreeBuildError(Exception):
    """Broken construction invariant; the build is aborted."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        super().__init__(message)
        self.error_code = error_code


@dataclass(frozen=True)
class FileRecord:
    """
    Immutable file entry of a download.

    Attributes:
        size: Total size of the file in bytes
        downloaded: Bytes already downloaded
        path: Slash-delimited path inside the download (e.g. "show/s01/e01.mkv")
    """

    size: int
    downloaded: int
    path: RecordPath

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FileRecord":
        """
        Create a FileRecord from a mapping.

        Accepts the native keys (``size``, ``downloaded``, ``path``) as well as
        the keys of a Transmission ``torrent-get`` files entry (``length``,
        ``bytesCompleted``, ``name``).

        Raises:
            ValidationError: If neither spelling of a field is present
        """

        def pick(native: str, rpc: str) -> Any:
            if native in data:
                return data[native]
            if rpc in data:
                return data[rpc]
            raise ValidationError(f"File record needs '{native}' or '{rpc}'")

        return cls(
            size=pick("size", "length"),
            downloaded=pick("downloaded", "bytesCompleted"),
            path=pick("path", "name"),
        )

    @property
    def segments(self) -> List[Segment]:
        """Path split into segments."""
        return segment(self.path)


@dataclass(frozen=True)
class PathEntry:
    """A file record reduced to what the aggregating builder needs."""

    size: int
    downloaded: int
    segments: Tuple[Segment, ...]

    @classmethod
    def from_record(cls, record: FileRecord) -> "PathEntry":
        return cls(record.size, record.downloaded, tuple(segment(record.path)))


def segment(path: RecordPath) -> List[Segment]:
    """
    Split a path into its segments.

    Splits strictly on "/" without normalization: repeated, leading or
    trailing separators produce empty segments. A path always yields at
    least one segment.

    Example:
        >>> segment("a//b/")
        ['a', '', 'b', '']
    """
    return path.split(PATH_SEPARATOR)


class StringInterner:
    """
    Assigns stable integer ids to segment strings.

    Ids are handed out sequentially from 1 in order of first appearance,
    so interning the same file list twice yields the same ids.

    Example:
        >>> interner = StringInterner()
        >>> interner.intern_path("a/b/a")
        (1, 2, 1)
        >>> interner.resolve(2)
        'b'
    """

    def __init__(self) -> None:
        self._ids: Dict[Segment, SegmentId] = {}
        self._strings: Dict[SegmentId, Segment] = {}

    def intern(self, value: Segment) -> SegmentId:
        """Return the id of ``value``, allocating the next one if unseen."""
        segment_id = self._ids.get(value)
        if segment_id is None:
            segment_id = SegmentId(len(self._ids) + FIRST_SEGMENT_ID)
            self._ids[value] = segment_id
            self._strings[segment_id] = value
        return segment_id

    def intern_path(self, path: RecordPath) -> Tuple[SegmentId, ...]:
        """Intern every segment of a path."""
        return tuple(self.intern(part) for part in segment(path))

    def intern_all(self, paths: Iterable[RecordPath]) -> List[Tuple[SegmentId, ...]]:
        """Intern a list of paths, preserving their order."""
        return [self.intern_path(path) for path in paths]

    def resolve(self, segment_id: SegmentId) -> Segment:
        """
        Return the string interned under ``segment_id``.

        Raises:
            TreeBuildError: If the id was never handed out by this interner
        """
        try:
            return self._strings[segment_id]
        except KeyError:
            raise TreeBuildError(f"Unknown segment id: {segment_id}") from None

    def __contains__(self, value: object) -> bool:
        return value in self._ids

    def __len__(self) -> int:
        return len(self._ids)
