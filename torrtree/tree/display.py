"""
torrtree Tree: Aggregated display tree.

Builds the summary tree of a download: one DisplayNode per distinct segment
at each depth, sorted by name, each carrying the total size and downloaded
bytes of every file below it.

Example:
    >>> records = [FileRecord(10, 5, "a/x.txt"), FileRecord(20, 20, "a/y.txt")]
    >>> [root] = build_tree(records)
    >>> root.name, root.size, root.downloaded, [c.name for c in root.children]
    ('a', 30, 25, ['x.txt', 'y.txt'])
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from torrtree.core.constants import PATH_SEPARATOR
from torrtree.infrastructure.logger import Logger, get_logger
from torrtree.tree.base import FileRecord, PathEntry
from torrtree.tree.grouping import TreeGrouper


@dataclass
class DisplayNode:
    """
    One node of the display tree.

    Attributes:
        name: Segment at this depth
        path: Segments from the root down to this node, joined with "/"
        size: Sum of the sizes of every file below this node
        downloaded: Sum of the downloaded bytes of every file below this node
        children: Child nodes sorted by name (empty for leaves)
    """

    name: str
    path: str
    size: int
    downloaded: int
    children: List["DisplayNode"] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return bool(self.children)

    @property
    def progress(self) -> float:
        """Downloaded fraction; empty nodes count as complete."""
        if self.size == 0:
            return 1.0
        return self.downloaded / self.size

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "DisplayNode"]]:
        """Yield (depth, node) for this node and its descendants, pre-order."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


class AggregatingTreeBuilder(TreeGrouper[PathEntry, str, DisplayNode]):
    """Groups path entries by segment name and sums their sizes."""

    def segments(self, entry: PathEntry) -> Tuple[str, ...]:
        return entry.segments

    def root_context(self) -> str:
        return ""

    def child_context(self, context: str, key: str) -> str:
        if not context:
            return key
        return f"{context}{PATH_SEPARATOR}{key}"

    def make_node(
        self, key: str, members: List[PathEntry], children: List[DisplayNode], context: Any
    ) -> DisplayNode:
        return DisplayNode(
            name=key,
            path=context,
            size=sum(entry.size for entry in members),
            downloaded=sum(entry.downloaded for entry in members),
            children=children,
        )


def build_tree(records: Iterable[FileRecord], logger: Optional[Logger] = None) -> List[DisplayNode]:
    """
    Build the aggregated display tree of a file list.

    Args:
        records: File records in any order
        logger: Logger for build statistics (defaults to the global logger)

    Returns:
        Root nodes sorted by name
    """
    entries = [PathEntry.from_record(record) for record in records]
    roots = AggregatingTreeBuilder().build(entries)
    (logger or get_logger()).debug("Built display tree", entries=len(entries), roots=len(roots))
    return roots


def iter_nodes(roots: Iterable[DisplayNode]) -> Iterator[Tuple[int, DisplayNode]]:
    """Pre-order walk over a forest of display nodes."""
    for root in roots:
        yield from root.walk()
