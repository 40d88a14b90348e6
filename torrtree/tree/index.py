"""
torrtree Tree: Index tree and position resolution.

The index tree mirrors the shape of the interactive item tree built by
torrtree.tree.projection from the same file list, but each node only keeps
the position of a file record in the original list. A selection in the UI
arrives as a tree path (the rank of the selected node among its siblings at
every level from the root); find_file_position() walks the index tree along
that path to recover which record was selected.

Both trees group on interned segment ids, so they must be built from the
same records with interners that saw the paths in the same order (or with
one shared interner) to stay rank-compatible.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from torrtree.core.constants import TreePath
from torrtree.infrastructure.logger import Logger, get_logger
from torrtree.tree.base import FileRecord, StringInterner
from torrtree.tree.grouping import TreeGrouper

# (original position, interned segment ids)
IndexEntry = Tuple[int, Tuple[int, ...]]


@dataclass
class IndexNode:
    """
    One node of the index tree.

    Attributes:
        idx: Position in the original file list of the first record grouped
             under this node; for collapsed (single-record) nodes, the record
             the node stands for
        children: Child nodes in interned-id order
    """

    idx: int
    children: List["IndexNode"] = field(default_factory=list)


class IndexTreeBuilder(TreeGrouper[IndexEntry, int, IndexNode]):
    """Groups (position, segment ids) entries, keeping only positions."""

    def segments(self, entry: IndexEntry) -> Tuple[int, ...]:
        return entry[1]

    def make_node(
        self, key: int, members: List[IndexEntry], children: List[IndexNode], context: Any
    ) -> IndexNode:
        return IndexNode(idx=members[0][0], children=children)


def build_file_tree_index(
    records: Sequence[FileRecord],
    interner: Optional[StringInterner] = None,
    logger: Optional[Logger] = None,
) -> List[IndexNode]:
    """
    Build the index tree of a file list.

    Args:
        records: File records in the order the download client listed them
        interner: Interner shared with the item tree; a fresh one if omitted
        logger: Logger for build statistics (defaults to the global logger)

    Returns:
        Root index nodes
    """
    if interner is None:
        interner = StringInterner()

    entries = [
        (position, interner.intern_path(record.path)) for position, record in enumerate(records)
    ]
    roots = IndexTreeBuilder().build(entries)
    (logger or get_logger()).debug("Built index tree", entries=len(entries), roots=len(roots))
    return roots


def find_file_position(tree_path: TreePath, tree: Sequence[IndexNode]) -> Optional[int]:
    """
    Translate a tree path into a position in the original file list.

    Args:
        tree_path: Sibling ranks from the root down to the selected node
        tree: Root level of the index tree

    Returns:
        The original position, or None when the path does not match the
        tree (empty path, empty level, or a rank out of range)

    Example:
        >>> tree = [IndexNode(0, [IndexNode(0), IndexNode(1)])]
        >>> find_file_position([0, 1], tree)
        1
        >>> find_file_position([0, 2], tree) is None
        True
    """
    nodes = tree
    node = None
    for rank in tree_path:
        if not 0 <= rank < len(nodes):
            return None
        node = nodes[rank]
        nodes = node.children

    if node is None:
        return None
    return node.idx


def iter_paths(tree: Iterable[IndexNode], prefix: Tuple[int, ...] = ()) -> Iterable[Tuple[Tuple[int, ...], IndexNode]]:
    """Yield (tree path, node) for every node of an index tree, pre-order."""
    for rank, node in enumerate(tree):
        path = prefix + (rank,)
        yield path, node
        yield from iter_paths(node.children, path)
