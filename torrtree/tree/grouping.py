"""
torrtree Tree: Group-and-recurse.

Every tree in torrtree is produced by the same routine: at each depth,
entries are grouped by the key found at that depth of their segment
sequence, groups are emitted in ascending key order, and a group is only
descended into when it holds more than one entry.

    entries                      depth 0        depth 1
    a/x.txt  (10)        ->      a (30)   ->    x.txt (10)
    a/y.txt  (20)                               y.txt (20)
    b/c/z.txt (5)                b (5)          (single entry: not descended)

The last rule (single-entry collapsing) means a directory holding exactly
one file is shown as one node named after the directory, and the file name
below it is never materialized. This is how the terminal client has always
rendered such downloads and the builders keep it as-is.

Subclasses decide what the key is (segment string, interned id) and what
payload a node carries (aggregated sizes, original index, a label).
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from torrtree.tree.base import TreeBuildError

E = TypeVar("E")  # entry
K = TypeVar("K", bound=Hashable)  # key at one depth
N = TypeVar("N")  # produced node


def group_by_segment(
    entries: Iterable[E], segments: Callable[[E], Sequence[K]], depth: int
) -> List[Tuple[K, List[E]]]:
    """
    Group entries by their key at ``depth``.

    Entries with no segment at ``depth`` are left out. Members keep their
    input order; groups are returned sorted by key.

    Args:
        entries: Entries to group
        segments: Callable returning the key sequence of an entry
        depth: Segment position to group on

    Returns:
        List of (key, members) pairs in ascending key order
    """
    groups: Dict[K, List[E]] = {}
    for entry in entries:
        keys = segments(entry)
        if len(keys) > depth:
            groups.setdefault(keys[depth], []).append(entry)
    return sorted(groups.items(), key=lambda item: item[0])


class TreeGrouper(ABC, Generic[E, K, N]):
    """
    Abstract group-and-recurse tree builder.

    Implementations must provide:
    - segments(): the key sequence of an entry
    - make_node(): build one node from its key, members and children

    They may override root_context() / child_context() to thread state
    (such as the accumulated path) down the recursion.
    """

    @abstractmethod
    def segments(self, entry: E) -> Sequence[K]:
        """Return the per-depth keys of an entry."""

    @abstractmethod
    def make_node(self, key: K, members: List[E], children: List[N], context: Any) -> N:
        """
        Build the node for one group.

        Args:
            key: Key shared by all members at this depth
            members: Entries of the group, in input order
            children: Already built child nodes (empty for collapsed groups)
            context: Value returned by child_context() for this node
        """

    def root_context(self) -> Any:
        return None

    def child_context(self, context: Any, key: K) -> Any:
        return context

    def build(self, entries: Iterable[E]) -> List[N]:
        """
        Build the root level of the tree.

        Raises:
            TreeBuildError: If an entry has no segments at all
        """
        entries = list(entries)
        for position, entry in enumerate(entries):
            if not self.segments(entry):
                raise TreeBuildError(f"Entry at position {position} has no path segments")
        return self._build_level(entries, 0, self.root_context())

    def _build_level(self, entries: List[E], depth: int, context: Any) -> List[N]:
        nodes = []
        for key, members in group_by_segment(entries, self.segments, depth):
            node_context = self.child_context(context, key)
            if len(members) > 1:
                children = self._build_level(members, depth + 1, node_context)
            else:
                children = []
            nodes.append(self.make_node(key, members, children, node_context))
        return nodes
