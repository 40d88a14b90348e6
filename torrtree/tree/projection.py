"""
torrtree Tree: Display projection.

Turns trees into the items a tree widget consumes: an opaque identifier,
the label text and the child items. Labels read ``[icon ]name[ - size]``.

Two sources are supported:
- decorate(): an already aggregated DisplayNode tree (identifier = path)
- build_file_tree(): a file list grouped on interned segment ids
  (identifier = segment id), the shape torrtree.tree.index mirrors
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, List, Optional, Sequence, Tuple

from torrtree.core.formatting import format_size
from torrtree.core.icons import icon_for
from torrtree.infrastructure.logger import Logger, get_logger
from torrtree.tree.base import FileRecord, StringInterner
from torrtree.tree.display import DisplayNode
from torrtree.tree.grouping import TreeGrouper

# (size, downloaded, interned segment ids)
InternedEntry = Tuple[int, int, Tuple[int, ...]]


@dataclass
class TreeItem:
    """Widget-facing tree item."""

    identifier: Hashable
    text: str
    children: List["TreeItem"] = field(default_factory=list)


class DisplayProjection:
    """
    Builds presentation labels and tree items.

    Attributes:
        add_icons: Prefix labels with a directory or file-type icon
        size_formatter: Callable turning a byte count into display text
    """

    def __init__(
        self,
        add_icons: bool = True,
        size_formatter: Callable[[int], str] = format_size,
        logger: Optional[Logger] = None,
    ):
        self.add_icons = add_icons
        self.size_formatter = size_formatter
        self.logger = logger or get_logger()

    def format_label(self, name: str, size: int, is_dir: bool) -> str:
        """
        Format one label.

        The size suffix is left out when the formatter returns an empty
        string (format_size does so for zero bytes).
        """
        text = name
        if self.add_icons:
            text = f"{icon_for(name, is_dir)} {text}"

        formatted_size = self.size_formatter(size)
        if formatted_size:
            text = f"{text} - {formatted_size}"
        return text

    def label(self, node: Any) -> str:
        """Label of any node exposing ``name``, ``size`` and ``children``."""
        return self.format_label(node.name, node.size, bool(node.children))

    def decorate(self, nodes: Iterable[DisplayNode]) -> List[TreeItem]:
        """Project a DisplayNode tree into tree items keyed by node path."""
        return [
            TreeItem(identifier=node.path, text=self.label(node), children=self.decorate(node.children))
            for node in nodes
        ]

    def build_file_tree(
        self, records: Sequence[FileRecord], interner: Optional[StringInterner] = None
    ) -> List[TreeItem]:
        """
        Build tree items from a file list, grouped on interned segment ids.

        Siblings come out in id order, i.e. in order of first appearance of
        their name in the file list, which is the order the index tree uses.

        Args:
            records: File records in the order the download client listed them
            interner: Interner shared with the index tree; a fresh one if omitted

        Raises:
            TreeBuildError: If a segment id has no entry in the interner
        """
        if interner is None:
            interner = StringInterner()

        entries = [
            (record.size, record.downloaded, interner.intern_path(record.path)) for record in records
        ]
        items = _InternedItemBuilder(self, interner).build(entries)
        self.logger.debug("Built file tree items", entries=len(entries), roots=len(items))
        return items


class _InternedItemBuilder(TreeGrouper[InternedEntry, int, TreeItem]):
    def __init__(self, projection: DisplayProjection, interner: StringInterner):
        self.projection = projection
        self.interner = interner

    def segments(self, entry: InternedEntry) -> Tuple[int, ...]:
        return entry[2]

    def make_node(
        self, key: int, members: List[InternedEntry], children: List[TreeItem], context: Any
    ) -> TreeItem:
        name = self.interner.resolve(key)
        size = sum(entry[0] for entry in members)
        text = self.projection.format_label(name, size, bool(children))
        return TreeItem(identifier=key, text=text, children=children)


def build_file_tree(records: Sequence[FileRecord], add_icons: bool = True) -> List[TreeItem]:
    """Build interactive tree items for a file list with a fresh interner."""
    return DisplayProjection(add_icons=add_icons).build_file_tree(records)
