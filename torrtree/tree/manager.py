"""
torrtree Tree: Manager.

This module provides the FileTreeManager, the host-side coordinator for
the file list of one download.

The manager:
- Validates the file records reported by the download client
- Builds the display tree, the interactive items and the index tree
- Swaps in the new trees as one snapshot after a successful build
- Resolves UI selections (tree paths) back to file records
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from torrtree.core.constants import ConfigKey, TreePath
from torrtree.core.validators import validate_file_records, validate_tree_path
from torrtree.infrastructure.config_manager import ConfigManager, get_config_manager
from torrtree.infrastructure.logger import Logger, get_logger
from torrtree.tree.base import FileRecord, StringInterner, TreeBuildError
from torrtree.tree.display import DisplayNode, build_tree
from torrtree.tree.index import IndexNode, build_file_tree_index, find_file_position
from torrtree.tree.projection import DisplayProjection, TreeItem

RecordLike = Union[FileRecord, Mapping[str, Any]]

ICONS_KEY = f"{ConfigKey.ROOT}.{ConfigKey.TREE}.{ConfigKey.TREE_ICONS}"


@dataclass(frozen=True)
class TreeSnapshot:
    """
    Trees built from one file list.

    Attributes:
        records: The file records, in client order
        display: Aggregated display tree (sorted by name)
        items: Interactive tree items (sorted by interned id)
        index: Index tree mirroring ``items``
    """

    records: Tuple[FileRecord, ...] = ()
    display: Tuple[DisplayNode, ...] = ()
    items: Tuple[TreeItem, ...] = ()
    index: Tuple[IndexNode, ...] = ()


class FileTreeManager:
    """
    Central coordinator for the file tree of one download.

    A reader always sees ``items`` and ``index`` from the same refresh:
    refresh() builds a complete TreeSnapshot first and only then replaces
    the current one.

    Example:
        >>> manager = FileTreeManager(add_icons=False)
        >>> manager.refresh([{"name": "a/x.txt", "length": 10, "bytesCompleted": 0},
        ...                  {"name": "a/y.txt", "length": 20, "bytesCompleted": 0}])
        >>> manager.record_at([0, 1]).path
        'a/y.txt'
    """

    def __init__(
        self,
        add_icons: Optional[bool] = None,
        config: Optional[ConfigManager] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the manager.

        Args:
            add_icons: Decorate labels with icons; when None, follow the
                       ``torrtree.tree.icons`` setting, including later changes
            config: Configuration manager (defaults to the global one)
            logger: Logger (defaults to the global logger)
        """
        self.config = config or get_config_manager()
        self.logger = logger or get_logger()

        if add_icons is None:
            add_icons = bool(self.config.get(ICONS_KEY, True))
            self.config.add_watcher(self._on_config_change)
        self.projection = DisplayProjection(add_icons=add_icons, logger=self.logger)
        self._snapshot = TreeSnapshot()

    def _on_config_change(self, config: Dict[str, Any]) -> None:
        tree_config = config.get(ConfigKey.ROOT, {}).get(ConfigKey.TREE, {})
        add_icons = bool(tree_config.get(ConfigKey.TREE_ICONS, True))
        if add_icons == self.projection.add_icons:
            return

        self.logger.debug("Icons setting changed", icons=add_icons)
        self.projection.add_icons = add_icons
        if self._snapshot.records:
            self.refresh(self._snapshot.records)

    @property
    def snapshot(self) -> TreeSnapshot:
        return self._snapshot

    @property
    def records(self) -> Tuple[FileRecord, ...]:
        return self._snapshot.records

    @property
    def display_tree(self) -> Tuple[DisplayNode, ...]:
        return self._snapshot.display

    @property
    def items(self) -> Tuple[TreeItem, ...]:
        return self._snapshot.items

    @property
    def index(self) -> Tuple[IndexNode, ...]:
        return self._snapshot.index

    def refresh(self, files: Iterable[RecordLike]) -> TreeSnapshot:
        """
        Rebuild every tree from a new file list.

        Args:
            files: FileRecords or mappings accepted by FileRecord.from_dict

        Returns:
            The new snapshot

        Raises:
            ValidationError: If a record is malformed (previous snapshot kept)
            TreeBuildError: If a build invariant is broken (previous snapshot kept)
        """
        records = tuple(self._to_record(f) for f in files)
        validate_file_records(records)
        self._warn_overdownload(records)

        # One interner for both trees keeps item and index ranks aligned
        interner = StringInterner()
        try:
            snapshot = TreeSnapshot(
                records=records,
                display=tuple(build_tree(records, logger=self.logger)),
                items=tuple(self.projection.build_file_tree(records, interner)),
                index=tuple(build_file_tree_index(records, interner, logger=self.logger)),
            )
        except TreeBuildError as e:
            self.logger.error("File tree build failed", records=len(records), error=str(e))
            raise

        self._snapshot = snapshot
        self.logger.info(
            "File tree refreshed",
            records=len(records),
            segments=len(interner),
            roots=len(snapshot.display),
        )
        return snapshot

    def _to_record(self, item: RecordLike) -> FileRecord:
        if isinstance(item, FileRecord):
            return item
        return FileRecord.from_dict(item)

    def _warn_overdownload(self, records: Sequence[FileRecord]) -> None:
        key = f"{ConfigKey.ROOT}.{ConfigKey.TREE}.{ConfigKey.TREE_WARN_OVERDOWNLOAD}"
        if not self.config.get(key, True):
            return
        for position, record in enumerate(records):
            if record.downloaded > record.size:
                self.logger.warning(
                    "Downloaded bytes exceed file size",
                    index=position,
                    path=record.path,
                    size=record.size,
                    downloaded=record.downloaded,
                )

    def resolve(self, tree_path: TreePath) -> Optional[int]:
        """
        Map a tree path from the item view to a record position.

        Returns:
            Position in ``records``, or None when nothing corresponds

        Raises:
            ValidationError: If tree_path is not a sequence of integers
        """
        validate_tree_path(tree_path)
        position = find_file_position(tree_path, self._snapshot.index)
        if position is None:
            self.logger.debug("No corresponding record", tree_path=list(tree_path))
        return position

    def record_at(self, tree_path: TreePath) -> Optional[FileRecord]:
        """Return the file record selected by a tree path, or None."""
        position = self.resolve(tree_path)
        if position is None:
            return None
        return self._snapshot.records[position]

    def resolve_many(self, tree_paths: Iterable[TreePath]) -> List[int]:
        """
        Resolve a multi-selection.

        Paths without a record are dropped, and a record selected twice is
        reported once, in order of first selection.
        """
        positions: List[int] = []
        for tree_path in tree_paths:
            position = self.resolve(tree_path)
            if position is not None and position not in positions:
                positions.append(position)
        return positions

    def totals(self) -> Tuple[int, int]:
        """Total (size, downloaded) of the current file list."""
        return (
            sum(node.size for node in self._snapshot.display),
            sum(node.downloaded for node in self._snapshot.display),
        )
