"""
torrtree Tree - File trees for downloads.

This package turns the flat file list of a download into the trees a
terminal client shows, and maps selections in those trees back to files.

Public API:
-----------

Base Classes:
    FileRecord: Immutable file entry (size, downloaded, path)
    PathEntry: File entry with its path split into segments
    StringInterner: Segment string <-> id table
    TreeGrouper: Abstract group-and-recurse builder

Builders:
    build_tree: Aggregated display tree (DisplayNode)
    build_file_tree: Interactive tree items (TreeItem)
    build_file_tree_index: Index tree (IndexNode)
    find_file_position: Tree path -> original record position

Presentation:
    DisplayProjection: Labels and tree items
    SummaryRenderer: Jinja2 text summary

Manager:
    FileTreeManager: Keeps the trees of one download in sync

Usage Example:
--------------

    from torrtree.tree import FileTreeManager

    manager = FileTreeManager()
    manager.refresh(client.torrent_files(torrent_id))

    # draw manager.items in the tree widget, then on selection:
    record = manager.record_at(widget.selected_path())
"""

from torrtree.tree.base import FileRecord, PathEntry, StringInterner, TreeBuildError, segment
from torrtree.tree.display import AggregatingTreeBuilder, DisplayNode, build_tree
from torrtree.tree.grouping import TreeGrouper, group_by_segment
from torrtree.tree.index import IndexNode, IndexTreeBuilder, build_file_tree_index, find_file_position
from torrtree.tree.manager import FileTreeManager, TreeSnapshot
from torrtree.tree.projection import DisplayProjection, TreeItem, build_file_tree
from torrtree.tree.summary import SummaryError, SummaryRenderer

__all__ = [
    # Base classes
    "FileRecord",
    "PathEntry",
    "StringInterner",
    "TreeBuildError",
    "TreeGrouper",
    "group_by_segment",
    "segment",
    # Builders
    "AggregatingTreeBuilder",
    "DisplayNode",
    "build_tree",
    "IndexNode",
    "IndexTreeBuilder",
    "build_file_tree_index",
    "find_file_position",
    # Presentation
    "DisplayProjection",
    "TreeItem",
    "build_file_tree",
    "SummaryError",
    "SummaryRenderer",
    # Manager
    "FileTreeManager",
    "TreeSnapshot",
]
