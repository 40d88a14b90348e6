"""
torrtree Core: Constants and Type Definitions

This module provides package-wide constants, error codes, and type
definitions shared by the tree builders, the manager and the CLI.
"""
from enum import IntEnum
from typing import NewType, Sequence, TypeAlias

# Version information
TORRTREE_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for torrtree operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad record, tree path or configuration
    NOT_FOUND = 2  # No record or config file at the given location
    PERMISSION_DENIED = 3  # Insufficient permissions reading input
    INTERNAL_ERROR = 4  # Broken build invariant (bug in torrtree)


# Type aliases for clarity
RecordPath: TypeAlias = str
Segment: TypeAlias = str
TreePath: TypeAlias = Sequence[int]

# NewType for interned segment ids
SegmentId = NewType("SegmentId", int)

# Separator between path segments in a file record
PATH_SEPARATOR = "/"

# First id handed out by the string interner
FIRST_SEGMENT_ID = 1


class Limits:
    """Sanity limits applied when validating input."""

    # Path limits
    MAX_PATH_LENGTH = 4096
    MAX_PATH_DEPTH = 256

    # Upper bound of a single file record size (1 PiB)
    MAX_RECORD_SIZE = 1 << 50


class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    ROOT = "torrtree"
    TREE = "tree"
    LOGGING = "logging"

    # Tree configuration
    TREE_ICONS = "icons"
    TREE_WARN_OVERDOWNLOAD = "warn_overdownload"

    # Logging configuration
    LOG_LEVEL = "level"
    LOG_FILE = "file"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.TREE: {
        ConfigKey.TREE_ICONS: True,
        ConfigKey.TREE_WARN_OVERDOWNLOAD: True,
    },
    ConfigKey.LOGGING: {
        ConfigKey.LOG_LEVEL: "INFO",
        ConfigKey.LOG_FILE: None,
    },
}
