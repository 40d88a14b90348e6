"""
torrtree Core: Input Validators.

This module provides validation functions for file records received from
the download client, tree paths coming from the UI, and configuration.
"""
from typing import Any, Dict, Sequence

from torrtree.core.constants import ConfigKey, ErrorCode, Limits, PATH_SEPARATOR


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_record_path(path: str) -> bool:
    """Validate the slash-delimited path of a file record.

    Empty segments (``a//b``) are accepted and kept as literal empty
    strings by the segmenter; only an empty path is rejected.

    Args:
        path: Path to validate

    Returns:
        True if valid

    Raises:
        ValidationError: If path is invalid
    """
    if not isinstance(path, str):
        raise ValidationError(f"Path must be string, got {type(path)}")

    if not path:
        raise ValidationError("Path cannot be empty")

    # Check length
    if len(path) > Limits.MAX_PATH_LENGTH:
        raise ValidationError(f"Path exceeds maximum length ({Limits.MAX_PATH_LENGTH})")

    # Check depth
    if path.count(PATH_SEPARATOR) >= Limits.MAX_PATH_DEPTH:
        raise ValidationError(f"Path exceeds maximum depth ({Limits.MAX_PATH_DEPTH})")

    # Check for null bytes
    if "\0" in path:
        raise ValidationError("Path contains null bytes")

    return True


def validate_byte_count(value: Any, field_name: str = "size") -> bool:
    """Validate a size or downloaded-bytes counter.

    Args:
        value: Value to validate
        field_name: Field name used in the error message

    Returns:
        True if valid

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    # bool is an int subclass, but never a byte count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(value).__name__}")

    if value < 0:
        raise ValidationError(f"{field_name} cannot be negative: {value}")

    if value > Limits.MAX_RECORD_SIZE:
        raise ValidationError(f"{field_name} exceeds maximum ({Limits.MAX_RECORD_SIZE}): {value}")

    return True


def validate_file_record(record: Any) -> bool:
    """Validate a single file record.

    Args:
        record: Object exposing ``size``, ``downloaded`` and ``path``

    Returns:
        True if valid

    Raises:
        ValidationError: If any field is invalid
    """
    for attr in ("size", "downloaded", "path"):
        if not hasattr(record, attr):
            raise ValidationError(f"File record is missing '{attr}'")

    validate_record_path(record.path)
    validate_byte_count(record.size, "size")
    validate_byte_count(record.downloaded, "downloaded")
    return True


def validate_file_records(records: Sequence[Any]) -> bool:
    """Validate every record of a file list, reporting the failing position.

    Raises:
        ValidationError: If a record is invalid
    """
    for i, record in enumerate(records):
        try:
            validate_file_record(record)
        except ValidationError as e:
            raise ValidationError(f"Invalid file record at index {i}: {e}")

    return True


def validate_tree_path(tree_path: Any) -> bool:
    """Validate a tree path (sequence of sibling ranks).

    Out-of-range ranks are not an input error: they are reported by the
    resolver as a missing record. Only the shape of the path is checked.

    Raises:
        ValidationError: If tree path is not a sequence of integers
    """
    if isinstance(tree_path, (str, bytes)) or not isinstance(tree_path, Sequence):
        raise ValidationError(f"Tree path must be a sequence of ranks, got {type(tree_path)}")

    for rank in tree_path:
        if isinstance(rank, bool) or not isinstance(rank, int):
            raise ValidationError(f"Tree path rank must be an integer: {rank!r}")

    return True


def validate_tree_config(tree: Dict[str, Any]) -> bool:
    """Validate the ``tree`` configuration section.

    Args:
        tree: Tree configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If tree config is invalid
    """
    if not isinstance(tree, dict):
        raise ValidationError("Tree configuration must be a dictionary")

    valid_fields = {ConfigKey.TREE_ICONS, ConfigKey.TREE_WARN_OVERDOWNLOAD}
    unknown_fields = set(tree.keys()) - valid_fields
    if unknown_fields:
        raise ValidationError(
            f"Unknown tree configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    for key in valid_fields & set(tree.keys()):
        if not isinstance(tree[key], bool):
            raise ValidationError(f"Tree {key} must be boolean: {tree[key]}")

    return True


def validate_logging_config(logging_config: Dict[str, Any]) -> bool:
    """Validate the ``logging`` configuration section.

    Raises:
        ValidationError: If logging config is invalid
    """
    if not isinstance(logging_config, dict):
        raise ValidationError("Logging configuration must be a dictionary")

    level = logging_config.get(ConfigKey.LOG_LEVEL)
    if level is not None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if not isinstance(level, str) or level.upper() not in valid_levels:
            raise ValidationError(f"Invalid log level: {level}. Must be one of {sorted(valid_levels)}")

    log_file = logging_config.get(ConfigKey.LOG_FILE)
    if log_file is not None and not isinstance(log_file, str):
        raise ValidationError(f"Log file must be string: {log_file}")

    return True


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate torrtree configuration structure.

    Args:
        config: Configuration dictionary (contents of the ``torrtree`` key)

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    if ConfigKey.TREE in config:
        validate_tree_config(config[ConfigKey.TREE])

    if ConfigKey.LOGGING in config:
        validate_logging_config(config[ConfigKey.LOGGING])

    return True
