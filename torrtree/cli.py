#!/usr/bin/env python3
"""Command-line interface for torrtree.

This module provides a CLI for inspecting the file tree of a download:
- Argument parsing and validation
- Configuration file loading
- File list loading (YAML or JSON, native or Transmission keys)
- Summary and item views
- Resolution of item view rows back to file records

Example:
    >>> from torrtree.cli import parse_arguments
    >>> args = parse_arguments(["files.json", "--select", "0/1"])
"""

import argparse
import re
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

from torrtree.core.constants import TORRTREE_VERSION, ConfigKey
from torrtree.core.validators import ValidationError
from torrtree.infrastructure.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSource,
    default_config_paths,
)
from torrtree.infrastructure.logger import Logger
from torrtree.tree.base import TreeBuildError
from torrtree.tree.manager import FileTreeManager
from torrtree.tree.projection import TreeItem
from torrtree.tree.summary import SummaryError, SummaryRenderer

DESCRIPTION = "torrtree - File trees for BitTorrent client file lists"
NO_RECORD = "no corresponding record"

_TREE_PATH_SEPARATORS = re.compile(r"[./]")


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If the input or config file is unusable, or --select
                  is combined with the summary view
    """
    parser = argparse.ArgumentParser(
        prog="torrtree",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Summary of a file list exported from the client
  torrtree files.json

  # Interactive item view without icons
  torrtree files.yaml --view items --no-icons

  # Which files do rows of the item view point at?
  torrtree files.json --select 0/1 0/2/0
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {TORRTREE_VERSION}",
    )

    parser.add_argument(
        "files",
        metavar="FILE",
        type=str,
        help="File list (YAML or JSON): a list of records or a mapping with a 'files' key",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    # View options
    view_group = parser.add_argument_group("view options")

    view_group.add_argument(
        "--view",
        choices=("summary", "items"),
        help="Aggregated summary or interactive item tree (default: items with --select, otherwise summary)",
    )

    view_group.add_argument(
        "--no-icons",
        action="store_true",
        help="Do not decorate labels with icons",
    )

    view_group.add_argument(
        "-s",
        "--select",
        metavar="PATH",
        nargs="+",
        default=[],
        help="Item view rows to resolve, as sibling ranks separated by '/' or '.' (e.g. 0/2/1)",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write logs to this file",
    )

    parsed = parser.parse_args(args)
    _validate_arguments(parsed)
    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    files_path = Path(args.files)
    if not files_path.exists():
        raise CLIError(f"File list does not exist: {args.files}")
    if not files_path.is_file():
        raise CLIError(f"File list path is not a file: {args.files}")

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")
        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    for tree_path in args.select:
        parse_tree_path(tree_path)

    # Tree paths are ranks in the item view; the summary sorts rows by name
    if args.view is None:
        args.view = "items" if args.select else "summary"
    elif args.select and args.view != "items":
        raise CLIError("--select refers to rows of the item view; use --view items")


def parse_tree_path(text: str) -> Tuple[int, ...]:
    """
    Parse a tree path such as "0/2/1" or "0.2.1".

    Raises:
        CLIError: If a rank is not a non-negative integer
    """
    parts = _TREE_PATH_SEPARATORS.split(text.strip())
    if not all(part.isdigit() for part in parts):
        raise CLIError(f"Invalid tree path: {text!r} (expected ranks like 0/2/1)")
    return tuple(int(part) for part in parts)


def load_file_list(path: str) -> List[Dict[str, Any]]:
    """
    Load a file list from YAML or JSON.

    Accepted shapes: a list of records, or a mapping with a ``files`` list
    (as in a Transmission ``torrent-get`` torrent entry).

    Raises:
        CLIError: If the file cannot be read or has the wrong shape
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CLIError(f"Failed to parse file list: {path}\n{e}")
    except OSError as e:
        raise CLIError(f"Failed to read file list: {path}\n{e}")

    if isinstance(data, dict):
        data = data.get("files")

    if not isinstance(data, list):
        raise CLIError(f"File list must be a list of records or contain a 'files' list: {path}")

    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise CLIError(f"File record at index {i} is not a mapping: {path}")

    return data


def build_config(args: argparse.Namespace) -> ConfigManager:
    """
    Build the configuration manager for a CLI run.

    System and user config files are read when present, then --config,
    then the command-line switches (highest file-backed precedence).
    """
    config = ConfigManager()

    for path, source in default_config_paths():
        if Path(path).is_file():
            config.load_file(path, source)

    if args.config:
        config.load_file(args.config, ConfigSource.USER_CONFIG)

    cli_config: Dict[str, Any] = {}
    if args.no_icons:
        cli_config[ConfigKey.TREE] = {ConfigKey.TREE_ICONS: False}
    if args.debug or args.log_file:
        logging_config: Dict[str, Any] = {}
        if args.debug:
            logging_config[ConfigKey.LOG_LEVEL] = "DEBUG"
        if args.log_file:
            logging_config[ConfigKey.LOG_FILE] = args.log_file
        cli_config[ConfigKey.LOGGING] = logging_config

    if cli_config:
        config.load_dict({ConfigKey.ROOT: cli_config}, ConfigSource.CLI_ARGS)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Returns:
        Configured logger instance
    """
    level = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.{ConfigKey.LOG_LEVEL}", "INFO")
    log_file = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LOGGING}.{ConfigKey.LOG_FILE}")

    logger = Logger("torrtree.cli", level=level)
    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))
    return logger


def format_items(items: Iterable[TreeItem], indent: str = "  ", depth: int = 0) -> List[str]:
    """Render tree items as indented lines."""
    lines = []
    for item in items:
        lines.append(f"{indent * depth}{item.text}")
        lines.extend(format_items(item.children, indent, depth + 1))
    return lines


def format_selection(manager: FileTreeManager, tree_paths: Sequence[str]) -> List[str]:
    """Describe the record behind each selected row of the item view."""
    lines = []
    for text in tree_paths:
        position = manager.resolve(parse_tree_path(text))
        if position is None:
            lines.append(f"{text}: {NO_RECORD}")
            continue
        record = manager.records[position]
        lines.append(f"{text}: #{position} {record.path} ({record.downloaded}/{record.size})")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (0 on success, 1 on error, 130 when interrupted)
    """
    try:
        args = parse_arguments(argv)
        config = build_config(args)
        logger = setup_logging(config)

        manager = FileTreeManager(config=config, logger=logger)
        with logger.add_context(file_list=args.files):
            manager.refresh(load_file_list(args.files))

        if args.view == "items":
            lines = format_items(manager.items)
        else:
            renderer = SummaryRenderer(add_icons=manager.projection.add_icons)
            lines = renderer.render(manager.display_tree).splitlines()

        lines.extend(format_selection(manager, args.select))
        for line in lines:
            print(line)
        return 0

    except (CLIError, ConfigError, SummaryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except ValidationError as e:
        print(f"Invalid file list: {e}", file=sys.stderr)
        return 1

    except TreeBuildError as e:
        print(f"Internal error while building the tree: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
