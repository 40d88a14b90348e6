"""Tests for the torrtree command-line interface."""

import pytest
import yaml

from torrtree import __version__
from torrtree.cli import (
    CLIError,
    build_config,
    format_items,
    load_file_list,
    main,
    parse_arguments,
    parse_tree_path,
)
from torrtree.tree.projection import TreeItem


@pytest.fixture
def write_yaml(temp_dir):
    def write(name, data):
        path = temp_dir / name
        path.write_text(yaml.safe_dump(data))
        return str(path)

    return write


class TestParseArguments:
    """Tests for argument parsing."""

    def test_defaults(self, files_json):
        """Only the file list is required."""
        args = parse_arguments([str(files_json)])
        assert args.files == str(files_json)
        assert args.view == "summary"
        assert args.select == []
        assert not args.no_icons
        assert not args.debug
        assert args.config is None

    def test_all_options(self, files_json, config_file, temp_dir):
        """Every switch is parsed."""
        args = parse_arguments(
            [
                str(files_json),
                "-c",
                str(config_file),
                "--view",
                "items",
                "--no-icons",
                "--select",
                "0/1",
                "0.2",
                "--debug",
                "--log-file",
                str(temp_dir / "torrtree.log"),
            ]
        )
        assert args.view == "items"
        assert args.no_icons
        assert args.select == ["0/1", "0.2"]
        assert args.debug

    def test_missing_file_list(self, temp_dir):
        """A missing file list is a CLI error."""
        with pytest.raises(CLIError, match="does not exist"):
            parse_arguments([str(temp_dir / "missing.json")])

    def test_file_list_is_directory(self, temp_dir):
        """A directory is not a file list."""
        with pytest.raises(CLIError, match="not a file"):
            parse_arguments([str(temp_dir)])

    def test_missing_config(self, files_json, temp_dir):
        """A missing config file is a CLI error."""
        with pytest.raises(CLIError, match="Configuration file does not exist"):
            parse_arguments([str(files_json), "-c", str(temp_dir / "nope.yaml")])

    def test_invalid_select(self, files_json):
        """Select paths are checked while parsing."""
        with pytest.raises(CLIError, match="Invalid tree path"):
            parse_arguments([str(files_json), "--select", "0/a"])

    def test_invalid_view(self, files_json):
        """Unknown views are rejected by argparse."""
        with pytest.raises(SystemExit):
            parse_arguments([str(files_json), "--view", "table"])

    def test_select_defaults_to_items_view(self, files_json):
        """Selections refer to item view rows, so that view is the default."""
        args = parse_arguments([str(files_json), "--select", "0"])
        assert args.view == "items"

    def test_select_with_summary_view(self, files_json):
        """The summary orders rows differently and cannot be selected from."""
        with pytest.raises(CLIError, match="refers to rows of the item view"):
            parse_arguments([str(files_json), "--view", "summary", "--select", "0"])

    def test_version(self, capsys):
        """--version prints the version and exits."""
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestParseTreePath:
    """Tests for parse_tree_path."""

    @pytest.mark.parametrize(
        "text, expected",
        [("0", (0,)), ("0/2/1", (0, 2, 1)), ("0.2.1", (0, 2, 1)), (" 3/10 ", (3, 10))],
    )
    def test_valid(self, text, expected):
        """Slash and dot separated ranks are accepted."""
        assert parse_tree_path(text) == expected

    @pytest.mark.parametrize("text", ["", "0//1", "-1", "a", "0/1/", "1,2"])
    def test_invalid(self, text):
        """Anything but non-negative integer ranks is rejected."""
        with pytest.raises(CLIError):
            parse_tree_path(text)


class TestLoadFileList:
    """Tests for load_file_list."""

    def test_torrent_entry(self, files_json, rpc_files):
        """A mapping with a 'files' key is unwrapped."""
        assert load_file_list(str(files_json)) == rpc_files

    def test_plain_list(self, write_yaml):
        """A bare list of records is accepted."""
        data = [{"size": 1, "downloaded": 0, "path": "a"}]
        assert load_file_list(write_yaml("files.yaml", data)) == data

    def test_mapping_without_files(self, write_yaml):
        """A mapping without 'files' is rejected."""
        with pytest.raises(CLIError, match="'files' list"):
            load_file_list(write_yaml("files.yaml", {"id": 1}))

    def test_scalar(self, write_yaml):
        """A scalar document is rejected."""
        with pytest.raises(CLIError):
            load_file_list(write_yaml("files.yaml", "hello"))

    def test_non_mapping_record(self, write_yaml):
        """Every record must be a mapping."""
        with pytest.raises(CLIError, match="index 1"):
            load_file_list(write_yaml("files.yaml", [{"path": "a"}, "b"]))

    def test_parse_error(self, temp_dir):
        """Malformed documents are reported."""
        path = temp_dir / "files.yaml"
        path.write_text("files: [unclosed")
        with pytest.raises(CLIError, match="Failed to parse"):
            load_file_list(str(path))


class TestBuildConfig:
    """Tests for build_config."""

    def test_cli_switches(self, files_json, temp_dir):
        """Switches override configuration."""
        log_file = str(temp_dir / "torrtree.log")
        args = parse_arguments([str(files_json), "--no-icons", "--debug", "--log-file", log_file])
        config = build_config(args)
        assert config.get("torrtree.tree.icons") is False
        assert config.get("torrtree.logging.level") == "DEBUG"
        assert config.get("torrtree.logging.file") == log_file

    def test_config_file(self, files_json, config_file):
        """--config is loaded."""
        args = parse_arguments([str(files_json), "-c", str(config_file)])
        config = build_config(args)
        assert config.get("torrtree.tree.icons") is False

    def test_environment(self, files_json, monkeypatch):
        """TORRTREE_* variables are honored."""
        monkeypatch.setenv("TORRTREE_TREE_ICONS", "false")
        config = build_config(parse_arguments([str(files_json)]))
        assert config.get("torrtree.tree.icons") is False


class TestFormatItems:
    """Tests for format_items."""

    def test_indentation(self):
        """Children are indented one level deeper."""
        items = [TreeItem(1, "a", [TreeItem(2, "b", [TreeItem(3, "c")])]), TreeItem(4, "d")]
        assert format_items(items, indent="..") == ["a", "..b", "....c", "d"]


class TestMain:
    """Tests for the main entry point."""

    def test_summary(self, files_json, capsys):
        """The default view prints the aggregated summary."""
        assert main([str(files_json), "--no-icons"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "album - 8.0K  49%",
            "  01 - intro.flac - 2.9K  ✓",
            "  02 - song.flac - 4.9K  20%",
            "  cover.jpg - 0.2K  0%",
        ]

    def test_items_with_selection(self, files_json, capsys):
        """The items view is followed by the resolved selection."""
        code = main([str(files_json), "--no-icons", "--view", "items", "--select", "0/2", "0.1", "3"])
        assert code == 0
        assert capsys.readouterr().out.splitlines() == [
            "album - 8.0K",
            "  01 - intro.flac - 2.9K",
            "  02 - song.flac - 4.9K",
            "  cover.jpg - 0.2K",
            "0/2: #2 album/cover.jpg (0/200)",
            "0.1: #1 album/02 - song.flac (1000/5000)",
            "3: no corresponding record",
        ]

    def test_debug_logging(self, files_json, capsys):
        """--debug enables build statistics on stderr."""
        assert main([str(files_json), "--debug"]) == 0
        assert "Built index tree" in capsys.readouterr().err

    def test_log_file(self, files_json, temp_dir):
        """--log-file also writes to a file."""
        log_file = temp_dir / "torrtree.log"
        assert main([str(files_json), "--log-file", str(log_file)]) == 0
        assert "File tree refreshed" in log_file.read_text()

    def test_missing_file(self, temp_dir, capsys):
        """A missing file list exits with 1."""
        assert main([str(temp_dir / "missing.json")]) == 1
        assert capsys.readouterr().err.startswith("Error: File list does not exist")

    def test_invalid_config(self, files_json, write_yaml, capsys):
        """An invalid config file exits with 1."""
        config_path = write_yaml("bad.yaml", {"torrtree": {"tree": {"colour": True}}})
        assert main([str(files_json), "-c", config_path]) == 1
        assert "Unknown tree configuration fields: colour" in capsys.readouterr().err

    def test_missing_record_field(self, write_yaml, capsys):
        """Records without a size exit with 1."""
        path = write_yaml("files.yaml", [{"path": "a", "downloaded": 0}])
        assert main([path]) == 1
        assert capsys.readouterr().err.startswith("Invalid file list:")

    def test_negative_size(self, write_yaml, capsys):
        """Negative sizes exit with 1."""
        path = write_yaml("files.yaml", [{"path": "a", "size": -1, "downloaded": 0}])
        assert main([path]) == 1
        assert "cannot be negative" in capsys.readouterr().err

    def test_empty_file_list(self, write_yaml, capsys):
        """An empty file list prints nothing."""
        path = write_yaml("files.yaml", {"files": []})
        assert main([path]) == 0
        assert capsys.readouterr().out == ""

    def test_selection_follows_item_order(self, write_yaml, capsys):
        """Ranks count rows in file list order, not name order."""
        path = write_yaml(
            "files.yaml",
            [
                {"path": "b.txt", "size": 2000, "downloaded": 0},
                {"path": "a.txt", "size": 1000, "downloaded": 0},
            ],
        )
        assert main([path, "--no-icons", "--select", "0"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "b.txt - 2.0K",
            "a.txt - 1.0K",
            "0: #0 b.txt (0/2000)",
        ]

    def test_selection_with_summary_view(self, files_json, capsys):
        """Asking for the summary together with a selection exits with 1."""
        assert main([str(files_json), "--view", "summary", "--select", "0"]) == 1
        assert "use --view items" in capsys.readouterr().err

    def test_invalid_environment_level(self, files_json, monkeypatch, capsys):
        """A bad TORRTREE_LOGGING_LEVEL is reported as a configuration error."""
        monkeypatch.setenv("TORRTREE_LOGGING_LEVEL", "verbose")
        assert main([str(files_json)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: Invalid configuration in TORRTREE_* environment")
        assert "Invalid file list" not in err

    def test_invalid_environment_switch(self, files_json, monkeypatch, capsys):
        """A non-boolean TORRTREE_TREE_ICONS exits with 1."""
        monkeypatch.setenv("TORRTREE_TREE_ICONS", "maybe")
        assert main([str(files_json)]) == 1
        assert "Tree icons must be boolean: maybe" in capsys.readouterr().err
