"""Shared pytest fixtures for torrtree tests."""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest
import yaml

from torrtree.infrastructure.config_manager import ConfigManager, set_global_config
from torrtree.infrastructure.logger import set_global_logger
from torrtree.tree.base import FileRecord


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def records() -> List[FileRecord]:
    """File list of a season pack, in the order the client reported it."""
    return [
        FileRecord(size=700, downloaded=700, path="Show/S01/e02.mkv"),
        FileRecord(size=650, downloaded=100, path="Show/S01/e01.mkv"),
        FileRecord(size=20, downloaded=20, path="Show/S01/e01.srt"),
        FileRecord(size=800, downloaded=0, path="Show/S02/e01.mkv"),
        FileRecord(size=5, downloaded=5, path="Show/info.nfo"),
    ]


@pytest.fixture
def rpc_files() -> List[Dict[str, Any]]:
    """Files entry of a Transmission torrent-get response."""
    return [
        {"name": "album/01 - intro.flac", "length": 3000, "bytesCompleted": 3000},
        {"name": "album/02 - song.flac", "length": 5000, "bytesCompleted": 1000},
        {"name": "album/cover.jpg", "length": 200, "bytesCompleted": 0},
    ]


@pytest.fixture
def files_json(temp_dir: Path, rpc_files: List[Dict[str, Any]]) -> Path:
    """File list written as a torrent entry with a 'files' key."""
    path = temp_dir / "files.json"
    path.write_text(json.dumps({"id": 1, "files": rpc_files}))
    return path


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample torrtree configuration."""
    return {
        "torrtree": {
            "tree": {"icons": False, "warn_overdownload": True},
            "logging": {"level": "DEBUG", "file": None},
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "torrtree.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture
def config() -> ConfigManager:
    """Configuration manager with defaults only."""
    return ConfigManager(load_environment=False)


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Isolate tests from TORRTREE_* variables and global instances."""
    for key in list(os.environ):
        if key.startswith("TORRTREE_"):
            monkeypatch.delenv(key)
    set_global_config(None)
    set_global_logger(None)
    yield
    set_global_config(None)
    set_global_logger(None)
