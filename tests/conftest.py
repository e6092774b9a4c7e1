"""Shared pytest fixtures for the compatibility editor test suite."""

import json
import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from compat_editor.config import AppConfig  # noqa: E402
from compat_editor.core.exceptions import ReadError, WriteError  # noqa: E402
from compat_editor.core.host import FileSystem  # noqa: E402


# =============================================================================
# Test doubles
# =============================================================================

class RecordingFileSystem(FileSystem):
    """Real disk access that also logs every read attempt in *calls*."""

    def __init__(self, calls: list | None = None) -> None:
        self.calls = calls if calls is not None else []

    def read_text(self, path: Path) -> str:
        self.calls.append(("read", Path(path)))
        return super().read_text(path)


class ReadOnlyFileSystem(RecordingFileSystem):
    """Every write fails as if permission were denied."""

    def write_text(self, path: Path, text: str) -> None:
        raise WriteError(path, "Permission denied")


class ScriptedDialogs:
    """Dialog capability answering from pre-set scripts."""

    def __init__(self, open_paths=(), save_paths=(), confirms=()) -> None:
        self.open_paths = list(open_paths)
        self.save_paths = list(save_paths)
        self.confirms = list(confirms)
        self.calls: list[str] = []

    def open_file(self, filters):
        self.calls.append("open")
        return self.open_paths.pop(0) if self.open_paths else None

    def save_file(self, default_name, filters):
        self.calls.append("save")
        return self.save_paths.pop(0) if self.save_paths else None

    def confirm(self, prompt):
        self.calls.append("confirm")
        return self.confirms.pop(0) if self.confirms else False


class StubFetcher:
    """Fetch capability returning *text*, or failing when it is ``None``."""

    def __init__(self, text: str | None = None, calls: list | None = None) -> None:
        self.text = text
        self.calls = calls if calls is not None else []

    def __call__(self, url: str) -> str:
        self.calls.append(("fetch", url))
        if self.text is None:
            raise ReadError(url, "connection refused")
        return self.text


# =============================================================================
# Shared Fixtures
# =============================================================================

SAMPLE_RECORDS = [
    {
        "Id": "banana-rally",
        "Name": "Banana",
        "Hardware": "Xbox",
        "Description": "Kart racer",
        "IconUrl": "https://example.invalid/banana.png",
        "Genre": "Racing",
        "MultiplayerType": 1,
        "MultiplayerDetails": None,
        "NvidiaSupport": 0,
        "AmdSupport": 1,
        "IntelSupport": 2,
        "SetupDetails": [
            {
                "Category": "Graphics",
                "Details": "Use Vulkan",
                "BulletPoints": ["Enable vsync", "Disable MSAA"],
            },
            {
                "Category": "Audio",
                "Details": "",
                "BulletPoints": ["Use XAudio2"],
                "Note": "kept",
            },
        ],
        "CommonIssues": [{"Question": "Crashes?", "Answer": "Update drivers"}],
        "FeaturesNotEmulated": ["Rumble", "Voice chat"],
        "OverallStatus": 1,
        "ReviewedBy": {"user": "mod", "tags": ["a", "b"]},
        "DevOnly": True,
    },
    {
        "Name": "apple",
        "Id": "apple-quest",
        "OverallStatus": 0,
        "FeaturesNotEmulated": [],
        "Extra": 42,
    },
    {
        "Id": "cherry",
        "Name": "Cherry",
        "OverallStatus": 3,
        "SetupDetails": [],
    },
]


@pytest.fixture
def sample_text() -> str:
    return json.dumps(SAMPLE_RECORDS, indent=2)


@pytest.fixture
def sample_file(tmp_path: Path, sample_text: str) -> Path:
    path = tmp_path / "docs" / "compatibility.json"
    path.parent.mkdir(parents=True)
    path.write_text(sample_text, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(tmp_path / "config" / "config.json")


@pytest.fixture
def make_config(tmp_path: Path):
    """Build a config that already exists on disk with *data*."""

    def _make(data: dict) -> AppConfig:
        path = tmp_path / "config" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return AppConfig(path)

    return _make
