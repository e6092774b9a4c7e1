"""Fallback chain used to find the document at startup."""

from pathlib import Path

import pytest

from compat_editor.core.path_resolver import (
    DEFAULT_FILENAME,
    DEFAULT_RESOURCE_URL,
    RESOURCE_URL_ENV,
    SourceOrigin,
    SourceResolver,
    get_resource_url,
)

from conftest import RecordingFileSystem, ScriptedDialogs, StubFetcher


@pytest.fixture
def dirs(tmp_path):
    cwd = tmp_path / "cwd"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    return cwd, home


def _resolver(config, dialogs, dirs, fetcher, calls):
    cwd, home = dirs
    return SourceResolver(
        config,
        dialogs,
        fs=RecordingFileSystem(calls),
        fetch=fetcher,
        cwd=cwd,
        home=home,
        resource_url="http://resource.invalid/compatibility.json",
    )


def test_remembered_path_wins(make_config, sample_file, dirs):
    config = make_config({"lastUsedPath": str(sample_file)})
    dialogs = ScriptedDialogs()
    calls: list = []
    source = _resolver(config, dialogs, dirs, StubFetcher(calls=calls), calls).resolve()
    assert source.origin is SourceOrigin.REMEMBERED
    assert source.path == sample_file.absolute()
    assert dialogs.calls == []


def test_unreadable_remembered_path_falls_back_to_picker(make_config, sample_file, dirs, tmp_path):
    config = make_config({"lastUsedPath": str(tmp_path / "gone.json")})
    dialogs = ScriptedDialogs(open_paths=[sample_file])
    calls: list = []
    source = _resolver(config, dialogs, dirs, StubFetcher(calls=calls), calls).resolve()
    assert source.origin is SourceOrigin.PICKED
    assert dialogs.calls == ["open"]
    assert calls[0] == ("read", tmp_path / "gone.json")


def test_config_without_path_uses_picker(make_config, dirs):
    config = make_config({})
    dialogs = ScriptedDialogs()
    calls: list = []
    resolution = _resolver(config, dialogs, dirs, StubFetcher(calls=calls), calls).resolve_outcome()
    assert resolution.cancelled
    assert resolution.source is None
    assert dialogs.calls == ["open"]
    # picker cancel never reaches the first-run fallbacks
    assert calls == []


def test_picked_file_unreadable_reports_error(make_config, dirs, tmp_path):
    config = make_config({})
    dialogs = ScriptedDialogs(open_paths=[tmp_path / "missing.json"])
    calls: list = []
    resolution = _resolver(config, dialogs, dirs, StubFetcher(calls=calls), calls).resolve_outcome()
    assert not resolution.found
    assert not resolution.cancelled
    assert resolution.error is not None


def test_first_run_prefers_working_directory(config, dirs, sample_text):
    cwd, _ = dirs
    (cwd / DEFAULT_FILENAME).write_text(sample_text, encoding="utf-8")
    calls: list = []
    fetcher = StubFetcher(text="[]", calls=calls)
    source = _resolver(config, ScriptedDialogs(), dirs, fetcher, calls).resolve()
    assert source.origin is SourceOrigin.WORKING_DIR
    assert [c[0] for c in calls] == ["read"]


def test_first_run_fetches_before_home(config, dirs, sample_text):
    _, home = dirs
    (home / DEFAULT_FILENAME).write_text(sample_text, encoding="utf-8")
    calls: list = []
    fetcher = StubFetcher(text="[]", calls=calls)
    dialogs = ScriptedDialogs()
    source = _resolver(config, dialogs, dirs, fetcher, calls).resolve()
    assert source.origin is SourceOrigin.RESOURCE
    assert source.path is None
    assert source.text == "[]"
    assert [c[0] for c in calls] == ["read", "fetch"]
    assert dialogs.calls == []


def test_first_run_home_after_failed_fetch(config, dirs, sample_text):
    cwd, home = dirs
    (home / DEFAULT_FILENAME).write_text(sample_text, encoding="utf-8")
    calls: list = []
    source = _resolver(config, ScriptedDialogs(), dirs, StubFetcher(calls=calls), calls).resolve()
    assert source.origin is SourceOrigin.HOME
    assert calls == [
        ("read", cwd / DEFAULT_FILENAME),
        ("fetch", "http://resource.invalid/compatibility.json"),
        ("read", home / DEFAULT_FILENAME),
    ]


def test_first_run_nothing_found(config, dirs):
    calls: list = []
    dialogs = ScriptedDialogs()
    resolution = _resolver(config, dialogs, dirs, StubFetcher(calls=calls), calls).resolve_outcome()
    assert not resolution.found
    assert not resolution.cancelled
    assert len(calls) == 3
    assert dialogs.calls == []


def test_resource_url_from_environment(monkeypatch):
    monkeypatch.delenv(RESOURCE_URL_ENV, raising=False)
    assert get_resource_url() == DEFAULT_RESOURCE_URL
    monkeypatch.setenv(RESOURCE_URL_ENV, "http://other.invalid/list.json")
    assert get_resource_url() == "http://other.invalid/list.json"


def test_resolver_does_not_write_config(config, dirs, sample_text):
    cwd, _ = dirs
    (cwd / DEFAULT_FILENAME).write_text(sample_text, encoding="utf-8")
    calls: list = []
    _resolver(config, ScriptedDialogs(), dirs, StubFetcher(calls=calls), calls).resolve()
    assert not config.path.exists()
    assert isinstance(config.path, Path)
