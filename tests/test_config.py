"""Side configuration holding the remembered document path."""

import json

from compat_editor.config import AppConfig


def test_missing_file_means_no_remembered_path(config):
    assert not config.exists
    assert config.last_used_path is None
    assert not config.path.exists()


def test_remember_path_creates_file(config, tmp_path):
    target = tmp_path / "docs" / "compatibility.json"
    assert config.remember_path(target)
    assert config.exists
    assert json.loads(config.path.read_text(encoding="utf-8")) == {
        "lastUsedPath": str(target.absolute()),
    }
    assert AppConfig(config.path).last_used_path == target.absolute()


def test_remember_path_overwrites(config, tmp_path):
    config.remember_path(tmp_path / "a.json")
    config.remember_path(tmp_path / "b.json")
    assert AppConfig(config.path).last_used_path == (tmp_path / "b.json").absolute()


def test_corrupt_file_falls_back_to_defaults(make_config):
    config = make_config({})
    config.path.write_text("{oops", encoding="utf-8")
    reloaded = AppConfig(config.path)
    assert reloaded.exists
    assert reloaded.last_used_path is None


def test_empty_path_value_is_ignored(make_config):
    assert make_config({"lastUsedPath": ""}).last_used_path is None
    assert make_config({"lastUsedPath": 3}).last_used_path is None


def test_write_failure_is_swallowed(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    config = AppConfig(blocker / "config.json")
    assert config.remember_path(tmp_path / "doc.json") is False
    assert not config.exists
