"""Side configuration: remembers the last compatibility document used."""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from compat_editor.core.exceptions import ConfigError

APP_DIR_NAME = "CompatListEditor"
CONFIG_FILENAME = "config.json"


def _default_data_dir() -> Path:
    """Return the per-user configuration directory for the application."""
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_DIR_NAME
    elif platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    else:
        return Path.home() / ".config" / APP_DIR_NAME


class AppConfig:
    """Small JSON-backed store holding ``lastUsedPath``.

    Created lazily: nothing is written until the first successful load or
    save remembers a path.  A missing file or key simply means "no
    remembered path".
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self._path = config_path or (_default_data_dir() / CONFIG_FILENAME)
        self._data: dict[str, Any] = {}
        self._exists = False
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data_dir(self) -> Path:
        return self._path.parent

    @property
    def exists(self) -> bool:
        """Whether a configuration file was present when loaded or since saved."""
        return self._exists

    @property
    def last_used_path(self) -> Path | None:
        p = self._data.get("lastUsedPath")
        if isinstance(p, str) and p:
            return Path(p)
        return None

    def remember_path(self, path: Path) -> bool:
        """Store *path* as ``lastUsedPath``; best-effort, never raises."""
        self._data["lastUsedPath"] = str(Path(path).absolute())
        try:
            self._save()
        except ConfigError as e:
            logger.warning("Could not remember last used path: {}", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self._path.exists():
            return
        self._exists = True
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                saved = json.load(f)
            if isinstance(saved, dict):
                self._data.update(saved)
            else:
                logger.warning("Ignoring non-object config in {}", self._path)
            logger.info("Configuration loaded from {}", self._path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load config, using defaults: {}", e)

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(self._path, e) from e
        self._exists = True
