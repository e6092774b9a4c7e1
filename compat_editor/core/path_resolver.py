"""Locates the compatibility document to open at startup.

Resolution order
────────────────
1. The remembered ``lastUsedPath`` from the side configuration, if readable.
2. When a configuration file exists: ask the user with an open dialog
   (JSON files).  Cancelling ends resolution quietly.
3. When no configuration file exists at all (first run), try in turn:

   a. ``compatibility.json`` in the working directory
   b. the well-known resource URL (``COMPAT_EDITOR_RESOURCE_URL`` or
      :data:`DEFAULT_RESOURCE_URL`)
   c. ``compatibility.json`` in the user's home directory

   Each failure falls through to the next; if all fail nothing is found.

The resolver only reads.  Remembering the chosen path is left to the
caller once the document has actually loaded.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from loguru import logger

from compat_editor.config import AppConfig
from compat_editor.core.exceptions import ReadError
from compat_editor.core.host import JSON_FILTERS, FileSystem, HostDialogs, fetch_text

DEFAULT_FILENAME = "compatibility.json"
DEFAULT_RESOURCE_URL = "http://localhost:1420/compatibility.json"
RESOURCE_URL_ENV = "COMPAT_EDITOR_RESOURCE_URL"


class SourceOrigin(str, Enum):
    """Where a resolved document came from."""

    REMEMBERED = "remembered"
    PICKED = "picked"
    WORKING_DIR = "working_dir"
    RESOURCE = "resource"
    HOME = "home"


@dataclass
class ResolvedSource:
    """A readable document and the place it was read from."""

    text: str
    origin: SourceOrigin
    location: str
    path: Path | None = None
    """Concrete file path; ``None`` for a fetched resource."""


@dataclass
class Resolution:
    source: ResolvedSource | None = None
    cancelled: bool = False
    error: ReadError | None = None
    """Why an explicitly picked file could not be read."""

    @property
    def found(self) -> bool:
        return self.source is not None


def get_home_dir() -> Path:
    """Return the user home directory."""
    return Path.home()


def get_resource_url() -> str:
    return os.environ.get(RESOURCE_URL_ENV) or DEFAULT_RESOURCE_URL


class SourceResolver:
    """Runs the fallback chain described in the module docstring."""

    def __init__(
        self,
        config: AppConfig,
        dialogs: HostDialogs,
        fs: FileSystem | None = None,
        fetch: Callable[[str], str] = fetch_text,
        cwd: Path | None = None,
        home: Path | None = None,
        resource_url: str | None = None,
    ) -> None:
        self._cfg = config
        self._dialogs = dialogs
        self._fs = fs or FileSystem()
        self._fetch = fetch
        self._cwd = cwd
        self._home = home
        self._resource_url = resource_url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self) -> ResolvedSource | None:
        return self.resolve_outcome().source

    def resolve_outcome(self) -> Resolution:
        remembered = self._cfg.last_used_path
        if remembered is not None:
            source = self._read_file(remembered, SourceOrigin.REMEMBERED)
            if source is not None:
                return Resolution(source)
            logger.info("Remembered path {} is not readable", remembered)

        if self._cfg.exists:
            return self.pick()

        for attempt in (self._try_working_dir, self._try_resource, self._try_home):
            source = attempt()
            if source is not None:
                return Resolution(source)
        logger.warning("No compatibility document found in any fallback location")
        return Resolution()

    def pick(self) -> Resolution:
        """Ask the user for a document via the open dialog."""
        path = self._dialogs.open_file(JSON_FILTERS)
        if path is None:
            logger.info("Open dialog cancelled")
            return Resolution(cancelled=True)
        path = Path(path)
        try:
            text = self._fs.read_text(path)
        except ReadError as e:
            logger.warning("Picked file unreadable: {}", e)
            return Resolution(error=e)
        return Resolution(ResolvedSource(
            text=text, origin=SourceOrigin.PICKED, location=str(path), path=path.absolute(),
        ))

    # ------------------------------------------------------------------
    # Fallback steps
    # ------------------------------------------------------------------

    def _try_working_dir(self) -> ResolvedSource | None:
        base = self._cwd or Path.cwd()
        return self._read_file(base / DEFAULT_FILENAME, SourceOrigin.WORKING_DIR)

    def _try_resource(self) -> ResolvedSource | None:
        url = self._resource_url or get_resource_url()
        try:
            text = self._fetch(url)
        except ReadError as e:
            logger.debug("Resource fallback failed: {}", e)
            return None
        return ResolvedSource(text=text, origin=SourceOrigin.RESOURCE, location=url)

    def _try_home(self) -> ResolvedSource | None:
        base = self._home or get_home_dir()
        return self._read_file(base / DEFAULT_FILENAME, SourceOrigin.HOME)

    def _read_file(self, path: Path, origin: SourceOrigin) -> ResolvedSource | None:
        try:
            text = self._fs.read_text(path)
        except ReadError as e:
            logger.debug("{} candidate unreadable: {}", origin.value, e)
            return None
        return ResolvedSource(
            text=text, origin=origin, location=str(path), path=path.absolute(),
        )
