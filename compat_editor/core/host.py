"""Capabilities the editor borrows from its host environment.

The core never touches the disk, the network or a dialog directly.  It goes
through the objects defined here so the GUI can plug in real Qt dialogs and
tests can plug in scripted ones.
"""

from __future__ import annotations

import os
import stat
import tempfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import Protocol, Sequence

from loguru import logger

from compat_editor.core.exceptions import ReadError, WriteError

JSON_FILTERS: tuple[str, ...] = ("JSON files (*.json)", "All files (*)")

_FETCH_TIMEOUT = 5.0


class FileSystem:
    """Text file access on the local disk."""

    def read_text(self, path: Path) -> str:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(path, e) from e

    def write_text(self, path: Path, text: str) -> None:
        """Replace *path* with *text* as UTF-8.

        The text is encoded before the disk is touched, then written to a
        temporary file beside *path* and renamed over it, so a failed save
        leaves the previous file intact.  The parent directory must exist.
        """
        path = Path(path)
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise WriteError(path, f"text cannot be encoded as UTF-8 ({e.reason})") from e
        if not path.parent.is_dir():
            raise WriteError(path, "directory does not exist")
        try:
            self._replace(path, data)
        except OSError as e:
            raise WriteError(path, e) from e

    @staticmethod
    def _replace(path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            if path.exists():
                os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
            os.replace(tmp_name, path)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Could not remove temporary file {}", tmp_name)
            raise

    def ensure_dir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(path, e) from e


def fetch_text(url: str, timeout: float = _FETCH_TIMEOUT) -> str:
    """Download *url* as UTF-8 text; raises :class:`ReadError` on failure."""
    try:
        with urllib.request.urlopen(url, timeout=timeout) as resp:
            return resp.read().decode("utf-8")
    except (urllib.error.URLError, OSError, ValueError, UnicodeDecodeError) as e:
        logger.debug("Fetch failed for {}: {}", url, e)
        raise ReadError(url, e) from e


class HostDialogs(Protocol):
    """Interactive prompts supplied by the GUI."""

    def open_file(self, filters: Sequence[str]) -> Path | None:
        """Ask for an existing file; ``None`` when the user cancels."""
        ...

    def save_file(self, default_name: str, filters: Sequence[str]) -> Path | None:
        """Ask for a target file; ``None`` when the user cancels."""
        ...

    def confirm(self, prompt: str) -> bool:
        ...
