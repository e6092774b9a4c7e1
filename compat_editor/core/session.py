"""Load / save commands and the outcomes reported back to the GUI.

:class:`EditorSession` is the only place that combines path resolution,
persistence, the record store and the side configuration.  Each command
returns an :class:`Outcome` that the GUI turns into a toast; no exception
escapes a command.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

from compat_editor.config import AppConfig
from compat_editor.core.exceptions import ParseError, ReadError, WriteError
from compat_editor.core.host import JSON_FILTERS, FileSystem, HostDialogs
from compat_editor.core.path_resolver import (
    DEFAULT_FILENAME,
    Resolution,
    ResolvedSource,
    SourceOrigin,
    SourceResolver,
)
from compat_editor.core.persistence import parse_document, save_document
from compat_editor.core.store import CompatStore


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass
class Outcome:
    """Result of one command, with a message fit for a notification."""

    status: OutcomeStatus
    message: str = ""
    path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, message: str, path: Path | None = None) -> Outcome:
        return cls(OutcomeStatus.SUCCESS, message, path)

    @classmethod
    def failure(cls, message: str, path: Path | None = None) -> Outcome:
        return cls(OutcomeStatus.FAILURE, message, path)

    @classmethod
    def cancelled(cls, message: str = "") -> Outcome:
        return cls(OutcomeStatus.CANCELLED, message)


class EditorSession:
    """Runs user commands against one :class:`CompatStore`, one at a time."""

    def __init__(
        self,
        store: CompatStore,
        config: AppConfig,
        dialogs: HostDialogs,
        resolver: SourceResolver | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        self._store = store
        self._cfg = config
        self._dialogs = dialogs
        self._fs = fs or FileSystem()
        self._resolver = resolver or SourceResolver(config, dialogs, fs=self._fs)
        self._current_path: Path | None = None
        self._source_location: str | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def store(self) -> CompatStore:
        return self._store

    @property
    def current_path(self) -> Path | None:
        """File that a plain *Save* writes to."""
        return self._current_path

    @property
    def source_location(self) -> str | None:
        """Where the loaded document came from (path or URL)."""
        return self._source_location

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def load(self) -> Outcome:
        """Load from the remembered path or the first-run fallbacks."""
        with self._lock:
            if not self._confirm_discard():
                return Outcome.cancelled()
            return self._load_resolution(self._resolver.resolve_outcome())

    def open_file(self) -> Outcome:
        """Load a document the user picks explicitly."""
        with self._lock:
            if not self._confirm_discard():
                return Outcome.cancelled()
            return self._load_resolution(self._resolver.pick())

    def read_path(self, path: Path) -> Outcome:
        """Load *path* directly, e.g. one given on the command line."""
        with self._lock:
            if not self._confirm_discard():
                return Outcome.cancelled()
            try:
                text = self._fs.read_text(path)
            except ReadError as e:
                logger.error("Load failed: {}", e)
                return Outcome.failure(f"Could not read {e.location}: {e.reason}", path)
            return self._load_source(ResolvedSource(
                text=text, origin=SourceOrigin.PICKED, location=str(path), path=path.absolute(),
            ))

    def save(self) -> Outcome:
        with self._lock:
            if self._current_path is None:
                return self._save_as()
            return self._save_to(self._current_path)

    def save_as(self) -> Outcome:
        with self._lock:
            return self._save_as()

    def add_record(self) -> Outcome:
        with self._lock:
            index = self._store.add_record()
            return Outcome.success(f"Added record #{index + 1}")

    def remove_selected(self) -> Outcome:
        """Remove the selected record after confirmation."""
        with self._lock:
            record = self._store.selected_record
            index = self._store.selected_index
            if record is None or index is None:
                return Outcome.cancelled("No record selected")
            if not self._dialogs.confirm(f"Remove “{record.name}” from the list?"):
                return Outcome.cancelled()
            self._store.remove_record(index)
            return Outcome.success(f"Removed {record.name}")

    def confirm_close(self) -> bool:
        """Whether the window may close; asks first when edits are unsaved."""
        with self._lock:
            if not self._store.dirty:
                return True
            return self._dialogs.confirm("Quit without saving your edits?")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _confirm_discard(self) -> bool:
        if not self._store.dirty:
            return True
        return self._dialogs.confirm("Discard unsaved changes?")

    def _load_resolution(self, resolution: Resolution) -> Outcome:
        if resolution.cancelled:
            return Outcome.cancelled()
        if resolution.error is not None:
            return Outcome.failure(f"Could not read {resolution.error.location}: {resolution.error.reason}")
        if resolution.source is None:
            return Outcome.failure("No compatibility document could be found. Use Open to pick one.")
        return self._load_source(resolution.source)

    def _load_source(self, source: ResolvedSource) -> Outcome:
        try:
            records = parse_document(source.text, source.location)
        except ParseError as e:
            logger.error("Load failed: {}", e)
            return Outcome.failure(f"Could not parse {e.location}: {e.reason}", source.path)

        self._store.replace_all(records)
        self._current_path = source.path
        self._source_location = source.location
        if source.path is not None:
            self._cfg.remember_path(source.path)
        logger.info("Loaded {} records from {} ({})", len(records), source.location, source.origin.value)
        return Outcome.success(f"Loaded {len(records)} records", source.path)

    def _save_as(self) -> Outcome:
        path = self._dialogs.save_file(DEFAULT_FILENAME, JSON_FILTERS)
        if path is None:
            return Outcome.cancelled()
        return self._save_to(Path(path), create_parent=True)

    def _save_to(self, path: Path, create_parent: bool = False) -> Outcome:
        try:
            save_document(path, self._store.records, self._fs, create_parent=create_parent)
        except WriteError as e:
            logger.error("Save failed: {}", e)
            return Outcome.failure(
                f"Could not write {e.location}: {e.reason}. Try Save As to pick another location.",
                path,
            )
        self._store.mark_saved()
        self._current_path = path.absolute()
        self._source_location = str(self._current_path)
        self._cfg.remember_path(self._current_path)
        return Outcome.success(f"Saved {len(self._store)} records", self._current_path)

