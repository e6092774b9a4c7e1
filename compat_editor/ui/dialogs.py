"""Qt implementation of the host dialog capability."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from PySide6.QtWidgets import QFileDialog, QWidget
from qfluentwidgets import MessageBox


class QtHostDialogs:
    """File pickers and confirmations shown over *parent*."""

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent

    def set_parent(self, parent: QWidget) -> None:
        self._parent = parent

    def open_file(self, filters: Sequence[str]) -> Path | None:
        path, _ = QFileDialog.getOpenFileName(
            self._parent, "Open compatibility list", "", ";;".join(filters),
        )
        return Path(path) if path else None

    def save_file(self, default_name: str, filters: Sequence[str]) -> Path | None:
        path, _ = QFileDialog.getSaveFileName(
            self._parent, "Save compatibility list", default_name, ";;".join(filters),
        )
        return Path(path) if path else None

    def confirm(self, prompt: str) -> bool:
        box = MessageBox("Please confirm", prompt, self._parent)
        return bool(box.exec())
