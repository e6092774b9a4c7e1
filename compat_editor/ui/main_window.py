"""Main application window using PySide6-Fluent-Widgets FluentWindow."""

from __future__ import annotations

from PySide6.QtCore import QSize
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QApplication

from qfluentwidgets import (
    FluentWindow,
    FluentIcon as FIF,
    setTheme,
    Theme,
)

from compat_editor.core.session import EditorSession
from compat_editor.ui.pages.editor_page import EditorPage


class MainWindow(FluentWindow):
    """Main Fluent-style window with sidebar navigation."""

    def __init__(self, session: EditorSession) -> None:
        super().__init__()
        self._session = session
        self._init_window()
        self._init_pages()
        setTheme(Theme.AUTO)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def _init_window(self) -> None:
        self.setWindowTitle("Compatibility List Editor")
        self.setMinimumSize(QSize(960, 640))
        self.resize(1200, 780)

        # Center on screen
        desktop = QApplication.primaryScreen().availableGeometry()
        x = (desktop.width() - self.width()) // 2
        y = (desktop.height() - self.height()) // 2
        self.move(x, y)

    def _init_pages(self) -> None:
        self.editor_page = EditorPage(self._session, self)
        self.addSubInterface(self.editor_page, FIF.EDIT, "Editor")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        if not self._session.confirm_close():
            event.ignore()
            return
        super().closeEvent(event)
