"""Compatibility List Editor entry point."""

import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from loguru import logger

from compat_editor.config import AppConfig
from compat_editor.logger import setup_logger
from compat_editor.core.session import EditorSession
from compat_editor.core.store import CompatStore
from compat_editor.ui.dialogs import QtHostDialogs
from compat_editor.ui.main_window import MainWindow


def main() -> None:
    # ---- 1. Config ----
    config = AppConfig()

    # ---- 2. Logger ----
    setup_logger(config.data_dir / "logs")
    logger.info("Compatibility List Editor starting…")

    # ---- 3. Core services ----
    store = CompatStore()
    dialogs = QtHostDialogs()
    session = EditorSession(store, config, dialogs)

    # ---- 4. Qt Application ----
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough,
    )
    app = QApplication(sys.argv)

    # ---- 5. Main Window ----
    window = MainWindow(session)
    dialogs.set_parent(window)
    window.show()

    # ---- 6. Initial document ----
    args = [a for a in sys.argv[1:] if not a.startswith("-")]
    if args:
        window.editor_page.load_path(Path(args[0]))
    else:
        window.editor_page.load_initial()
    logger.info("Window shown, entering event loop")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
