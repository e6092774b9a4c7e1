"""Card widgets for the list-valued fields of a record.

The cards never touch the store.  They emit index-based signals and the
editor page turns those into store operations, then rebuilds the card when
the list length changes.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QHBoxLayout, QVBoxLayout, QWidget
from qfluentwidgets import (
    CaptionLabel, CardWidget, FluentIcon as FIF, LineEdit, PlainTextEdit,
    StrongBodyLabel, TransparentToolButton, setFont,
)

from compat_editor.models.compat_record import CommonIssue, SetupDetail


def _header(parent: QWidget, title: str, add_tip: str) -> tuple[QHBoxLayout, TransparentToolButton]:
    row = QHBoxLayout()
    row.setSpacing(8)
    label = StrongBodyLabel(title, parent)
    setFont(label, 13, QFont.Weight.DemiBold)
    row.addWidget(label, 1)
    add_btn = TransparentToolButton(FIF.ADD, parent)
    add_btn.setFixedSize(28, 28)
    add_btn.setToolTip(add_tip)
    row.addWidget(add_btn, 0, Qt.AlignmentFlag.AlignVCenter)
    return row, add_btn


def _remove_button(parent: QWidget, tip: str) -> TransparentToolButton:
    btn = TransparentToolButton(FIF.CLOSE, parent)
    btn.setFixedSize(24, 24)
    btn.setToolTip(tip)
    return btn


class StringListCard(CardWidget):
    """Editable list of single-line strings (e.g. features not emulated)."""

    item_changed = Signal(int, str)
    item_removed = Signal(int)
    item_added = Signal()

    def __init__(self, title: str, items: tuple[str, ...], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(6)

        header, add_btn = _header(self, title, "Add item")
        add_btn.clicked.connect(self.item_added.emit)
        root.addLayout(header)

        if not items:
            empty = CaptionLabel("No entries", self)
            empty.setStyleSheet("color:#888;")
            root.addWidget(empty)

        for i, text in enumerate(items):
            row = QHBoxLayout()
            edit = LineEdit(self)
            edit.setText(text)
            edit.textEdited.connect(lambda value, idx=i: self.item_changed.emit(idx, value))
            row.addWidget(edit, 1)
            remove = _remove_button(self, "Remove item")
            remove.clicked.connect(lambda checked=False, idx=i: self.item_removed.emit(idx))
            row.addWidget(remove, 0, Qt.AlignmentFlag.AlignVCenter)
            root.addLayout(row)


class SetupDetailCard(CardWidget):
    """One setup step with its nested bullet points."""

    category_changed = Signal(int, str)
    details_changed = Signal(int, str)
    bullet_changed = Signal(int, int, str)
    bullet_added = Signal(int)
    bullet_removed = Signal(int, int)
    removed = Signal(int)

    def __init__(self, index: int, entry: SetupDetail, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._index = index

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(6)

        top = QHBoxLayout()
        self._category = LineEdit(self)
        self._category.setPlaceholderText("Category")
        self._category.setText(entry.category)
        self._category.textEdited.connect(lambda v: self.category_changed.emit(self._index, v))
        top.addWidget(self._category, 1)
        remove = _remove_button(self, "Remove setup step")
        remove.clicked.connect(lambda checked=False: self.removed.emit(self._index))
        top.addWidget(remove, 0, Qt.AlignmentFlag.AlignVCenter)
        root.addLayout(top)

        self._details = PlainTextEdit(self)
        self._details.setPlaceholderText("Details")
        self._details.setPlainText(entry.details)
        self._details.setFixedHeight(72)
        self._details.textChanged.connect(
            lambda: self.details_changed.emit(self._index, self._details.toPlainText())
        )
        root.addWidget(self._details)

        header, add_btn = _header(self, "Bullet points", "Add bullet point")
        add_btn.clicked.connect(lambda checked=False: self.bullet_added.emit(self._index))
        root.addLayout(header)

        for b, text in enumerate(entry.bullet_points):
            row = QHBoxLayout()
            row.setContentsMargins(24, 0, 0, 0)
            edit = LineEdit(self)
            edit.setText(text)
            edit.textEdited.connect(
                lambda value, bi=b: self.bullet_changed.emit(self._index, bi, value)
            )
            row.addWidget(edit, 1)
            rm = _remove_button(self, "Remove bullet point")
            rm.clicked.connect(lambda checked=False, bi=b: self.bullet_removed.emit(self._index, bi))
            row.addWidget(rm, 0, Qt.AlignmentFlag.AlignVCenter)
            root.addLayout(row)


class CommonIssueCard(CardWidget):
    """Question / answer pair."""

    question_changed = Signal(int, str)
    answer_changed = Signal(int, str)
    removed = Signal(int)

    def __init__(self, index: int, entry: CommonIssue, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._index = index

        root = QVBoxLayout(self)
        root.setContentsMargins(16, 12, 16, 12)
        root.setSpacing(6)

        top = QHBoxLayout()
        question = LineEdit(self)
        question.setPlaceholderText("Question")
        question.setText(entry.question)
        question.textEdited.connect(lambda v: self.question_changed.emit(self._index, v))
        top.addWidget(question, 1)
        remove = _remove_button(self, "Remove issue")
        remove.clicked.connect(lambda checked=False: self.removed.emit(self._index))
        top.addWidget(remove, 0, Qt.AlignmentFlag.AlignVCenter)
        root.addLayout(top)

        self._answer = PlainTextEdit(self)
        self._answer.setPlaceholderText("Answer")
        self._answer.setPlainText(entry.answer)
        self._answer.setFixedHeight(64)
        self._answer.textChanged.connect(
            lambda: self.answer_changed.emit(self._index, self._answer.toPlainText())
        )
        root.addWidget(self._answer)
