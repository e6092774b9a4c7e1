"""Editor page: record list on the left, form for the selected record on the right.

Every widget edit is forwarded to :class:`CompatStore` as one operation.
Text edits leave the form alone; edits that change a list's length rebuild
the form so row indices stay in step with the record.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFormLayout, QHBoxLayout, QVBoxLayout, QWidget
from qfluentwidgets import (
    BodyLabel, CaptionLabel, ComboBox, FluentIcon as FIF, InfoBar,
    InfoBarPosition, LineEdit, ListWidget, PlainTextEdit, PrimaryPushButton,
    PushButton, SearchLineEdit, SmoothScrollArea, StrongBodyLabel,
    SubtitleLabel, SwitchButton, setFont,
)
from loguru import logger

from compat_editor.core import updates
from compat_editor.core.session import EditorSession, Outcome, OutcomeStatus
from compat_editor.models.compat_record import (
    ENUM_FIELDS,
    CompatibilityRecord,
)
from compat_editor.ui.components.list_editors import (
    CommonIssueCard,
    SetupDetailCard,
    StringListCard,
)

_TEXT_FIELDS: tuple[tuple[str, str], ...] = (
    ("Id", "Id"),
    ("Name", "Name"),
    ("Hardware", "Hardware"),
    ("Genre", "Genre"),
    ("IconUrl", "Icon URL"),
)

_ENUM_LABELS: dict[str, str] = {
    "OverallStatus": "Overall status",
    "NvidiaSupport": "NVIDIA",
    "AmdSupport": "AMD",
    "IntelSupport": "Intel",
    "MultiplayerType": "Multiplayer",
}


class EditorPage(QWidget):
    """Page hosting the whole edit workflow for one :class:`EditorSession`."""

    def __init__(self, session: EditorSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("editor_page")
        self._session = session
        self._visible: list[int] = []
        self._init_ui()

    @property
    def store(self):
        return self._session.store

    # ------------------------------------------------------------------
    # UI Setup
    # ------------------------------------------------------------------

    def _init_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(12)

        # Title + toolbar
        bar = QHBoxLayout()
        title_col = QVBoxLayout()
        title_col.setSpacing(2)
        title = SubtitleLabel("Compatibility list", self)
        title_col.addWidget(title)
        self._path_label = CaptionLabel("No document loaded", self)
        self._path_label.setStyleSheet("color:#888;")
        title_col.addWidget(self._path_label)
        bar.addLayout(title_col, 1)

        self._open_btn = PushButton(FIF.FOLDER, "Open", self)
        self._open_btn.clicked.connect(self._on_open)
        bar.addWidget(self._open_btn)
        self._save_as_btn = PushButton(FIF.SAVE_AS, "Save As", self)
        self._save_as_btn.clicked.connect(self._on_save_as)
        bar.addWidget(self._save_as_btn)
        self._save_btn = PrimaryPushButton(FIF.SAVE, "Save", self)
        self._save_btn.clicked.connect(self._on_save)
        bar.addWidget(self._save_btn)
        root.addLayout(bar)

        body = QHBoxLayout()
        body.setSpacing(16)

        # Record list
        left = QVBoxLayout()
        self._search = SearchLineEdit(self)
        self._search.setPlaceholderText("Search by name or id")
        self._search.textChanged.connect(lambda _: self._refresh_list())
        left.addWidget(self._search)
        self._list = ListWidget(self)
        self._list.setFixedWidth(280)
        self._list.currentRowChanged.connect(self._on_row_changed)
        left.addWidget(self._list, 1)
        row_btns = QHBoxLayout()
        add_btn = PushButton(FIF.ADD, "Add", self)
        add_btn.clicked.connect(self._on_add)
        row_btns.addWidget(add_btn)
        remove_btn = PushButton(FIF.DELETE, "Remove", self)
        remove_btn.clicked.connect(self._on_remove)
        row_btns.addWidget(remove_btn)
        left.addLayout(row_btns)
        body.addLayout(left)

        # Form
        self._scroll = SmoothScrollArea(self)
        self._scroll.setWidgetResizable(True)
        self._scroll.setStyleSheet("QScrollArea{background:transparent;border:none;}")
        self._form_host = QWidget()
        self._form_host.setStyleSheet("background:transparent;")
        self._form_layout = QVBoxLayout(self._form_host)
        self._form_layout.setContentsMargins(0, 0, 8, 0)
        self._form_layout.setSpacing(12)
        self._form_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self._scroll.setWidget(self._form_host)
        body.addWidget(self._scroll, 1)

        root.addLayout(body, 1)
        self._rebuild_form()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def load_initial(self) -> None:
        self._show_outcome(self._session.load(), "Load")
        self._after_load()

    def load_path(self, path: Path) -> None:
        self._show_outcome(self._session.read_path(path), "Load")
        self._after_load()

    def _on_open(self) -> None:
        self._show_outcome(self._session.open_file(), "Open")
        self._after_load()

    def _on_save(self) -> None:
        self._show_outcome(self._session.save(), "Save")
        self._update_path_label()

    def _on_save_as(self) -> None:
        self._show_outcome(self._session.save_as(), "Save As")
        self._update_path_label()

    def _on_add(self) -> None:
        self._session.add_record()
        self._search.clear()
        self._refresh_list(select=self.store.selected_index)

    def _on_remove(self) -> None:
        outcome = self._session.remove_selected()
        if outcome.ok:
            self._refresh_list()
            self._rebuild_form()
        self._show_outcome(outcome, "Remove")

    def _after_load(self) -> None:
        self._update_path_label()
        self._refresh_list()
        self._rebuild_form()

    def _show_outcome(self, outcome: Outcome, title: str) -> None:
        if outcome.status is OutcomeStatus.CANCELLED:
            return
        if outcome.ok:
            InfoBar.success(
                title=title, content=outcome.message,
                parent=self, position=InfoBarPosition.TOP, duration=3000,
            )
        else:
            InfoBar.error(
                title=title, content=outcome.message,
                parent=self, position=InfoBarPosition.TOP, duration=6000,
            )

    def _update_path_label(self) -> None:
        location = self._session.source_location or "No document loaded"
        if self.store.dirty:
            location += "  •  unsaved changes"
        self._path_label.setText(location)

    # ------------------------------------------------------------------
    # Record list
    # ------------------------------------------------------------------

    def _refresh_list(self, select: int | None = None) -> None:
        if select is None:
            select = self.store.selected_index
        self._visible = self.store.find(self._search.text())
        records = self.store.records
        self._list.blockSignals(True)
        self._list.clear()
        for i in self._visible:
            self._list.addItem(records[i].name or "(unnamed)")
        row = self._visible.index(select) if select in self._visible else -1
        self._list.setCurrentRow(row)
        self._list.blockSignals(False)
        if select is not None and row >= 0:
            self._on_row_changed(row)

    def _on_row_changed(self, row: int) -> None:
        index = self._visible[row] if 0 <= row < len(self._visible) else None
        self.store.select(index)
        self._rebuild_form()

    def _rename_current_item(self, name: str) -> None:
        item = self._list.currentItem()
        if item is not None:
            item.setText(name or "(unnamed)")

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def _clear_form(self) -> None:
        while self._form_layout.count():
            item = self._form_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.deleteLater()

    def _rebuild_form(self) -> None:
        self._clear_form()
        record = self.store.selected_record
        if record is None:
            hint = BodyLabel("Select a record to edit it.", self._form_host)
            hint.setStyleSheet("color:#888;")
            self._form_layout.addWidget(hint)
            return

        self._form_layout.addWidget(self._build_fields(record))

        features = StringListCard("Features not emulated", record.features_not_emulated, self._form_host)
        features.item_changed.connect(
            lambda i, v: self._edit(self.store.replace_list_item, "FeaturesNotEmulated", i, v)
        )
        features.item_removed.connect(
            lambda i: self._edit(self.store.remove_list_item, "FeaturesNotEmulated", i, rebuild=True)
        )
        features.item_added.connect(
            lambda: self._edit(self.store.append_list_item, "FeaturesNotEmulated", "", rebuild=True)
        )
        self._form_layout.addWidget(features)

        self._form_layout.addWidget(self._section_header(
            "Setup details",
            lambda: self._edit(
                self.store.append_list_item, "SetupDetails", updates.new_setup_detail(), rebuild=True,
            ),
        ))
        for i, entry in enumerate(record.setup_details):
            card = SetupDetailCard(i, entry, self._form_host)
            card.category_changed.connect(lambda idx, v: self._edit_setup(idx, category=v))
            card.details_changed.connect(lambda idx, v: self._edit_setup(idx, details=v))
            card.bullet_changed.connect(
                lambda idx, b, v: self._edit(self.store.set_bullet_point, idx, b, v)
            )
            card.bullet_added.connect(
                lambda idx: self._edit(self.store.append_bullet_point, idx, rebuild=True)
            )
            card.bullet_removed.connect(
                lambda idx, b: self._edit(self.store.remove_bullet_point, idx, b, rebuild=True)
            )
            card.removed.connect(
                lambda idx: self._edit(self.store.remove_list_item, "SetupDetails", idx, rebuild=True)
            )
            self._form_layout.addWidget(card)

        self._form_layout.addWidget(self._section_header(
            "Common issues",
            lambda: self._edit(
                self.store.append_list_item, "CommonIssues", updates.new_common_issue(), rebuild=True,
            ),
        ))
        for i, entry in enumerate(record.common_issues):
            card = CommonIssueCard(i, entry, self._form_host)
            card.question_changed.connect(lambda idx, v: self._edit_issue(idx, question=v))
            card.answer_changed.connect(lambda idx, v: self._edit_issue(idx, answer=v))
            card.removed.connect(
                lambda idx: self._edit(self.store.remove_list_item, "CommonIssues", idx, rebuild=True)
            )
            self._form_layout.addWidget(card)

    def _build_fields(self, record: CompatibilityRecord) -> QWidget:
        host = QWidget(self._form_host)
        form = QFormLayout(host)
        form.setContentsMargins(0, 0, 0, 0)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)

        for key, label in _TEXT_FIELDS:
            edit = LineEdit(host)
            edit.setText(record.get_field(key) or "")
            edit.textEdited.connect(lambda v, k=key: self._on_text_field(k, v))
            form.addRow(BodyLabel(label, host), edit)

        description = PlainTextEdit(host)
        description.setPlainText(record.description)
        description.setFixedHeight(96)
        description.textChanged.connect(
            lambda: self._edit(self.store.set_field, "Description", description.toPlainText())
        )
        form.addRow(BodyLabel("Description", host), description)

        for key, label in _ENUM_LABELS.items():
            combo = ComboBox(host)
            combo.addItems([member.label for member in ENUM_FIELDS[key]])
            combo.setCurrentIndex(int(record.get_field(key)))
            combo.currentIndexChanged.connect(
                lambda i, k=key: self._edit(self.store.set_enum_field, k, str(i))
            )
            form.addRow(BodyLabel(label, host), combo)

        mp_details = LineEdit(host)
        mp_details.setText(record.multiplayer_details or "")
        mp_details.textEdited.connect(
            lambda v: self._edit(self.store.set_field, "MultiplayerDetails", v)
        )
        form.addRow(BodyLabel("Multiplayer details", host), mp_details)

        dev_only = SwitchButton(host)
        dev_only.setChecked(record.dev_only)
        dev_only.checkedChanged.connect(lambda v: self._edit(self.store.set_field, "DevOnly", v))
        form.addRow(BodyLabel("Dev only", host), dev_only)
        return host

    def _section_header(self, title: str, on_add) -> QWidget:
        host = QWidget(self._form_host)
        row = QHBoxLayout(host)
        row.setContentsMargins(0, 8, 0, 0)
        label = StrongBodyLabel(title, host)
        setFont(label, 15, QFont.Weight.DemiBold)
        row.addWidget(label, 1)
        add_btn = PushButton(FIF.ADD, "Add", host)
        add_btn.clicked.connect(lambda checked=False: on_add())
        row.addWidget(add_btn)
        return host

    # ------------------------------------------------------------------
    # Edit plumbing
    # ------------------------------------------------------------------

    def _edit(self, op, *args, rebuild: bool = False) -> None:
        changed = op(*args)
        if not changed:
            logger.debug("Edit {} {} had no effect", getattr(op, "__name__", op), args)
            return
        self._update_path_label()
        if rebuild:
            self._rebuild_form()

    def _on_text_field(self, key: str, value: str) -> None:
        self._edit(self.store.set_field, key, value)
        if key == "Name":
            self._rename_current_item(value)

    def _edit_setup(self, index: int, **changes) -> None:
        record = self.store.selected_record
        if record is None or not 0 <= index < len(record.setup_details):
            return
        entry = record.setup_details[index].edited(**changes)
        self._edit(self.store.replace_list_item, "SetupDetails", index, entry)

    def _edit_issue(self, index: int, **changes) -> None:
        record = self.store.selected_record
        if record is None or not 0 <= index < len(record.common_issues):
            return
        entry = record.common_issues[index].edited(**changes)
        self._edit(self.store.replace_list_item, "CommonIssues", index, entry)
