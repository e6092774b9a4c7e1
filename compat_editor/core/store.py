"""In-memory collection of compatibility records plus the current selection."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from loguru import logger

from compat_editor.core import updates
from compat_editor.models.compat_record import CompatibilityRecord

RecordEdit = Callable[[CompatibilityRecord], CompatibilityRecord]


class CompatStore:
    """Owns the ordered record list and every mutation applied to it.

    Field edits always target the selected record and never change the
    number of records or the selection.  Only :meth:`replace_all`,
    :meth:`add_record` and :meth:`remove_record` change the list itself.
    """

    def __init__(self) -> None:
        self._records: list[CompatibilityRecord] = []
        self._selected: int | None = None
        self._dirty = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[CompatibilityRecord]:
        return list(self._records)

    @property
    def selected_index(self) -> int | None:
        return self._selected

    @property
    def selected_record(self) -> CompatibilityRecord | None:
        if self._selected is None:
            return None
        return self._records[self._selected]

    @property
    def dirty(self) -> bool:
        """Whether there are edits not yet written to disk."""
        return self._dirty

    def mark_saved(self) -> None:
        self._dirty = False

    def replace_all(self, records: Iterable[CompatibilityRecord]) -> None:
        """Swap in a freshly loaded collection."""
        self._records = list(records)
        self._selected = None
        self._dirty = False
        logger.debug("Collection replaced ({} records)", len(self._records))

    def select(self, index: int | None) -> None:
        if index is not None and not 0 <= index < len(self._records):
            logger.debug("Ignoring selection of invalid index {}", index)
            index = None
        self._selected = index

    def find(self, text: str) -> list[int]:
        """Indices of records whose name or id contains *text*."""
        needle = text.strip().casefold()
        if not needle:
            return list(range(len(self._records)))
        return [
            i for i, r in enumerate(self._records)
            if needle in r.name.casefold() or needle in r.id.casefold()
        ]

    # ------------------------------------------------------------------
    # Record-level operations
    # ------------------------------------------------------------------

    def add_record(self, record: CompatibilityRecord | None = None) -> int:
        """Append *record* (or a blank one) and select it."""
        self._records.append(record or CompatibilityRecord.blank())
        self._selected = len(self._records) - 1
        self._dirty = True
        return self._selected

    def remove_record(self, index: int) -> bool:
        if not 0 <= index < len(self._records):
            return False
        removed = self._records.pop(index)
        if self._selected is not None:
            if self._selected == index:
                self._selected = None
            elif self._selected > index:
                self._selected -= 1
        self._dirty = True
        logger.info("Removed record {!r}", removed.name)
        return True

    # ------------------------------------------------------------------
    # Field-level operations (selected record)
    # ------------------------------------------------------------------

    def set_field(self, field_name: str, value: Any) -> bool:
        return self._apply(lambda r: updates.set_field(r, field_name, value))

    def set_enum_field(self, field_name: str, raw_text: str) -> bool:
        return self._apply(lambda r: updates.set_enum_field(r, field_name, raw_text))

    def append_list_item(self, field_name: str, template: Any) -> bool:
        return self._apply(lambda r: updates.append_list_item(r, field_name, template))

    def remove_list_item(self, field_name: str, index: int) -> bool:
        return self._apply(lambda r: updates.remove_list_item(r, field_name, index))

    def replace_list_item(self, field_name: str, index: int, value: Any) -> bool:
        return self._apply(lambda r: updates.replace_list_item(r, field_name, index, value))

    def set_bullet_point(self, setup_index: int, bullet_index: int, value: str) -> bool:
        return self._apply(
            lambda r: updates.set_bullet_point(r, setup_index, bullet_index, value)
        )

    def append_bullet_point(self, setup_index: int) -> bool:
        return self._apply(lambda r: updates.append_bullet_point(r, setup_index))

    def remove_bullet_point(self, setup_index: int, bullet_index: int) -> bool:
        return self._apply(
            lambda r: updates.remove_bullet_point(r, setup_index, bullet_index)
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _apply(self, edit: RecordEdit) -> bool:
        """Run *edit* on the selected record; ``True`` if anything changed."""
        index = self._selected
        if index is None:
            return False
        before = self._records[index]
        after = edit(before)
        if after is before:
            return False
        self._records[index] = after
        self._dirty = True
        return True
