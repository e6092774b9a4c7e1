"""Copy-on-write edits for compatibility records.

Every function takes a record and returns a record.  A request that cannot
be applied (index out of range, unparsable enum text, wrong field type)
returns the very same object, which callers use to detect a no-op.

Nested edits rebuild each container between the change and the record:
editing a bullet point creates a new bullet tuple, a new
:class:`SetupDetail` and a new ``SetupDetails`` tuple, then goes through
:func:`set_field` like any other edit.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from compat_editor.models.compat_record import (
    ENUM_FIELDS,
    CommonIssue,
    CompatibilityRecord,
    SetupDetail,
)

SETUP_DETAILS = "SetupDetails"


def new_setup_detail() -> SetupDetail:
    return SetupDetail()


def new_common_issue() -> CommonIssue:
    return CommonIssue()


def _in_bounds(items: tuple, index: int) -> bool:
    return 0 <= index < len(items)


def _list_field(record: CompatibilityRecord, field_name: str) -> tuple | None:
    value = record.get_field(field_name)
    if isinstance(value, (tuple, list)):
        return tuple(value)
    if value is None and not record.has_field(field_name):
        return ()
    return None


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def set_field(record: CompatibilityRecord, field_name: str, value: Any) -> CompatibilityRecord:
    return record.with_field(field_name, value)


def parse_enum_text(field_name: str, raw_text: str):
    """Return the enum member *raw_text* names for *field_name*, or ``None``."""
    enum_cls = ENUM_FIELDS.get(field_name)
    if enum_cls is None:
        logger.debug("{} is not an enum field", field_name)
        return None
    return enum_cls.parse(raw_text)


def set_enum_field(record: CompatibilityRecord, field_name: str, raw_text: str) -> CompatibilityRecord:
    member = parse_enum_text(field_name, raw_text)
    if member is None:
        return record
    return set_field(record, field_name, member)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def append_list_item(record: CompatibilityRecord, field_name: str, template: Any) -> CompatibilityRecord:
    items = _list_field(record, field_name)
    if items is None:
        return record
    return set_field(record, field_name, items + (template,))


def remove_list_item(record: CompatibilityRecord, field_name: str, index: int) -> CompatibilityRecord:
    items = _list_field(record, field_name)
    if items is None or not _in_bounds(items, index):
        return record
    return set_field(record, field_name, items[:index] + items[index + 1:])


def replace_list_item(
    record: CompatibilityRecord, field_name: str, index: int, value: Any,
) -> CompatibilityRecord:
    items = _list_field(record, field_name)
    if items is None or not _in_bounds(items, index):
        return record
    return set_field(record, field_name, items[:index] + (value,) + items[index + 1:])


# ---------------------------------------------------------------------------
# Bullet points (record → setup detail → bullet)
# ---------------------------------------------------------------------------

def _edit_bullets(record: CompatibilityRecord, setup_index: int, edit) -> CompatibilityRecord:
    details = record.setup_details
    if not _in_bounds(details, setup_index):
        return record
    entry = details[setup_index]
    bullets = edit(entry.bullet_points)
    if bullets is None:
        return record
    rebuilt = entry.edited(bullet_points=bullets)
    return set_field(
        record,
        SETUP_DETAILS,
        details[:setup_index] + (rebuilt,) + details[setup_index + 1:],
    )


def set_bullet_point(
    record: CompatibilityRecord, setup_index: int, bullet_index: int, value: str,
) -> CompatibilityRecord:
    def edit(bullets: tuple[str, ...]):
        if not _in_bounds(bullets, bullet_index):
            return None
        return bullets[:bullet_index] + (value,) + bullets[bullet_index + 1:]
    return _edit_bullets(record, setup_index, edit)


def append_bullet_point(record: CompatibilityRecord, setup_index: int) -> CompatibilityRecord:
    return _edit_bullets(record, setup_index, lambda bullets: bullets + ("",))


def remove_bullet_point(
    record: CompatibilityRecord, setup_index: int, bullet_index: int,
) -> CompatibilityRecord:
    def edit(bullets: tuple[str, ...]):
        if not _in_bounds(bullets, bullet_index):
            return None
        return bullets[:bullet_index] + bullets[bullet_index + 1:]
    return _edit_bullets(record, setup_index, edit)
