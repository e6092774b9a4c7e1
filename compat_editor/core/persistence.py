"""JSON round-trip for compatibility documents.

Loading backfills ``DevOnly`` and sorts by name (case-insensitive).  Saving
writes records in their current order with two-space indentation and the
key order each record was read with, so the file diffs cleanly.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from loguru import logger

from compat_editor.core.exceptions import ParseError
from compat_editor.core.host import FileSystem
from compat_editor.models.compat_record import CompatibilityRecord


def parse_document(text: str, source: object = "<document>") -> list[CompatibilityRecord]:
    """Parse document *text* into records in canonical (name) order."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ParseError(source, f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ParseError(source, f"expected a JSON array, got {type(data).__name__}")

    records: list[CompatibilityRecord] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ParseError(source, f"element {i} is not an object")
        record = CompatibilityRecord.from_dict(item)
        if "DevOnly" not in item:
            record = record.with_field("DevOnly", False)
        records.append(record)

    records.sort(key=lambda r: r.sort_key)
    return records


def serialize_document(records: Iterable[CompatibilityRecord]) -> str:
    """Render *records* as document text, in the order given."""
    payload = [r.to_dict() for r in records]
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def load_document(path: Path, fs: FileSystem | None = None) -> list[CompatibilityRecord]:
    """Read and parse the document at *path*.

    Raises
    ------
    ReadError  if the file cannot be read.
    ParseError if its content is not a JSON array of objects.
    """
    fs = fs or FileSystem()
    text = fs.read_text(path)
    records = parse_document(text, path)
    logger.info("Loaded {} records from {}", len(records), path)
    return records


def save_document(
    path: Path,
    records: Iterable[CompatibilityRecord],
    fs: FileSystem | None = None,
    create_parent: bool = False,
) -> None:
    """Write *records* to *path*; raises :class:`WriteError` on failure.

    The text is rendered before anything touches the disk and the
    filesystem replaces the file in one step, so a failed save leaves the
    previous document as it was.  A missing parent directory is an error
    unless *create_parent* is set (Save As to a new folder).
    """
    fs = fs or FileSystem()
    records = list(records)
    text = serialize_document(records)
    if create_parent:
        fs.ensure_dir(path.parent)
    fs.write_text(path, text)
    logger.info("Saved {} records to {}", len(records), path)
