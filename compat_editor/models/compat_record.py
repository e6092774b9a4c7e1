"""Data model for game compatibility records.

A compatibility document is a JSON array of records with PascalCase keys::

    [
      {
        "Id": "halo-2",
        "Name": "Halo 2",
        "NvidiaSupport": 0,
        "SetupDetails": [
          {"Category": "Graphics", "Details": "...", "BulletPoints": ["..."]}
        ],
        "DevOnly": false
      }
    ]

Records are immutable.  Every edit produces a new record via
:meth:`CompatibilityRecord.with_field`, so a widget holding the old object
never sees it change underneath it.

Keys this module does not know about are kept in ``extras`` and the
original key order is kept in ``key_order`` so that a load → save cycle
writes the document back the way it was read.  Known keys holding a value
of another type (``"Id": 12``, ``"Genre": null``, an out-of-range status)
are read as the nearest typed value, but the original is kept in ``raw``
and written back until that field is edited.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Optional

from loguru import logger


class _OrdinalEnum(IntEnum):
    """Integer-coded enumeration whose last member is ``UNKNOWN``."""

    @classmethod
    def parse(cls, raw: Any) -> Optional["_OrdinalEnum"]:
        """Return the member for *raw* (int or integer text), else ``None``.

        Non-numeric, empty and out-of-range input are all rejected; nothing
        is coerced to ``UNKNOWN``.
        """
        if isinstance(raw, bool):
            return None
        if isinstance(raw, str):
            raw = raw.strip()
            try:
                raw = int(raw)
            except ValueError:
                return None
        if not isinstance(raw, int):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class SupportStatus(_OrdinalEnum):
    """How well a game runs on a given GPU vendor, or overall."""

    PERFECT = 0
    GREAT = 1
    ISSUES = 2
    UNPLAYABLE = 3
    UNKNOWN = 4


class MultiplayerType(_OrdinalEnum):
    """Kind of multiplayer the game offers."""

    NONE = 0
    LOCAL = 1
    LAN = 2
    ONLINE = 3
    UNKNOWN = 4

    @property
    def label(self) -> str:
        return "LAN" if self is MultiplayerType.LAN else super().label


# ---------------------------------------------------------------------------
# Helpers shared by records and their nested entries
# ---------------------------------------------------------------------------

def _split(data: dict[str, Any], known: tuple[str, ...]) -> tuple[dict[str, Any], tuple[str, ...]]:
    """Return ``(extras, key_order)`` for a raw JSON object."""
    extras = {k: v for k, v in data.items() if k not in known}
    return extras, tuple(data.keys())


def _dump(known: dict[str, Any], extras: dict[str, Any], key_order: tuple[str, ...]) -> dict[str, Any]:
    """Merge known and unknown keys back together in document order.

    Keys listed in *key_order* come first, in that order.  Known keys that
    were never part of the document are skipped.  Extras added after load
    go last.
    """
    out: dict[str, Any] = {}
    for key in key_order:
        if key in known:
            out[key] = known[key]
        elif key in extras:
            out[key] = extras[key]
    for key, value in extras.items():
        if key not in out:
            out[key] = value
    return out


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _enum(enum_cls: type[_OrdinalEnum], raw: Any, key: str) -> _OrdinalEnum:
    if raw is None:
        return enum_cls.UNKNOWN
    member = enum_cls.parse(raw)
    if member is None:
        logger.warning("Invalid {} value {!r}, using Unknown", key, raw)
        return enum_cls.UNKNOWN
    return member


def _strings(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(_text(v) for v in raw)


def _edited(entry: Any, attr_keys: dict[str, str], changes: dict[str, Any]) -> Any:
    added = tuple(
        attr_keys[a] for a in changes if attr_keys[a] not in entry.key_order
    )
    return replace(entry, key_order=entry.key_order + added, **changes)


_SETUP_ATTRS = {"category": "Category", "details": "Details", "bullet_points": "BulletPoints"}
_ISSUE_ATTRS = {"question": "Question", "answer": "Answer"}


# ---------------------------------------------------------------------------
# Nested entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetupDetail:
    """One setup step: a category, free text and a list of bullet points."""

    category: str = ""
    details: str = ""
    bullet_points: tuple[str, ...] = ()
    extras: dict[str, Any] = field(default_factory=dict)
    key_order: tuple[str, ...] = ("Category", "Details", "BulletPoints")

    KEYS = ("Category", "Details", "BulletPoints")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SetupDetail:
        extras, order = _split(data, cls.KEYS)
        return cls(
            category=_text(data.get("Category")),
            details=_text(data.get("Details")),
            bullet_points=_strings(data.get("BulletPoints")),
            extras=extras,
            key_order=order,
        )

    def to_dict(self) -> dict[str, Any]:
        known = {
            "Category": self.category,
            "Details": self.details,
            "BulletPoints": list(self.bullet_points),
        }
        return _dump(known, self.extras, self.key_order)

    def edited(self, **changes: Any) -> SetupDetail:
        """Copy with attribute *changes*; edited keys become part of the document."""
        if "bullet_points" in changes:
            changes["bullet_points"] = tuple(changes["bullet_points"])
        return _edited(self, _SETUP_ATTRS, changes)


@dataclass(frozen=True)
class CommonIssue:
    """A question / answer pair shown in the record's FAQ."""

    question: str = ""
    answer: str = ""
    extras: dict[str, Any] = field(default_factory=dict)
    key_order: tuple[str, ...] = ("Question", "Answer")

    KEYS = ("Question", "Answer")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommonIssue:
        extras, order = _split(data, cls.KEYS)
        return cls(
            question=_text(data.get("Question")),
            answer=_text(data.get("Answer")),
            extras=extras,
            key_order=order,
        )

    def to_dict(self) -> dict[str, Any]:
        known = {"Question": self.question, "Answer": self.answer}
        return _dump(known, self.extras, self.key_order)

    def edited(self, **changes: Any) -> CommonIssue:
        return _edited(self, _ISSUE_ATTRS, changes)


def _entries(raw: Any, entry_cls: type) -> tuple:
    if not isinstance(raw, (list, tuple)):
        return ()
    out = []
    for item in raw:
        if isinstance(item, entry_cls):
            out.append(item)
        elif isinstance(item, dict):
            out.append(entry_cls.from_dict(item))
        else:
            out.append(entry_cls())
    return tuple(out)


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------

# Document key → (attribute name, kind)
RECORD_FIELDS: dict[str, tuple[str, str]] = {
    "Id": ("id", "text"),
    "Name": ("name", "text"),
    "Hardware": ("hardware", "text"),
    "Description": ("description", "text"),
    "IconUrl": ("icon_url", "text"),
    "Genre": ("genre", "text"),
    "MultiplayerType": ("multiplayer_type", "multiplayer"),
    "MultiplayerDetails": ("multiplayer_details", "optional_text"),
    "NvidiaSupport": ("nvidia_support", "support"),
    "AmdSupport": ("amd_support", "support"),
    "IntelSupport": ("intel_support", "support"),
    "SetupDetails": ("setup_details", "setup_details"),
    "CommonIssues": ("common_issues", "common_issues"),
    "FeaturesNotEmulated": ("features_not_emulated", "strings"),
    "OverallStatus": ("overall_status", "support"),
    "DevOnly": ("dev_only", "bool"),
}

ENUM_FIELDS: dict[str, type[_OrdinalEnum]] = {
    key: (MultiplayerType if kind == "multiplayer" else SupportStatus)
    for key, (_, kind) in RECORD_FIELDS.items()
    if kind in ("support", "multiplayer")
}

LIST_FIELDS: tuple[str, ...] = tuple(
    key for key, (_, kind) in RECORD_FIELDS.items()
    if kind in ("strings", "setup_details", "common_issues")
)


def coerce_field(key: str, value: Any) -> Any:
    """Convert *value* into the Python type stored for document key *key*.

    Unknown keys are returned unchanged.  The caller is responsible for
    passing something sensible; this never cross-validates fields.
    """
    entry = RECORD_FIELDS.get(key)
    if entry is None:
        return value
    kind = entry[1]
    if kind == "text":
        return _text(value)
    if kind == "optional_text":
        return None if value is None else str(value)
    if kind == "bool":
        return bool(value)
    if kind in ("support", "multiplayer"):
        return _enum(ENUM_FIELDS[key], value, key)
    if kind == "strings":
        return _strings(value)
    if kind == "setup_details":
        return _entries(value, SetupDetail)
    if kind == "common_issues":
        return _entries(value, CommonIssue)
    return value


def export_field(key: str, value: Any) -> Any:
    """Inverse of :func:`coerce_field`: the JSON value for a stored field."""
    kind = RECORD_FIELDS[key][1]
    if kind in ("support", "multiplayer"):
        return int(value)
    if kind == "strings":
        return list(value)
    if kind in ("setup_details", "common_issues"):
        return [entry.to_dict() for entry in value]
    return value


def _same(a: Any, b: Any) -> bool:
    """JSON equality that also tells ``1`` from ``True`` and ``1`` from ``1.0``."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return list(a) == list(b) and all(_same(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return len(a) == len(b) and all(_same(x, y) for x, y in zip(a, b))
    return a == b


@dataclass(frozen=True)
class CompatibilityRecord:
    """One game's compatibility entry."""

    id: str = ""
    name: str = ""
    hardware: str = ""
    description: str = ""
    icon_url: str = ""
    genre: str = ""
    multiplayer_type: MultiplayerType = MultiplayerType.UNKNOWN
    multiplayer_details: Optional[str] = None
    nvidia_support: SupportStatus = SupportStatus.UNKNOWN
    amd_support: SupportStatus = SupportStatus.UNKNOWN
    intel_support: SupportStatus = SupportStatus.UNKNOWN
    setup_details: tuple[SetupDetail, ...] = ()
    common_issues: tuple[CommonIssue, ...] = ()
    features_not_emulated: tuple[str, ...] = ()
    overall_status: SupportStatus = SupportStatus.UNKNOWN
    dev_only: bool = False
    extras: dict[str, Any] = field(default_factory=dict)
    """Keys not listed in :data:`RECORD_FIELDS`, preserved verbatim."""
    key_order: tuple[str, ...] = ()
    """Document key order; known keys outside it are not written."""
    raw: dict[str, Any] = field(default_factory=dict)
    """Known keys whose document value had another type, written back
    verbatim until the field is edited."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompatibilityRecord:
        extras, order = _split(data, tuple(RECORD_FIELDS))
        values: dict[str, Any] = {}
        raw: dict[str, Any] = {}
        for key, (attr, _) in RECORD_FIELDS.items():
            if key not in data:
                continue
            value = coerce_field(key, data[key])
            values[attr] = value
            if not _same(export_field(key, value), data[key]):
                logger.debug("Keeping {} as written: {!r}", key, data[key])
                raw[key] = data[key]
        return cls(extras=extras, key_order=order, raw=raw, **values)

    @classmethod
    def blank(cls, record_id: str | None = None) -> CompatibilityRecord:
        """A new record with every known key present."""
        return cls(
            id=record_id or uuid.uuid4().hex[:12],
            name="New Game",
            key_order=tuple(RECORD_FIELDS),
        )

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get_field(self, key: str, default: Any = None) -> Any:
        entry = RECORD_FIELDS.get(key)
        if entry is None:
            return self.extras.get(key, default)
        return getattr(self, entry[0])

    def has_field(self, key: str) -> bool:
        return key in self.key_order or key in self.extras

    def with_field(self, key: str, value: Any) -> CompatibilityRecord:
        """Return a copy with document key *key* set to *value*."""
        order = self.key_order if key in self.key_order else self.key_order + (key,)
        entry = RECORD_FIELDS.get(key)
        if entry is None:
            extras = dict(self.extras)
            extras[key] = list(value) if isinstance(value, tuple) else value
            return replace(self, extras=extras, key_order=order)
        raw = {k: v for k, v in self.raw.items() if k != key}
        return replace(self, key_order=order, raw=raw, **{entry[0]: coerce_field(key, value)})

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        known: dict[str, Any] = {}
        for key, (attr, _) in RECORD_FIELDS.items():
            if key in self.raw:
                known[key] = self.raw[key]
            else:
                known[key] = export_field(key, getattr(self, attr))
        return _dump(known, self.extras, self.key_order)

    @property
    def sort_key(self) -> str:
        return self.name.casefold()
