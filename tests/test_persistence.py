"""Document load / save round-trip."""

import json

import pytest

from compat_editor.core.exceptions import ParseError, ReadError, WriteError
from compat_editor.core.persistence import (
    load_document,
    parse_document,
    save_document,
    serialize_document,
)
from compat_editor.models.compat_record import SupportStatus

from conftest import SAMPLE_RECORDS, ReadOnlyFileSystem


def test_load_sorts_case_insensitively():
    text = json.dumps([{"Name": "Banana"}, {"Name": "apple"}, {"Name": "Cherry"}])
    records = parse_document(text)
    assert [r.name for r in records] == ["apple", "Banana", "Cherry"]


def test_load_backfills_dev_only():
    text = json.dumps([{"Name": "a"}, {"Name": "b", "DevOnly": True}])
    first, second = parse_document(text)
    assert first.dev_only is False
    assert first.to_dict()["DevOnly"] is False
    assert second.dev_only is True


@pytest.mark.parametrize("text", ["{not json", '{"Name": "x"}', "42", '[{"Name": "a"}, 3]'])
def test_parse_errors(text):
    with pytest.raises(ParseError):
        parse_document(text, "doc.json")


def test_load_missing_file_raises_read_error(tmp_path):
    with pytest.raises(ReadError):
        load_document(tmp_path / "missing.json")


def test_serialize_formatting_and_order(sample_text):
    records = parse_document(sample_text)
    text = serialize_document(records)
    assert text.startswith('[\n  {\n    "Name": "apple"')
    assert text.endswith("]\n")
    data = json.loads(text)
    assert [d["Name"] for d in data] == ["apple", "Banana", "Cherry"]
    banana = data[1]
    assert banana["NvidiaSupport"] == 0 and banana["IntelSupport"] == 2
    assert list(banana) == list(SAMPLE_RECORDS[0])


def test_serialize_does_not_resort(sample_text):
    records = parse_document(sample_text)
    reordered = [records[2], records[0], records[1]]
    data = json.loads(serialize_document(reordered))
    assert [d["Name"] for d in data] == ["Cherry", "apple", "Banana"]


def test_round_trip_preserves_content_and_unknown_fields(tmp_path, sample_text):
    path = tmp_path / "out" / "compatibility.json"
    records = parse_document(sample_text)
    save_document(path, records, create_parent=True)
    reloaded = load_document(path)
    assert reloaded == records

    by_id = {d["Id"]: d for d in json.loads(path.read_text(encoding="utf-8"))}
    original = {d["Id"]: d for d in SAMPLE_RECORDS}
    assert json.dumps(by_id["banana-rally"]["ReviewedBy"]) == json.dumps(original["banana-rally"]["ReviewedBy"])
    assert by_id["apple-quest"]["Extra"] == 42
    assert by_id["banana-rally"]["SetupDetails"][1]["Note"] == "kept"
    assert by_id["banana-rally"]["MultiplayerDetails"] is None


def test_saved_file_matches_original_apart_from_backfill(tmp_path, sample_text):
    path = tmp_path / "compatibility.json"
    save_document(path, parse_document(sample_text))
    saved = {d["Id"]: d for d in json.loads(path.read_text(encoding="utf-8"))}
    for original in SAMPLE_RECORDS:
        expected = dict(original)
        expected.setdefault("DevOnly", False)
        assert saved[original["Id"]] == expected


def test_save_failure_raises_write_error(tmp_path, sample_text):
    path = tmp_path / "compatibility.json"
    with pytest.raises(WriteError):
        save_document(path, parse_document(sample_text), ReadOnlyFileSystem())
    assert not path.exists()


def test_enum_values_survive_round_trip(sample_text):
    records = parse_document(serialize_document(parse_document(sample_text)))
    cherry = records[2]
    assert cherry.overall_status is SupportStatus.UNPLAYABLE


LONE_SURROGATE_DOC = r'[{"Name": "A", "Description": "bad \ud800 char"}]'


def test_unencodable_text_leaves_existing_file_intact(tmp_path):
    path = tmp_path / "compatibility.json"
    path.write_text(LONE_SURROGATE_DOC, encoding="utf-8")
    records = parse_document(path.read_text(encoding="utf-8"))

    with pytest.raises(WriteError):
        save_document(path, records)

    assert path.read_text(encoding="utf-8") == LONE_SURROGATE_DOC
    assert [p.name for p in tmp_path.iterdir()] == ["compatibility.json"]


def test_save_replaces_file_without_leftovers(tmp_path, sample_text):
    path = tmp_path / "compatibility.json"
    path.write_text("[]", encoding="utf-8")
    save_document(path, parse_document(sample_text))
    assert len(json.loads(path.read_text(encoding="utf-8"))) == 3
    assert [p.name for p in tmp_path.iterdir()] == ["compatibility.json"]


def test_save_into_missing_directory_fails(tmp_path, sample_text):
    path = tmp_path / "gone" / "compatibility.json"
    with pytest.raises(WriteError):
        save_document(path, parse_document(sample_text))
    assert not path.parent.exists()


def test_mistyped_values_survive_round_trip():
    data = [{"Id": 12, "Name": "A", "Genre": None, "OverallStatus": 7,
             "SetupDetails": ["oops"], "FeaturesNotEmulated": None, "DevOnly": False}]
    assert json.loads(serialize_document(parse_document(json.dumps(data)))) == data
