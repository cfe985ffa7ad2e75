import io
import json

import pytest

from porytools.json_input import JSONInputArchive
from porytools.json_output import ArchiveError, JSONOutputArchive
from porytools.serialize import (
    load,
    load_node,
    load_sequence,
    save,
    save_node,
    save_sequence,
)


def _write(writer) -> str:
    stream = io.StringIO()
    with JSONOutputArchive(stream) as archive:
        writer(archive)
    return stream.getvalue()


def _reader(text: str) -> JSONInputArchive:
    return JSONInputArchive(io.StringIO(text))


def test_single_named_value_layout():
    text = _write(lambda ar: save(ar, 5, "x"))
    assert text == '{\n    "x": 5\n}'


def test_unnamed_values_get_generated_names():
    def writer(ar):
        save(ar, 1)
        save(ar, "two")

    document = json.loads(_write(writer))
    assert list(document) == ["value0", "value1"]
    assert document["value1"] == "two"


def test_scalar_round_trip_in_order():
    values = [True, -7, 2.5, "text", None]

    def writer(ar):
        for value in values:
            save(ar, value)

    archive = _reader(_write(writer))
    assert [load(archive) for _ in values] == values


def test_load_by_name_out_of_order():
    def writer(ar):
        save(ar, 1, "a")
        save(ar, 2, "b")
        save(ar, 3, "c")

    archive = _reader(_write(writer))
    assert load(archive, "c") == 3
    assert load(archive, "a") == 1
    assert load(archive) == 2


def test_load_missing_name_raises():
    archive = _reader(_write(lambda ar: save(ar, 1, "a")))
    with pytest.raises(ArchiveError):
        load(archive, "missing")


def test_node_round_trip():
    def writer(ar):
        def members(inner):
            save(inner, "pokeemerald", "game")
            save(inner, 4, "level")

        save_node(ar, "settings", members)
        save(ar, True, "after")

    text = _write(writer)
    assert json.loads(text)["settings"] == {"game": "pokeemerald", "level": 4}

    archive = _reader(text)
    result = load_node(archive, "settings", lambda a: (load(a, "level"), load(a, "game")))
    assert result == (4, "pokeemerald")
    assert load(archive) is True


def test_sequence_round_trip():
    items = [1, 2, 3, "four"]
    text = _write(lambda ar: save_sequence(ar, "items", items))
    assert json.loads(text) == {"items": items}
    assert load_sequence(_reader(text), "items") == items


def test_empty_sequence_round_trip():
    text = _write(lambda ar: save_sequence(ar, "empty", []))
    assert json.loads(text) == {"empty": []}
    assert load_sequence(_reader(text), "empty") == []


def test_sequence_then_value_keeps_position():
    def writer(ar):
        save_sequence(ar, None, [9, 8])
        save(ar, "tail")

    archive = _reader(_write(writer))
    assert load_sequence(archive) == [9, 8]
    assert load(archive) == "tail"


def test_mapping_and_list_values_saved_as_object_and_array():
    value = {"name": "x", "flags": [True, False], "inner": {"n": 1}}
    text = _write(lambda ar: save(ar, value, "root"))
    assert json.loads(text) == {"root": value}


def test_bytes_round_trip_via_binary_value():
    payload = b"\x00\x01tiles"
    text = _write(lambda ar: save(ar, payload, "blob"))
    archive = _reader(text)
    assert archive.load_binary_value(len(payload), "blob") == payload


def test_unsupported_type_raises():
    with pytest.raises(TypeError):
        _write(lambda ar: save(ar, object(), "bad"))


def test_mapping_with_non_string_keys_raises():
    with pytest.raises(TypeError):
        _write(lambda ar: save(ar, {1: "a"}, "bad"))


def test_load_value_on_node_raises():
    text = _write(lambda ar: save_sequence(ar, "items", [1]))
    with pytest.raises(ArchiveError):
        load(_reader(text), "items")