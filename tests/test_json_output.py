import base64
import io
import json
import math

import pytest

from porytools.json_output import (
    ArchiveError,
    IndentChar,
    JSONOutputArchive,
    OutputOptions,
)


def _make(options=None):
    buf = io.StringIO()
    return buf, JSONOutputArchive(buf, options)


def _save_named(archive, name, value):
    archive.set_next_name(name)
    archive.write_name()
    archive.save_value(value)


def test_pretty_layout_of_single_member():
    buf, archive = _make()
    _save_named(archive, "a", 1)
    archive.close()
    assert buf.getvalue() == '{\n    "a": 1\n}'


def test_no_indent_keeps_line_breaks():
    buf, archive = _make(OutputOptions.no_indent())
    _save_named(archive, "a", 1)
    archive.close()
    assert buf.getvalue() == '{\n"a": 1\n}'


def test_tab_indentation():
    buf, archive = _make(OutputOptions(indent_char=IndentChar.TAB, indent_length=1))
    _save_named(archive, "a", 1)
    archive.close()
    assert '\n\t"a": 1' in buf.getvalue()


def test_multiple_members_round_trip():
    buf, archive = _make()
    _save_named(archive, "name", "pokeemerald")
    _save_named(archive, "dual", False)
    _save_named(archive, "cutoff", 2)
    _save_named(archive, "nothing", None)
    archive.close()
    assert json.loads(buf.getvalue()) == {
        "name": "pokeemerald",
        "dual": False,
        "cutoff": 2,
        "nothing": None,
    }


def test_nested_node():
    buf, archive = _make()
    archive.set_next_name("outer")
    archive.start_node()
    _save_named(archive, "x", 5)
    archive.finish_node()
    archive.close()
    assert json.loads(buf.getvalue()) == {"outer": {"x": 5}}


def test_empty_node_becomes_empty_object():
    buf, archive = _make()
    archive.set_next_name("n")
    archive.start_node()
    archive.finish_node()
    archive.close()
    text = buf.getvalue()
    assert json.loads(text) == {"n": {}}
    assert '"n": {}' in text


def test_array_node_has_no_names():
    buf, archive = _make()
    archive.set_next_name("list")
    archive.start_node()
    archive.make_array()
    for value in [1, 2, 3]:
        archive.write_name()
        archive.save_value(value)
    archive.finish_node()
    archive.close()
    assert json.loads(buf.getvalue()) == {"list": [1, 2, 3]}


def test_empty_array_node():
    buf, archive = _make()
    archive.set_next_name("xs")
    archive.start_node()
    archive.make_array()
    archive.finish_node()
    archive.close()
    assert json.loads(buf.getvalue()) == {"xs": []}


def test_unnamed_values_get_counted_names():
    buf, archive = _make()
    archive.write_name()
    archive.save_value(10)
    archive.write_name()
    archive.save_value(20)
    archive.close()
    data = json.loads(buf.getvalue())
    assert list(data) == ["value0", "value1"]
    assert list(data.values()) == [10, 20]


def test_name_counter_is_per_node():
    buf, archive = _make()
    archive.write_name()
    archive.save_value(1)
    archive.start_node()
    archive.write_name()
    archive.save_value(2)
    archive.finish_node()
    archive.close()
    data = json.loads(buf.getvalue())
    assert data["value0"] == 1
    assert data["value1"] == {"value0": 2}


def test_string_escaping_round_trips():
    text = 'quote " slash \\ newline \n tab \t ctrl \x01 accent é'
    buf, archive = _make()
    _save_named(archive, "s", text)
    archive.close()
    raw = buf.getvalue()
    assert "\x01" not in raw
    assert "é" in raw
    assert json.loads(raw)["s"] == text


@pytest.mark.parametrize(
    "value", [1.0, 0.1, -2.5, 1e16, 1e21, 1e22, 1e-7, 123456.789, 3.14159, 1e300]
)
def test_floats_round_trip(value):
    buf, archive = _make()
    _save_named(archive, "f", value)
    archive.close()
    raw = buf.getvalue()
    assert "e+" not in raw
    assert json.loads(raw)["f"] == value


def test_whole_float_keeps_decimal_point():
    buf, archive = _make()
    _save_named(archive, "f", 1.0)
    archive.close()
    assert f'"f": {1.0}' in buf.getvalue()


def test_precision_truncates_decimals():
    buf, archive = _make(OutputOptions(precision=3))
    _save_named(archive, "f", 0.123456)
    archive.close()
    assert json.loads(buf.getvalue())["f"] == 0.123


def test_non_finite_floats():
    buf, archive = _make()
    _save_named(archive, "inf", math.inf)
    _save_named(archive, "ninf", -math.inf)
    _save_named(archive, "nan", math.nan)
    archive.close()
    data = json.loads(buf.getvalue())
    assert data["inf"] == math.inf
    assert data["ninf"] == -math.inf
    assert math.isnan(data["nan"])


def test_huge_int_saved_as_string():
    big = 2**70
    buf, archive = _make()
    _save_named(archive, "big", big)
    _save_named(archive, "max", 2**64 - 1)
    archive.close()
    data = json.loads(buf.getvalue())
    assert data["big"] == str(big)
    assert data["max"] == 2**64 - 1


def test_binary_value_is_base64():
    payload = b"\x00\x01hello\xff"
    buf, archive = _make()
    archive.save_binary_value(payload, "blob")
    archive.close()
    assert base64.b64decode(json.loads(buf.getvalue())["blob"]) == payload


def test_context_manager_closes_document():
    buf = io.StringIO()
    with JSONOutputArchive(buf) as archive:
        _save_named(archive, "k", "v")
    assert json.loads(buf.getvalue()) == {"k": "v"}


def test_close_is_idempotent():
    buf, archive = _make()
    _save_named(archive, "k", 1)
    archive.close()
    first = buf.getvalue()
    archive.close()
    assert buf.getvalue() == first


def test_nothing_written_gives_empty_output():
    buf, archive = _make()
    archive.close()
    assert buf.getvalue() == ""


def test_write_after_close_raises():
    buf, archive = _make()
    _save_named(archive, "k", 1)
    archive.close()
    assert json.loads(buf.getvalue()) == {"k": 1}
    with pytest.raises(ArchiveError):
        _save_named(archive, "j", 2)


def test_unsupported_type_raises():
    _, archive = _make()
    archive.set_next_name("x")
    archive.write_name()
    with pytest.raises(TypeError):
        archive.save_value(object())


def test_finish_node_without_open_node_raises():
    _, archive = _make()
    with pytest.raises(ArchiveError):
        archive.finish_node()


def test_second_root_value_raises():
    buf, archive = _make()
    archive.save_value(1)
    assert buf.getvalue() == "1"
    with pytest.raises(ArchiveError):
        archive.save_value(2)


def test_non_string_member_name_raises():
    _, archive = _make()
    _save_named(archive, "a", 1)
    with pytest.raises(ArchiveError):
        archive.save_value(2)


@pytest.mark.parametrize("kwargs", [{"precision": 0}, {"indent_length": -1}])
def test_invalid_options_raise(kwargs):
    with pytest.raises(ValueError):
        OutputOptions(**kwargs)


def test_option_presets():
    assert OutputOptions.default() == OutputOptions()
    assert OutputOptions.no_indent().indent_length == 0
    assert OutputOptions.no_indent().precision == OutputOptions.default().precision