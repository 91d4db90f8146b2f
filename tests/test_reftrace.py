import pytest

from errors import ConfigurationError, TraceFormatError
from reftrace import decode_entry, decode_trace, load_trace, parse_trace


def test_parse_trace_keeps_header_and_terminator():
    doc = parse_trace([".benchmark testcase1\n", "00000001\n", "00000010\n", ".end\n", "ignored\n"])
    assert doc.header == ".benchmark testcase1"
    assert doc.terminator == ".end"
    assert doc.entries == ["00000001", "00000010"]
    assert len(doc) == 2


def test_parse_trace_skips_blank_lines():
    doc = parse_trace(["", ".benchmark t", "00000001", "  ", ".end"])
    assert doc.entries == ["00000001"]


def test_parse_empty_trace():
    doc = parse_trace([".benchmark empty", ".end"])
    assert doc.entries == []


def test_custom_markers():
    doc = parse_trace(["# trace start", "0101", "# stop"], header_marker="start", terminator_marker="stop")
    assert doc.entries == ["0101"]


def test_missing_header():
    with pytest.raises(TraceFormatError):
        parse_trace(["00000001", ".end"])


def test_missing_terminator():
    with pytest.raises(TraceFormatError):
        parse_trace([".benchmark t", "00000001"])


def test_decode_entry_drops_offset_and_reverses(geometry):
    assert decode_entry("00000001", geometry) == "000000"
    assert decode_entry("10110011", geometry) == "001101"


def test_decode_entry_wrong_width(geometry):
    with pytest.raises(TraceFormatError) as exc:
        decode_entry("0000001", geometry, index=3)
    assert exc.value.index == 3


def test_decode_entry_non_binary(geometry):
    with pytest.raises(TraceFormatError):
        decode_entry("0000000x", geometry)


def test_decode_trace_reports_entry_index(geometry):
    decoded = decode_trace(["00000001", "0000201", "00000011"], geometry)
    assert next(decoded) == "000000"
    with pytest.raises(TraceFormatError) as exc:
        next(decoded)
    assert exc.value.index == 1


def test_decode_trace_preserves_order(geometry):
    entries = ["11000000", "00000000", "01000000"]
    assert list(decode_trace(entries, geometry)) == ["000011", "000000", "000010"]


def test_load_trace(tmp_path):
    path = tmp_path / "ref.lst"
    path.write_text(".benchmark t\n00000001\n.end\n")
    assert load_trace(str(path)).entries == ["00000001"]


def test_load_trace_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_trace(str(tmp_path / "missing.lst"))


def test_parse_trace_keeps_original_text():
    doc = parse_trace([".benchmark t\n", "  00000001 \r\n", ".end\n"])
    assert doc.entries == ["  00000001 "]


def test_decode_entry_ignores_surrounding_whitespace(geometry):
    assert decode_entry("  10110011 ", geometry) == "001101"
