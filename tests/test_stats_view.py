import pytest

from jsonsmith.core.domain_impl.json import json_view_core
from jsonsmith.core.json_models import DiffEntry, JsonError, JsonStats
from jsonsmith.services import error_service
from jsonsmith.services.json_engine import JSON_ENGINE


def test_stats_keys_and_depth():
    stats = JSON_ENGINE.get_stats('{"a":{"b":1,"c":2}}')
    assert (stats.keys, stats.depth) == (3, 2)


def test_stats_count_keys_inside_arrays():
    stats = JSON_ENGINE.get_stats('[{"a": 1}, {"a": 2, "b": [[]]}]')
    assert stats.keys == 3
    assert stats.depth == 3


def test_stats_for_scalar_and_invalid_input():
    assert JSON_ENGINE.get_stats("7").to_dict() == {"keys": 0, "depth": 0, "size": "1 B"}
    assert JSON_ENGINE.get_stats('{"a":').to_dict() == {"keys": 0, "depth": 0, "size": "5 B"}
    assert JSON_ENGINE.get_stats("").to_dict() == {"keys": 0, "depth": 0, "size": "0 B"}


def test_stats_size_counts_utf8_bytes():
    assert JSON_ENGINE.get_stats('"é"').size == "4 B"


@pytest.mark.parametrize(
    ("num_bytes", "expected"),
    [
        (0, "0 B"),
        (512, "512 B"),
        (1023, "1023 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (5 * 1024 * 1024 * 1024, "5120 MB"),
    ],
)
def test_format_bytes(num_bytes, expected):
    assert json_view_core.format_bytes(num_bytes) == expected


def test_status_texts():
    assert json_view_core.stats_text(JsonStats(3, 2, "19 B")) == "Keys: 3 | Depth: 2 | Size: 19 B"
    assert json_view_core.error_location_text(JsonError("m", line=2, column=5)) == "Line 2, Col 5"
    assert json_view_core.error_location_text(JsonError("m", line=2)) == "Line 2"
    assert json_view_core.error_location_text(JsonError("m")) == ""


def test_diff_row_text():
    assert json_view_core.diff_row_text(DiffEntry.added("a[0]", {"x": 1})) == 'a[0]: + {"x": 1}'
    assert json_view_core.diff_row_text(DiffEntry.removed("b", None)) == "b: - null"
    assert json_view_core.diff_row_text(DiffEntry.changed("", 1, "1")) == '(root): 1 -> "1"'
    assert json_view_core.diff_summary_text([]) == "No differences found"
    assert json_view_core.diff_summary_text([DiffEntry.added("a", 1)]) == "1 difference found"


def test_error_payload_for_invalid_result():
    payload = error_service.build_error_payload(JSON_ENGINE.validate('{\n  "a": 1\n  "b": 2\n}'))
    assert payload["title"] == "Invalid JSON"
    assert payload["line"] == 2
    assert payload["location"].startswith("Line 2")
    assert "comma" in payload["suggestion"]
    assert error_service.build_error_payload(JSON_ENGINE.validate("{}")) is None


def test_error_line_range_is_clamped():
    assert error_service.error_line_range(2, 10) == ("2.0", "2.0 lineend")
    assert error_service.error_line_range(50, 3) == ("3.0", "3.0 lineend")
    assert error_service.error_line_range(None, 3) is None
    assert error_service.error_line_range(1, 0) is None


def test_palettes():
    light = error_service.current_palette("LIGHT")
    dark = error_service.current_palette("unknown")
    assert light is not dark
    assert error_service.error_marker_colors(dark) == (dark["error_line_bg"], dark["error_line_fg"])
    assert error_service.diff_row_color(light, "added") == light["added_fg"]
    assert error_service.diff_row_color(light, "unchanged") == light["fg"]
