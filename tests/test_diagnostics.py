from jsonsmith.core import constants as app_constants
from jsonsmith.core import json_diagnostics as line_diag
from jsonsmith.core.domain_impl.json import json_diagnostics_core


def _lines(text):
    return line_diag.split_lines(text)


def test_count_unescaped_quotes_handles_escapes():
    assert line_diag.count_unescaped_quotes('"a"') == 2
    assert line_diag.count_unescaped_quotes(r'"a\"b"') == 2
    # An escaped backslash does not escape the quote after it.
    assert line_diag.count_unescaped_quotes(r'"a\\"') == 2
    assert line_diag.count_unescaped_quotes(r'"a\\\"') == 1


def test_unterminated_check_needs_a_matching_message():
    text = '{\n  "a": "open\n}'
    assert json_diagnostics_core._check_unterminated_string(text, _lines(text), "Expecting value") is None
    found = json_diagnostics_core._check_unterminated_string(text, _lines(text), "Unterminated string starting at")
    assert found.line == 2
    assert found.column == len('  "a": "open')


def test_unterminated_markers_are_case_insensitive():
    assert line_diag.is_unterminated_message("UNEXPECTED END OF JSON input")
    assert line_diag.is_unterminated_message("Invalid control character at: line 2 column 9")
    assert not line_diag.is_unterminated_message("Expecting ',' delimiter")


def test_unterminated_scan_falls_through_on_even_quotes():
    assert line_diag.find_unterminated_string(_lines('{\n  "a": "b"\n}')) is None


def test_missing_comma_after_literals_and_numbers():
    for value in ("true", "false", "null", "12", "1.5", '"x"', "{}", "[]"):
        text = '{\n  "a": %s\n  "b": 1\n}' % value
        found = line_diag.find_missing_comma(_lines(text))
        assert found is not None, value
        assert found.line == 2
        assert found.suggestion == "Add comma (,) at the end of line 2"


def test_missing_comma_skips_openers_and_comments():
    assert line_diag.find_missing_comma(_lines('{\n  "a": [\n  "b"\n]}')) is None
    assert line_diag.find_missing_comma(_lines('// note\n"a"')) is None


def test_missing_colon_reports_line_without_column():
    text = '{\n  "name"\n  1\n}'
    result = json_diagnostics_core.validate(text)
    assert result.valid is False
    assert result.error.line == 2
    assert result.error.column is None
    assert "colon" in result.error.suggestion


def test_trailing_comma_before_closer():
    result = json_diagnostics_core.validate('{\n  "a": 1,\n}')
    assert result.valid is False
    assert result.error.line == 2
    assert "trailing comma" in result.error.suggestion
    assert result.error.suggestion.endswith("brace")

    found = line_diag.find_trailing_comma(_lines("[\n  1,\n]"))
    assert found.suggestion.endswith("bracket")


def test_duplicate_key_reported_when_nothing_else_matches():
    text = '{\n  "a": 1,\n  "a": 2 3\n}'
    result = json_diagnostics_core.validate(text)
    assert result.valid is False
    assert result.error.line == 3
    assert result.error.suggestion == 'Duplicate key "a" - first occurrence was at line 2'


def test_check_order_comma_beats_duplicate_key():
    text = '{\n  "a": 1\n  "a": 2\n}'
    found = json_diagnostics_core.diagnose(text, "Expecting ',' delimiter: line 3 column 3 (char 13)")
    assert "comma" in found.suggestion
    assert found.line == 2


def test_check_order_unterminated_beats_delimiters():
    text = '{\n  "a": "b\n'
    found = json_diagnostics_core.diagnose(text, "Unterminated string starting at: line 2 column 8 (char 9)")
    assert "quote" in found.suggestion


def test_diagnosis_check_names_are_in_priority_order():
    names = [name for name, _check in json_diagnostics_core.DIAGNOSIS_CHECKS]
    assert names == [
        "unterminated_string",
        "missing_comma",
        "missing_colon",
        "delimiter_balance",
        "trailing_comma",
        "duplicate_key",
    ]


def test_fallback_uses_decoder_line_and_column():
    result = json_diagnostics_core.validate('{\n  "a": tru\n}')
    assert result.valid is False
    assert result.error.line == 2
    assert result.error.column == 8
    assert result.error.suggestion == app_constants.LOCATION_SUGGESTION


def test_fallback_converts_absolute_position():
    found = line_diag.position_from_message("ab\ncd", "Unexpected token at position 4")
    assert (found.line, found.column) == (2, 2)
    assert found.suggestion == app_constants.LOCATION_SUGGESTION


def test_fallback_without_location_is_generic():
    found = line_diag.position_from_message("x", "something odd")
    assert found.line is None
    assert found.column is None
    assert found.suggestion == app_constants.GENERIC_SUGGESTION


def test_offset_to_line_column_clamps():
    assert line_diag.offset_to_line_column("abc", 0) == (1, 1)
    assert line_diag.offset_to_line_column("abc", 99) == (1, 4)
    assert line_diag.offset_to_line_column("a\n", 2) == (2, 1)


def test_diagnose_is_pure():
    text = '{\n  "a": 1\n  "b": 2\n}'
    first = json_diagnostics_core.diagnose(text, "Expecting ',' delimiter")
    second = json_diagnostics_core.diagnose(text, "Expecting ',' delimiter")
    assert first == second
