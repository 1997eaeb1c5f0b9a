import re
from typing import Optional, Sequence

from jsonsmith.core import constants as app_constants
from jsonsmith.core.json_models import Diagnosis


Lines = Sequence[str]
# Core note: this module is intentionally pure and line-oriented so the
# editor, the worker and tests reuse the same diagnostic decisions. The
# scanners are textual heuristics; they do not track string boundaries
# across lines.

_NUMERIC_TAIL_RE = re.compile(r"[\d.]$")
_BARE_PROPERTY_NAME_RE = re.compile(r'^"[^"]+"\s*$')
_KEY_BEFORE_COLON_RE = re.compile(r'"([^"]+)"\s*:')
_LINE_COLUMN_RE = re.compile(r"line (\d+) column (\d+)")
_POSITION_RE = re.compile(r"position (\d+)")
_VALUE_LITERAL_TAILS = ("true", "false", "null")


def split_lines(text: str) -> list[str]:
    return str(text or "").split("\n")


def count_unescaped_quotes(line: str) -> int:
    """Count `"` characters not consumed by a preceding backslash."""
    count = 0
    escaped = False
    for ch in line:
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
            continue
        if ch == '"':
            count += 1
    return count


def is_unterminated_message(message: str) -> bool:
    lowered = str(message or "").lower()
    return any(marker in lowered for marker in app_constants.UNTERMINATED_MESSAGE_MARKERS)


def find_unterminated_string(lines: Lines) -> Optional[Diagnosis]:
    for idx, line in enumerate(lines):
        if count_unescaped_quotes(line) % 2:
            return Diagnosis(
                line=idx + 1,
                column=len(line),
                suggestion='Add closing quote (") at the end of the string',
            )
    return None


def _ends_with_value(text: str) -> bool:
    if text.endswith(('"', "}", "]")):
        return True
    if _NUMERIC_TAIL_RE.search(text):
        return True
    return text.endswith(_VALUE_LITERAL_TAILS)


def find_missing_comma(lines: Lines) -> Optional[Diagnosis]:
    """Value-like line directly followed by a key-like line."""
    for idx in range(len(lines) - 1):
        current = lines[idx].strip()
        nxt = lines[idx + 1].strip()
        if not current or current.startswith("//"):
            continue
        if current.endswith((",", "{", "[")):
            continue
        if _ends_with_value(current) and nxt.startswith('"'):
            return Diagnosis(
                line=idx + 1,
                column=len(lines[idx]),
                suggestion=f"Add comma (,) at the end of line {idx + 1}",
            )
    return None


def find_missing_colon(lines: Lines) -> Optional[Diagnosis]:
    """Lone quoted property name with no colon on it or after it."""
    for idx in range(len(lines) - 1):
        current = lines[idx].strip()
        if not _BARE_PROPERTY_NAME_RE.match(current):
            continue
        nxt = lines[idx + 1].strip()
        if not nxt.startswith(":") and ":" not in current:
            # Column left out: the position is a guess on this path.
            return Diagnosis(line=idx + 1, suggestion="Add colon (:) after the property name")
    return None


def find_trailing_comma(lines: Lines) -> Optional[Diagnosis]:
    for idx in range(len(lines) - 1):
        current = lines[idx].strip()
        nxt = lines[idx + 1].strip()
        if current.endswith(",") and nxt in ("}", "]"):
            closer_name = "brace" if nxt == "}" else "bracket"
            return Diagnosis(
                line=idx + 1,
                suggestion=f"Remove trailing comma - not allowed before closing {closer_name}",
            )
    return None


def find_duplicate_keys(lines: Lines) -> Optional[Diagnosis]:
    """Report the first `"name":` that was already seen on an earlier line.

    Only the first key per line is considered, and quoted text inside
    multi-line string values can match too.
    """
    first_seen: dict[str, int] = {}
    for idx, line in enumerate(lines):
        match = _KEY_BEFORE_COLON_RE.search(line)
        if not match:
            continue
        key = match.group(1)
        if key in first_seen:
            return Diagnosis(
                line=idx + 1,
                suggestion=f'Duplicate key "{key}" - first occurrence was at line {first_seen[key]}',
            )
        first_seen[key] = idx + 1
    return None


def offset_to_line_column(text: str, offset: int) -> tuple[int, int]:
    """Convert an absolute character offset into a 1-based (line, column)."""
    offset = max(0, min(int(offset), len(text)))
    before = text[:offset].split("\n")
    return len(before), len(before[-1]) + 1


def position_from_message(text: str, message: str) -> Diagnosis:
    """Fallback: pull a location out of the decoder's own message."""
    message = str(message or "")
    match = _LINE_COLUMN_RE.search(message)
    if match:
        return Diagnosis(
            line=int(match.group(1)),
            column=int(match.group(2)),
            suggestion=app_constants.LOCATION_SUGGESTION,
        )
    match = _POSITION_RE.search(message)
    if match:
        line, column = offset_to_line_column(str(text or ""), int(match.group(1)))
        return Diagnosis(line=line, column=column, suggestion=app_constants.LOCATION_SUGGESTION)
    return Diagnosis(suggestion=app_constants.GENERIC_SUGGESTION)
