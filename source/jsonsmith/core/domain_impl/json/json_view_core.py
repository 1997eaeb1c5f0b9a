"""Consolidated JSON domain pillar: json_view_core.

Document stats plus the plain-text rendering the editor status bar and the
compare window show. No widget code lives here.
"""

import json
from typing import Any, Iterable, Optional

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.json import json_io_core
from jsonsmith.core.json_models import DiffEntry, JsonError, JsonStats, ValidationResult


def byte_length(text: Any) -> int:
    return len(str(text or "").encode("utf-8", errors="surrogatepass"))


def format_bytes(num_bytes: int) -> str:
    """Binary steps, one decimal, trailing `.0` dropped: `1.5 KB`, `2 MB`."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    idx = 0
    while value >= app_constants.SIZE_STEP and idx < len(app_constants.SIZE_UNITS) - 1:
        value /= app_constants.SIZE_STEP
        idx += 1
    number = f"{value:.1f}"
    if number.endswith(".0"):
        number = number[:-2]
    return f"{number} {app_constants.SIZE_UNITS[idx]}"


def get_stats(text: str) -> JsonStats:
    """Key count and max nesting depth; size is always from the raw text."""
    size = format_bytes(byte_length(text))
    usable, value = json_io_core.gated_value(text)
    if not usable:
        return JsonStats(keys=0, depth=0, size=size)
    keys = 0
    max_depth = 0
    pending = [(value, 0)]
    while pending:
        node, depth = pending.pop()
        max_depth = max(max_depth, depth)
        if isinstance(node, list):
            pending.extend((item, depth + 1) for item in node)
        elif isinstance(node, dict):
            keys += len(node)
            pending.extend((child, depth + 1) for child in node.values())
    return JsonStats(keys=keys, depth=max_depth, size=size)


def stats_text(stats: JsonStats) -> str:
    return f"Keys: {stats.keys} | Depth: {stats.depth} | Size: {stats.size}"


def validity_text(result: ValidationResult) -> str:
    return "Valid JSON" if result.valid else "Invalid JSON"


def error_location_text(error: Optional[JsonError]) -> str:
    if error is None or error.line is None:
        return ""
    if error.column is None:
        return f"Line {error.line}"
    return f"Line {error.line}, Col {error.column}"


def format_diff_value(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def diff_row_text(entry: DiffEntry) -> str:
    path = entry.path or "(root)"
    match entry.type:
        case app_constants.DIFF_ADDED:
            return f"{path}: + {format_diff_value(entry.right_value)}"
        case app_constants.DIFF_REMOVED:
            return f"{path}: - {format_diff_value(entry.left_value)}"
        case app_constants.DIFF_CHANGED:
            return f"{path}: {format_diff_value(entry.left_value)} -> {format_diff_value(entry.right_value)}"
    return f"{path}:"


def diff_summary_text(entries: Iterable[DiffEntry]) -> str:
    count = len(list(entries))
    if not count:
        return "No differences found"
    return f"{count} difference{'' if count == 1 else 's'} found"
