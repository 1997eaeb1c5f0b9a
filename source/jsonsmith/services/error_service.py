from typing import Any, Optional

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.json import json_view_core
from jsonsmith.core.json_models import ValidationResult


def build_error_payload(result: ValidationResult) -> Optional[dict[str, Any]]:
    """Overlay/status fields for an invalid result; None when valid."""
    if result.valid or result.error is None:
        return None
    error = result.error
    return {
        "title": json_view_core.validity_text(result),
        "message": error.message,
        "location": json_view_core.error_location_text(error),
        "suggestion": error.suggestion or app_constants.GENERIC_SUGGESTION,
        "line": error.line,
        "column": error.column,
    }


def error_line_range(line: Optional[int], line_count: int) -> Optional[tuple[str, str]]:
    """Tk text indices spanning the diagnosed line, clamped to the buffer."""
    if not line or line_count <= 0:
        return None
    use_line = min(max(int(line), 1), int(line_count))
    return f"{use_line}.0", f"{use_line}.0 lineend"


def current_palette(theme: Any) -> dict[str, str]:
    name = str(theme or "").strip().lower()
    return app_constants.THEME_PALETTES.get(name, app_constants.THEME_PALETTES[app_constants.THEME_DARK])


def error_marker_colors(palette: dict[str, str]) -> tuple[str, str]:
    return palette["error_line_bg"], palette["error_line_fg"]


def selection_colors(palette: dict[str, str]) -> tuple[str, str]:
    return palette.get("select_bg", "#2f3a4d"), palette.get("select_fg", "#ffffff")


def diff_row_color(palette: dict[str, str], diff_type: str) -> str:
    match diff_type:
        case app_constants.DIFF_ADDED:
            return palette["added_fg"]
        case app_constants.DIFF_REMOVED:
            return palette["removed_fg"]
        case app_constants.DIFF_CHANGED:
            return palette["changed_fg"]
    return palette["fg"]
