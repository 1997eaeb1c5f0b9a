"""User settings and tab-session persistence in the runtime directory."""

import json
import logging
import os
from typing import Any

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.json import json_io_core
from jsonsmith.core.editor_state import DocumentTab, EditorSession, UserSettings
from jsonsmith.core.exceptions import EXPECTED_ERRORS

_LOG = logging.getLogger(__name__)


def _read_json_file(path: Any) -> Any:
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            return json.load(fh)
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return None


def _bounded_int(value: Any, low: int, high: int, default: int) -> int:
    # bool is an int subclass; true/false are not sizes.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    number = int(value)
    if low <= number <= high:
        return number
    return default


def settings_from_dict(data: Any) -> UserSettings:
    settings = UserSettings()
    if not isinstance(data, dict):
        return settings
    settings.indent_width = _bounded_int(
        data.get("indent_width"),
        app_constants.INDENT_WIDTH_MIN,
        app_constants.INDENT_WIDTH_MAX,
        settings.indent_width,
    )
    settings.font_size = _bounded_int(
        data.get("font_size"),
        app_constants.FONT_SIZE_MIN,
        app_constants.FONT_SIZE_MAX,
        settings.font_size,
    )
    settings.live_feedback_delay_ms = _bounded_int(
        data.get("live_feedback_delay_ms"),
        0,
        app_constants.LIVE_FEEDBACK_DELAY_MS_MAX,
        settings.live_feedback_delay_ms,
    )
    theme = str(data.get("theme", "") or "").strip().lower()
    if theme in app_constants.THEME_CHOICES:
        settings.theme = theme
    return settings


def load_user_settings(path: Any) -> UserSettings:
    """Load settings; missing, corrupt or out-of-range fields keep defaults."""
    return settings_from_dict(_read_json_file(path))


def save_user_settings(path: Any, settings: UserSettings) -> bool:
    try:
        payload = json.dumps(settings.to_dict(), indent=2)
        json_io_core.write_text_file_atomic(path, payload)
        return True
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return False


def session_from_dict(data: Any) -> EditorSession:
    if not isinstance(data, dict):
        return EditorSession()
    tabs = []
    seen_ids = set()
    for raw in data.get("tabs") or []:
        if not isinstance(raw, dict):
            continue
        tab = DocumentTab(
            name=str(raw.get("name") or app_constants.UNTITLED_TAB_NAME),
            content=str(raw.get("content") or ""),
        )
        tab_id = str(raw.get("id") or "").strip()
        if tab_id and tab_id not in seen_ids:
            tab.id = tab_id
        seen_ids.add(tab.id)
        tabs.append(tab)
    return EditorSession(tabs=tabs, active_id=str(data.get("active_id") or ""))


def load_session(path: Any) -> EditorSession:
    """Restore tabs; a missing or corrupt file gives one empty tab."""
    return session_from_dict(_read_json_file(path))


def save_session(path: Any, session: EditorSession) -> bool:
    try:
        # ASCII escapes keep lone surrogates typed into a tab saveable.
        payload = json.dumps(session.to_dict())
        json_io_core.write_text_file_atomic(path, payload)
        return True
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return False
