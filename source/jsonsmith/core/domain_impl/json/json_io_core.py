"""Consolidated JSON domain pillar: json_io_core.

Structural rewrites of a document (format, minify, key sort) and the
document file helpers used by the editor's open/save flows.
"""

import json
import logging
import os
import re
import tempfile
from typing import Any, Optional

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.json import json_diagnostics_core
from jsonsmith.core.exceptions import DocumentIOError

_LOG = logging.getLogger(__name__)


# --- Structural operations ---


def gated_value(text: str) -> tuple[bool, Any]:
    """Return (usable, value); unusable for invalid, empty and `null` input."""
    result = json_diagnostics_core.validate(text)
    if not result.valid or result.parsed is None:
        return False, None
    return True, result.parsed


def serialize(value: Any, indent_width: Optional[int] = app_constants.DEFAULT_INDENT_WIDTH) -> str:
    """Dump a decoded tree; infinities raise ValueError instead of leaking out."""
    if indent_width is None or int(indent_width) <= 0:
        options: dict[str, Any] = {"separators": (",", ":")}
    else:
        options = {"indent": int(indent_width)}
    text = json.dumps(value, ensure_ascii=False, allow_nan=False, **options)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates only survive as \u escapes.
        text = json.dumps(value, ensure_ascii=True, allow_nan=False, **options)
    return text


def sort_value(value: Any) -> Any:
    """Rebuild objects with ascending keys; arrays keep element order."""
    if isinstance(value, list):
        return [sort_value(item) for item in value]
    if isinstance(value, dict):
        return {key: sort_value(value[key]) for key in sorted(value)}
    return value


def _rewrite(text: str, transform: Any, indent_width: Optional[int]) -> str:
    usable, value = gated_value(text)
    if not usable:
        return text
    try:
        return serialize(transform(value), indent_width)
    except (ValueError, RecursionError) as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return text


def format_json(text: str, indent_width: int = app_constants.DEFAULT_INDENT_WIDTH) -> str:
    return _rewrite(text, lambda value: value, indent_width)


def minify_json(text: str) -> str:
    return _rewrite(text, lambda value: value, None)


def sort_json_keys(text: str, indent_width: int = app_constants.DEFAULT_INDENT_WIDTH) -> str:
    return _rewrite(text, sort_value, indent_width)


# --- Document file helpers ---

_UNSAFE_FILENAME_CHARS_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def load_document_text(path: Any) -> str:
    """Read a document as text; UTF-8 with or without BOM."""
    use_path = str(path or "")
    if not use_path:
        raise DocumentIOError("No file selected.")
    try:
        with open(use_path, "rb") as handle:
            raw = handle.read()
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DocumentIOError(f"{os.path.basename(use_path)} is not UTF-8 text.", use_path) from exc
    except OSError as exc:
        raise DocumentIOError(f"Could not read {os.path.basename(use_path)}.", use_path) from exc


def download_filename(tab_name: Any) -> str:
    stem = _UNSAFE_FILENAME_CHARS_RE.sub("_", str(tab_name or "").strip()).strip(" .")
    if not stem:
        stem = app_constants.UNTITLED_TAB_NAME
    if stem.lower().endswith(".json"):
        return stem
    return f"{stem}.json"


def build_save_payload(text: Any) -> str:
    """Text written by Save: content as-is with one trailing line feed."""
    payload = str(text or "")
    if payload and not payload.endswith("\n"):
        payload += "\n"
    return payload


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError as exc:
        _LOG.debug("expected_error", exc_info=exc)


def write_text_file_atomic(path: Any, payload: str, encoding: str = "utf-8") -> None:
    """Write through a sibling temp file and replace the destination.

    The temp file never outlives the call, whatever the outcome.
    """
    use_path = str(path or "")
    if not use_path:
        raise DocumentIOError("Save destination path is required.")
    name = os.path.basename(use_path)
    directory = os.path.dirname(os.path.abspath(use_path))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".jsonsmith-", suffix=".tmp", dir=directory)
    except OSError as exc:
        raise DocumentIOError(f"Could not write {name}.", use_path) from exc
    replaced = False
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(payload)
        os.replace(tmp_path, use_path)
        replaced = True
    except UnicodeError as exc:
        raise DocumentIOError(f"{name} contains characters that cannot be saved as {encoding}.", use_path) from exc
    except OSError as exc:
        raise DocumentIOError(f"Could not write {name}.", use_path) from exc
    finally:
        if not replaced:
            _remove_quietly(tmp_path)


__all__ = [name for name in globals() if not name.startswith("_")]
