"""Logging setup and the on-disk diagnostics log for invalid documents."""

import logging
import os
import sys
from datetime import datetime
from typing import Any, Optional

from jsonsmith.core import constants as app_constants
from jsonsmith.core.exceptions import EXPECTED_ERRORS
from jsonsmith.core.json_models import ValidationResult

_LOG = logging.getLogger(__name__)

_ROOT_LOGGER_NAME = "jsonsmith"
_HANDLER_MARK = "_jsonsmith_handler"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, stream: Any = None) -> logging.Logger:
    """Attach one stream handler to the package logger; safe to call twice."""
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_MARK, False):
            handler.setLevel(level)
            return logger
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler.setLevel(level)
    setattr(handler, _HANDLER_MARK, True)
    logger.addHandler(handler)
    return logger


def trim_text_file_for_append(path: Any, max_bytes: int, keep_bytes: int) -> None:
    """Keep only the newest `keep_bytes` once the file grows past `max_bytes`."""
    if not os.path.isfile(path):
        return
    size = os.path.getsize(path)
    if size <= int(max_bytes):
        return
    with open(path, "rb") as handle:
        handle.seek(size - min(size, max(0, int(keep_bytes))))
        tail = handle.read()
    # Drop the partial first line left by the byte cut.
    newline = tail.find(b"\n")
    if newline >= 0:
        tail = tail[newline + 1 :]
    with open(path, "wb") as handle:
        handle.write(tail)


def read_text_file_tail(path: Any, max_chars: Any) -> str:
    if not os.path.isfile(path):
        return ""
    limit = max(0, int(max_chars))
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as fh:
            text = fh.read()
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return ""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[-limit:]


def read_latest_block(text: Any, max_chars: Any, marker: str = app_constants.DIAG_LOG_BLOCK_MARKER) -> str:
    source = str(text or "")
    if not source.strip():
        return ""
    idx = source.rfind(marker)
    if idx >= 0:
        block = source[idx + len(marker) :]
    else:
        block = source
    block = str(block or "").strip()
    if not block:
        return ""
    limit = max(0, int(max_chars))
    if limit > 0 and len(block) > limit:
        return block[-limit:]
    return block


def build_diag_entry(
    text: str,
    result: ValidationResult,
    action: str = "live_validate",
    now: Optional[datetime] = None,
) -> str:
    error = result.error
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    lines = str(text or "").split("\n")
    target = error.line if error is not None and error.line else 1
    context = []
    span = app_constants.DIAG_LOG_CONTEXT_LINES
    for ln in range(max(target - span, 1), min(target + span, len(lines)) + 1):
        context.append(f"{ln}: {lines[ln - 1]}")
    msg = error.message if error is not None else ""
    line = error.line if error is not None else None
    col = error.column if error is not None else None
    suggestion = error.suggestion if error is not None else None
    return (
        app_constants.DIAG_LOG_BLOCK_MARKER
        + f"time={stamp} action={action}\n"
        + f"msg={msg} line={line} col={col}\n"
        + f"suggestion={suggestion or '-'}\n"
        + "\n".join(context).rstrip()
        + "\n"
    )


def append_diag_entry(
    log_path: Any,
    text: str,
    result: ValidationResult,
    action: str = "live_validate",
    max_bytes: int = app_constants.DIAG_LOG_MAX_BYTES,
    keep_bytes: int = app_constants.DIAG_LOG_KEEP_BYTES,
) -> bool:
    """Append one diagnostics block; returns False instead of raising."""
    if result.valid:
        return False
    try:
        log_dir = os.path.dirname(str(log_path or ""))
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        try:
            trim_text_file_for_append(log_path, max_bytes, keep_bytes)
        except EXPECTED_ERRORS as trim_exc:
            _LOG.debug(
                "runtime_log.expected_error",
                extra={"stage": "trim_diag_log", "error_type": type(trim_exc).__name__},
                exc_info=trim_exc,
            )
        entry = build_diag_entry(text, result, action=action)
        with open(log_path, "a", encoding="utf-8") as handle:
            handle.write(entry)
        return True
    except EXPECTED_ERRORS as write_exc:
        _LOG.debug(
            "runtime_log.expected_error",
            extra={"stage": "write_diag_log", "error_type": type(write_exc).__name__},
            exc_info=write_exc,
        )
        return False
