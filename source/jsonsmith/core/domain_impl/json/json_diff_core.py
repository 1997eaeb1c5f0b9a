"""Recursive structural comparison of two JSON documents."""

from __future__ import annotations

import logging
from typing import Any

from jsonsmith.core.domain_impl.json import json_diagnostics_core
from jsonsmith.core.json_models import DiffEntry

_LOG = logging.getLogger(__name__)


def json_type(value: Any) -> str:
    # bool first: it is an int subclass but a distinct JSON type.
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else str(key)


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


def diff_values(left: Any, right: Any, path: str = "") -> list[DiffEntry]:
    """Divergences between two decoded trees in traversal order."""
    diffs: list[DiffEntry] = []
    _compare(left, right, path, diffs)
    return diffs


def _compare(left: Any, right: Any, path: str, diffs: list[DiffEntry]) -> None:
    # Each node is visited once; equal subtrees simply add nothing.
    if left is right:
        return
    left_type = json_type(left)
    if left_type != json_type(right):
        diffs.append(DiffEntry.changed(path, left, right))
        return
    if left_type == "array":
        for idx in range(max(len(left), len(right))):
            item_path = index_path(path, idx)
            if idx >= len(left):
                diffs.append(DiffEntry.added(item_path, right[idx]))
            elif idx >= len(right):
                diffs.append(DiffEntry.removed(item_path, left[idx]))
            else:
                _compare(left[idx], right[idx], item_path, diffs)
        return
    if left_type == "object":
        for key in left:
            key_path = child_path(path, key)
            if key not in right:
                diffs.append(DiffEntry.removed(key_path, left[key]))
            else:
                _compare(left[key], right[key], key_path, diffs)
        for key in right:
            if key not in left:
                diffs.append(DiffEntry.added(child_path(path, key), right[key]))
        return
    if left != right:
        diffs.append(DiffEntry.changed(path, left, right))


def compare_json(left_text: str, right_text: str) -> list[DiffEntry]:
    """Diff two documents; empty when either side is invalid."""
    left_result = json_diagnostics_core.validate(left_text)
    right_result = json_diagnostics_core.validate(right_text)
    if not left_result.valid or not right_result.valid:
        return []
    try:
        return diff_values(left_result.parsed, right_result.parsed)
    except RecursionError as exc:
        _LOG.debug("expected_error", exc_info=exc)
        return []
