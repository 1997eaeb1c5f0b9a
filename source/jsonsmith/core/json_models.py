"""Result records shared by the validation, diff and stats flows.

Each record keeps the wire shape used by the worker protocol through
``to_dict()``: optional fields are left out of the dict when unset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from jsonsmith.core import constants as app_constants


def _drop_unset(data: dict[str, Any], optional: tuple[str, ...]) -> dict[str, Any]:
    for key in optional:
        if data.get(key) is None:
            data.pop(key, None)
    return data


@dataclass(slots=True)
class Diagnosis:
    """Best-effort location and hint for an invalid document."""

    line: Optional[int] = None
    column: Optional[int] = None
    suggestion: Optional[str] = None

    def is_empty(self) -> bool:
        return self.line is None and self.column is None and self.suggestion is None

    def to_dict(self) -> dict[str, Any]:
        data = {"line": self.line, "column": self.column, "suggestion": self.suggestion}
        return _drop_unset(data, ("line", "column", "suggestion"))


@dataclass(slots=True)
class JsonError:
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    suggestion: Optional[str] = None

    @classmethod
    def from_diagnosis(cls, message: str, diagnosis: Diagnosis) -> "JsonError":
        return cls(
            message=message,
            line=diagnosis.line,
            column=diagnosis.column,
            suggestion=diagnosis.suggestion,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JsonError":
        return cls(
            message=str(data.get("message") or ""),
            line=data.get("line"),
            column=data.get("column"),
            suggestion=data.get("suggestion"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "suggestion": self.suggestion,
        }
        return _drop_unset(data, ("line", "column", "suggestion"))


@dataclass(slots=True)
class ValidationResult:
    """Outcome of the validation gate.

    ``parsed`` holds the decoded value tree for valid input and is ``None``
    for empty input, for the ``null`` literal, and for invalid input.
    """

    valid: bool
    error: Optional[JsonError] = None
    parsed: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidationResult":
        error = data.get("error")
        return cls(
            valid=bool(data.get("valid")),
            error=JsonError.from_dict(error) if isinstance(error, dict) else None,
            parsed=data.get("parsed"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            data["error"] = self.error.to_dict()
        if self.valid:
            data["parsed"] = self.parsed
        return data


@dataclass(slots=True)
class DiffEntry:
    type: str
    path: str
    left_value: Any = None
    right_value: Any = None
    has_left: bool = field(default=False, repr=False)
    has_right: bool = field(default=False, repr=False)

    @classmethod
    def added(cls, path: str, right_value: Any) -> "DiffEntry":
        return cls(app_constants.DIFF_ADDED, path, right_value=right_value, has_right=True)

    @classmethod
    def removed(cls, path: str, left_value: Any) -> "DiffEntry":
        return cls(app_constants.DIFF_REMOVED, path, left_value=left_value, has_left=True)

    @classmethod
    def changed(cls, path: str, left_value: Any, right_value: Any) -> "DiffEntry":
        return cls(
            app_constants.DIFF_CHANGED,
            path,
            left_value=left_value,
            right_value=right_value,
            has_left=True,
            has_right=True,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DiffEntry":
        return cls(
            type=str(data.get("type") or ""),
            path=str(data.get("path") or ""),
            left_value=data.get("leftValue"),
            right_value=data.get("rightValue"),
            has_left="leftValue" in data,
            has_right="rightValue" in data,
        )

    def to_dict(self) -> dict[str, Any]:
        # null is a legitimate JSON value, so presence is tracked separately.
        data: dict[str, Any] = {"type": self.type, "path": self.path}
        if self.has_left:
            data["leftValue"] = self.left_value
        if self.has_right:
            data["rightValue"] = self.right_value
        return data


@dataclass(slots=True)
class JsonStats:
    keys: int = 0
    depth: int = 0
    size: str = "0 B"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JsonStats":
        return cls(
            keys=int(data.get("keys") or 0),
            depth=int(data.get("depth") or 0),
            size=str(data.get("size") or "0 B"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"keys": self.keys, "depth": self.depth, "size": self.size}
