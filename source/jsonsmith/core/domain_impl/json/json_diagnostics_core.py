"""Validation gate and diagnosis orchestration for JSON documents.

``json.loads`` decides validity. When it rejects a document, the checks in
``DIAGNOSIS_CHECKS`` run in order and the first one that returns a
``Diagnosis`` wins; the decoder's own message is the last resort.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Sequence

from jsonsmith.core import constants as app_constants
from jsonsmith.core import json_diagnostics as line_diag
from jsonsmith.core.domain_impl.json import json_delimiter_core
from jsonsmith.core.exceptions import EXPECTED_ERRORS
from jsonsmith.core.json_models import Diagnosis, JsonError, ValidationResult

_LOG = logging.getLogger(__name__)

DiagnosisCheck = Callable[[str, Sequence[str], str], Optional[Diagnosis]]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid literal {name}")


def _parse_int(digits: str) -> Any:
    # int() refuses strings past the interpreter's digit cap; such numbers
    # are still JSON and become floats (inf when out of range).
    try:
        return int(digits)
    except ValueError:
        return float(digits)


def decode(text: str) -> Any:
    """Strict decode: NaN/Infinity are not JSON."""
    return json.loads(text, parse_constant=_reject_constant, parse_int=_parse_int)


def is_blank(text: object) -> bool:
    """Whitespace-only text, counting U+FEFF as whitespace."""
    return not str(text or "").replace("\ufeff", "").strip()


def clean_message(message: object) -> str:
    cleaned = str(message or "")
    for prefix in app_constants.PARSER_MESSAGE_PREFIXES:
        cleaned = cleaned.replace(prefix, "", 1)
    return cleaned


def _check_unterminated_string(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    if not line_diag.is_unterminated_message(message):
        return None
    return line_diag.find_unterminated_string(lines)


def _check_missing_comma(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    return line_diag.find_missing_comma(lines)


def _check_missing_colon(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    return line_diag.find_missing_colon(lines)


def _check_delimiter_balance(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    return json_delimiter_core.track_brackets(text)


def _check_trailing_comma(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    return line_diag.find_trailing_comma(lines)


def _check_duplicate_keys(text: str, lines: Sequence[str], message: str) -> Optional[Diagnosis]:
    return line_diag.find_duplicate_keys(lines)


# Order is part of the contract: changing it changes which hint wins.
DIAGNOSIS_CHECKS: tuple[tuple[str, DiagnosisCheck], ...] = (
    ("unterminated_string", _check_unterminated_string),
    ("missing_comma", _check_missing_comma),
    ("missing_colon", _check_missing_colon),
    ("delimiter_balance", _check_delimiter_balance),
    ("trailing_comma", _check_trailing_comma),
    ("duplicate_key", _check_duplicate_keys),
)


def diagnose(text: str, native_message: object) -> Diagnosis:
    """Locate the most likely defect for a document the decoder rejected."""
    text = str(text or "")
    message = str(native_message or "")
    lines = line_diag.split_lines(text)
    for name, check in DIAGNOSIS_CHECKS:
        found = check(text, lines, message)
        if found is not None:
            _LOG.debug(
                "json_diagnosis.hit",
                extra={"check": name, "line": found.line, "column": found.column},
            )
            return found
    return line_diag.position_from_message(text, message)


def validate(text: object) -> ValidationResult:
    """Validate a document; never raises.

    Empty or whitespace-only text (a lone BOM included) is valid with
    ``parsed=None``.
    """
    source = "" if text is None else str(text)
    if is_blank(source):
        return ValidationResult(valid=True, parsed=None)
    try:
        parsed = decode(source)
    except (ValueError, RecursionError) as exc:
        native_message = str(exc)
        try:
            diagnosis = diagnose(source, native_message)
        except EXPECTED_ERRORS as diag_exc:
            _LOG.debug("expected_error", exc_info=diag_exc)
            diagnosis = Diagnosis(suggestion=app_constants.GENERIC_SUGGESTION)
        return ValidationResult(
            valid=False,
            error=JsonError.from_diagnosis(clean_message(native_message), diagnosis),
        )
    return ValidationResult(valid=True, parsed=parsed)
