"""Stack-based `{}` / `[]` balance tracking over raw document text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jsonsmith.core.json_models import Diagnosis

_CLOSER_FOR = {"{": "}", "[": "]"}


@dataclass(slots=True)
class DelimiterStackEntry:
    char: str
    line: int
    column: int


def delimiter_name(char: str) -> str:
    return "brace" if char in "{}" else "bracket"


def track_brackets(text: str) -> Optional[Diagnosis]:
    """Single left-to-right pass; return the first balance error or None.

    Quote and escape state are locals of this pass only. A backslash consumes
    the next character wherever it appears, and an unconsumed `"` flips the
    in-string flag; delimiters inside strings are ignored.
    """
    stack: list[DelimiterStackEntry] = []
    in_string = False
    escaped = False
    for line_idx, line in enumerate(str(text or "").split("\n")):
        for col_idx, ch in enumerate(line):
            if escaped:
                escaped = False
                continue
            if ch == "\\":
                escaped = True
                continue
            if ch == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if ch in "{[":
                stack.append(DelimiterStackEntry(ch, line_idx + 1, col_idx + 1))
            elif ch in "}]":
                if not stack:
                    return Diagnosis(
                        line=line_idx + 1,
                        column=col_idx + 1,
                        suggestion=f"Unexpected closing {delimiter_name(ch)} - no matching opening",
                    )
                opener = stack.pop()
                expected = _CLOSER_FOR[opener.char]
                if ch != expected:
                    return Diagnosis(
                        line=line_idx + 1,
                        column=col_idx + 1,
                        suggestion=(
                            f"Mismatched bracket - expected '{expected}' but found '{ch}'. "
                            f"Opening {opener.char} was at line {opener.line}"
                        ),
                    )
    if stack:
        # Innermost unclosed delimiter is the most useful one to point at.
        unclosed = stack[-1]
        return Diagnosis(
            line=unclosed.line,
            column=unclosed.column,
            suggestion=(
                f"Unclosed {delimiter_name(unclosed.char)} - add closing {_CLOSER_FOR[unclosed.char]}"
            ),
        )
    return None
