import importlib.util
from pathlib import Path

import pytest

from jsonsmith.services.json_engine import JSON_ENGINE

_SCRIPT = Path(__file__).resolve().parents[1] / "source" / "tools" / "perf_smoke.py"
_module_def = importlib.util.spec_from_file_location("perf_smoke", _SCRIPT)
perf_smoke = importlib.util.module_from_spec(_module_def)
_module_def.loader.exec_module(perf_smoke)


def test_broken_synthetic_payload_is_invalid():
    broken = perf_smoke._break_payload(perf_smoke._build_synthetic_payload(20))
    assert JSON_ENGINE.validate(broken).valid is False


def test_break_skips_members_without_a_trailing_comma():
    # Every "name" member is last in its object, so the break must land elsewhere.
    text = '[\n  {\n    "id": 1,\n    "name": "a"\n  },\n  {\n    "id": 2,\n    "name": "b"\n  }\n]'
    assert JSON_ENGINE.validate(text).valid is True
    broken = perf_smoke._break_payload(text)
    assert broken != text
    assert JSON_ENGINE.validate(broken).valid is False


def test_break_needs_a_comma_between_members():
    with pytest.raises(IndexError):
        perf_smoke._break_payload('{\n  "only": 1\n}')
