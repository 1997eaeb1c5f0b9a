"""JSON domain package exports."""

from __future__ import annotations

from . import json_delimiter_core
from . import json_diagnostics_core
from . import json_diff_core
from . import json_io_core
from . import json_view_core

__all__ = [
    "json_delimiter_core",
    "json_diagnostics_core",
    "json_diff_core",
    "json_io_core",
    "json_view_core",
]
