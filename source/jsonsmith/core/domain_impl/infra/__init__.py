"""Runtime infrastructure: paths, logging, settings, background worker."""

from __future__ import annotations

from . import json_worker_service
from . import runtime_log_service
from . import runtime_paths_service
from . import settings_service

__all__ = [
    "json_worker_service",
    "runtime_log_service",
    "runtime_paths_service",
    "settings_service",
]
