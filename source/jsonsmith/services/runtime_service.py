"""Runtime domain module."""

from jsonsmith.core.domain_impl.infra import json_worker_service
from jsonsmith.core.domain_impl.infra import runtime_log_service
from jsonsmith.core.domain_impl.infra import runtime_paths_service
from jsonsmith.core.domain_impl.infra import settings_service


class RuntimeService:
    json_worker_service = json_worker_service
    runtime_log_service = runtime_log_service
    runtime_paths_service = runtime_paths_service
    settings_service = settings_service


RUNTIME = RuntimeService()
