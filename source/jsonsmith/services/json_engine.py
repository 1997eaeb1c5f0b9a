"""JSON domain module."""

from jsonsmith.core import json_diagnostics as json_line_diag_service
from jsonsmith.core.domain_impl.json import json_delimiter_core as json_delimiter_service
from jsonsmith.core.domain_impl.json import json_diagnostics_core as json_validation_service
from jsonsmith.core.domain_impl.json import json_diff_core as json_diff_service
from jsonsmith.core.domain_impl.json import json_io_core as json_structure_service
from jsonsmith.core.domain_impl.json import json_view_core as json_view_service


class JsonEngine:
    json_delimiter_service = json_delimiter_service
    json_diff_service = json_diff_service
    json_line_diag_service = json_line_diag_service
    json_structure_service = json_structure_service
    json_validation_service = json_validation_service
    json_view_service = json_view_service

    # Flat entry points used by the editor and the worker fallback.
    validate = staticmethod(json_validation_service.validate)
    diagnose = staticmethod(json_validation_service.diagnose)
    format_json = staticmethod(json_structure_service.format_json)
    minify_json = staticmethod(json_structure_service.minify_json)
    sort_json_keys = staticmethod(json_structure_service.sort_json_keys)
    compare_json = staticmethod(json_diff_service.compare_json)
    get_stats = staticmethod(json_view_service.get_stats)


JSON_ENGINE = JsonEngine()
