import io
import logging
import os
from datetime import datetime

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.infra import runtime_log_service
from jsonsmith.core.domain_impl.infra import runtime_paths_service
from jsonsmith.services.json_engine import JSON_ENGINE

BROKEN = '{\n  "a": 1\n  "b": 2\n}'


def test_build_diag_entry_has_context_lines():
    result = JSON_ENGINE.validate(BROKEN)
    entry = runtime_log_service.build_diag_entry(BROKEN, result, now=datetime(2024, 1, 2, 3, 4, 5))
    assert entry.startswith(app_constants.DIAG_LOG_BLOCK_MARKER)
    assert "time=2024-01-02 03:04:05 action=live_validate" in entry
    assert "line=2" in entry
    assert "suggestion=Add comma (,) at the end of line 2" in entry
    assert '1: {\n2:   "a": 1\n3:   "b": 2\n4: }' in entry


def test_append_skips_valid_documents(tmp_path):
    log_path = tmp_path / "diag.log"
    assert runtime_log_service.append_diag_entry(str(log_path), "{}", JSON_ENGINE.validate("{}")) is False
    assert not log_path.exists()


def test_append_and_read_latest_block(tmp_path):
    log_path = str(tmp_path / "logs" / app_constants.DIAG_LOG_FILENAME)
    assert runtime_log_service.append_diag_entry(log_path, BROKEN, JSON_ENGINE.validate(BROKEN)) is True
    second = "[1,]"
    assert runtime_log_service.append_diag_entry(log_path, second, JSON_ENGINE.validate(second), action="save") is True
    tail = runtime_log_service.read_text_file_tail(log_path, 0)
    assert tail.count(app_constants.DIAG_LOG_BLOCK_MARKER) == 2
    latest = runtime_log_service.read_latest_block(tail, 0)
    assert "action=save" in latest
    assert "1: [1,]" in latest
    assert runtime_log_service.read_latest_block(tail, 10) == latest[-10:]


def test_append_failure_returns_false(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    log_path = str(blocker / "diag.log")
    assert runtime_log_service.append_diag_entry(log_path, BROKEN, JSON_ENGINE.validate(BROKEN)) is False


def test_trim_keeps_newest_whole_lines(tmp_path):
    path = tmp_path / "big.log"
    path.write_bytes(b"".join(b"line %04d\n" % idx for idx in range(200)))
    runtime_log_service.trim_text_file_for_append(str(path), max_bytes=1000, keep_bytes=105)
    data = path.read_bytes()
    assert len(data) <= 105
    assert data.endswith(b"line 0199\n")
    assert data.startswith(b"line ")


def test_trim_leaves_small_files_alone(tmp_path):
    path = tmp_path / "small.log"
    path.write_bytes(b"a\nb\n")
    runtime_log_service.trim_text_file_for_append(str(path), max_bytes=100, keep_bytes=1)
    assert path.read_bytes() == b"a\nb\n"
    runtime_log_service.trim_text_file_for_append(str(tmp_path / "missing.log"), 1, 1)


def test_read_helpers_on_missing_or_empty_input(tmp_path):
    assert runtime_log_service.read_text_file_tail(str(tmp_path / "missing"), 100) == ""
    assert runtime_log_service.read_latest_block("   ", 100) == ""
    assert runtime_log_service.read_latest_block("no marker here", 0) == "no marker here"


def test_configure_logging_is_idempotent():
    stream = io.StringIO()
    logger = runtime_log_service.configure_logging(logging.DEBUG, stream=stream)
    try:
        runtime_log_service.configure_logging(logging.INFO, stream=stream)
        marked = [h for h in logger.handlers if getattr(h, "_jsonsmith_handler", False)]
        assert len(marked) == 1
        assert logger.level == logging.INFO
        logging.getLogger("jsonsmith.tests").info("hello")
        assert "INFO jsonsmith.tests: hello" in stream.getvalue()
    finally:
        for handler in list(logger.handlers):
            if getattr(handler, "_jsonsmith_handler", False):
                logger.removeHandler(handler)


def test_runtime_dir_env_override(tmp_path):
    target = tmp_path / "rt"
    resolved = runtime_paths_service.runtime_data_dir(env={app_constants.RUNTIME_DIR_ENV: str(target)})
    assert resolved == os.path.abspath(str(target))
    assert target.is_dir()


def test_runtime_dir_uses_xdg_state_home(tmp_path):
    resolved = runtime_paths_service.runtime_data_dir(
        create=False, platform_name="linux", env={"XDG_STATE_HOME": str(tmp_path)}
    )
    assert resolved == os.path.join(str(tmp_path), app_constants.RUNTIME_DIR_NAME)


def test_runtime_dir_windows_base_must_be_under_home():
    home = os.path.abspath(os.path.expanduser("~"))
    outside = os.path.abspath(os.sep + "definitely-not-home")
    resolved = runtime_paths_service.runtime_data_dir(
        create=False, platform_name="win32", env={"LOCALAPPDATA": outside}
    )
    assert resolved == os.path.join(home, app_constants.RUNTIME_DIR_NAME)


def test_runtime_file_path(tmp_path):
    assert runtime_paths_service.runtime_file_path("x.json", str(tmp_path)) == os.path.join(str(tmp_path), "x.json")
