"""Runtime data path resolution helpers."""

import os
from typing import Any, Mapping

from jsonsmith.core import constants as app_constants
from jsonsmith.core.exceptions import EXPECTED_ERRORS


def _normalized_home() -> str:
    try:
        return os.path.abspath(os.path.expanduser("~"))
    except EXPECTED_ERRORS:
        return os.path.abspath(os.getcwd())


def _safe_windows_base(base: Any) -> str:
    # Keep env-derived base rooted under user home; otherwise use home.
    home = _normalized_home()
    try:
        candidate = os.path.abspath(str(base or "").strip())
    except EXPECTED_ERRORS:
        return home
    if not candidate:
        return home
    try:
        if os.path.commonpath([home, candidate]) == home:
            return candidate
    except EXPECTED_ERRORS:
        return home
    return home


def runtime_data_dir(
    create: bool = True,
    platform_name: str = "",
    env: Mapping[str, str] | None = None,
    runtime_dir_name: str = app_constants.RUNTIME_DIR_NAME,
) -> str:
    """Resolve runtime data directory path with platform-aware base fallback."""
    env = os.environ if env is None else env
    override = str(env.get(app_constants.RUNTIME_DIR_ENV, "") or "").strip()
    if override:
        target = os.path.abspath(override)
    else:
        base = None
        match platform_name:
            case "win32":
                env_base = str(env.get("LOCALAPPDATA", "")).strip() or str(env.get("APPDATA", "")).strip()
                base = _safe_windows_base(env_base)
            case _:
                xdg = str(env.get("XDG_STATE_HOME", "")).strip()
                base = xdg or None
        if not base:
            try:
                base = os.path.join(os.path.expanduser("~"), ".local", "state")
            except EXPECTED_ERRORS:
                base = os.getcwd()
        target = os.path.join(base, runtime_dir_name)
    if create:
        try:
            os.makedirs(target, exist_ok=True)
        except EXPECTED_ERRORS:
            return os.getcwd()
    return target


def runtime_file_path(filename: str, runtime_dir: str | None = None) -> str:
    return os.path.join(runtime_dir or runtime_data_dir(create=True), filename)
