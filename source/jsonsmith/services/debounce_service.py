"""Trailing-edge debounce on top of tk `after` / `after_cancel`."""

from __future__ import annotations

import logging
from typing import Any, Callable

from jsonsmith.core.exceptions import EXPECTED_ERRORS

_LOG = logging.getLogger(__name__)


class Debouncer:
    """Run ``callback`` once, ``delay_ms`` after the latest ``schedule`` call.

    A newer schedule cancels the pending one; nothing else is cancelled.
    """

    def __init__(self, host: Any, delay_ms: int, callback: Callable[..., Any]):
        self._host = host
        self.delay_ms = max(0, int(delay_ms))
        self._callback = callback
        self._after_id = None

    @property
    def pending(self) -> bool:
        return self._after_id is not None

    def schedule(self, *args: Any) -> None:
        self.cancel()
        self._after_id = self._host.after(self.delay_ms, lambda: self._fire(*args))

    def cancel(self) -> None:
        after_id = self._after_id
        self._after_id = None
        if after_id is None:
            return
        try:
            self._host.after_cancel(after_id)
        except EXPECTED_ERRORS as exc:
            _LOG.debug("expected_error", exc_info=exc)

    def flush(self, *args: Any) -> None:
        """Cancel any pending run and run now."""
        self.cancel()
        self._callback(*args)

    def _fire(self, *args: Any) -> None:
        self._after_id = None
        self._callback(*args)
