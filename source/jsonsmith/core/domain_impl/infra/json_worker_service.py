"""Background execution context for the JSON engine.

Requests are ``{"type", "payload", "id"}`` dicts; responses carry the same
``id`` with ``<TYPE>_RESULT`` or ``ERROR``. The client routes responses by
id only, and serves every request inline when the worker cannot take it.
"""

from __future__ import annotations

import logging
import queue
import threading
import uuid
from typing import Any, Callable, Optional

from jsonsmith.core import constants as app_constants
from jsonsmith.core.domain_impl.json import json_diagnostics_core
from jsonsmith.core.domain_impl.json import json_diff_core
from jsonsmith.core.domain_impl.json import json_io_core
from jsonsmith.core.domain_impl.json import json_view_core
from jsonsmith.core.exceptions import WorkerTransportError

_LOG = logging.getLogger(__name__)

Message = dict[str, Any]
Reply = Callable[[Message], None]
Dispatch = Callable[[Callable[[], None]], Any]

_STOP = object()


def _text_payload(payload: Any) -> str:
    if payload is None:
        return ""
    if isinstance(payload, dict):
        payload = payload.get("text")
    if not isinstance(payload, str):
        raise TypeError(f"Expected document text, got {type(payload).__name__}")
    return payload


def _indent_payload(payload: Any) -> int:
    if isinstance(payload, dict) and payload.get("indent") is not None:
        return int(payload["indent"])
    return app_constants.DEFAULT_INDENT_WIDTH


def _handle_validate(payload: Any) -> Any:
    return json_diagnostics_core.validate(_text_payload(payload)).to_dict()


def _handle_stats(payload: Any) -> Any:
    return json_view_core.get_stats(_text_payload(payload)).to_dict()


def _handle_compare(payload: Any) -> Any:
    if not isinstance(payload, dict):
        raise TypeError("COMPARE expects {left, right}")
    left = _text_payload(payload.get("left"))
    right = _text_payload(payload.get("right"))
    return [entry.to_dict() for entry in json_diff_core.compare_json(left, right)]


def _handle_format(payload: Any) -> Any:
    return json_io_core.format_json(_text_payload(payload), _indent_payload(payload))


def _handle_minify(payload: Any) -> Any:
    return json_io_core.minify_json(_text_payload(payload))


def _handle_sort_keys(payload: Any) -> Any:
    return json_io_core.sort_json_keys(_text_payload(payload), _indent_payload(payload))


HANDLERS: dict[str, Callable[[Any], Any]] = {
    app_constants.OP_VALIDATE: _handle_validate,
    app_constants.OP_STATS: _handle_stats,
    app_constants.OP_COMPARE: _handle_compare,
    app_constants.OP_FORMAT: _handle_format,
    app_constants.OP_MINIFY: _handle_minify,
    app_constants.OP_SORT_KEYS: _handle_sort_keys,
}


def result_type(op: str) -> str:
    return f"{op}{app_constants.RESULT_SUFFIX}"


def error_response(detail: str, request_id: Any) -> Message:
    return {"type": app_constants.OP_ERROR, "payload": str(detail), "id": request_id}


def handle_request(message: Any) -> Message:
    """Serve one request message; failures become ERROR responses."""
    request_id = message.get("id") if isinstance(message, dict) else None
    try:
        op = message["type"]
        handler = HANDLERS.get(op)
        if handler is None:
            _LOG.warning("json_worker.unknown_request", extra={"request_type": str(op)})
            return error_response(f"Unknown request type: {op}", request_id)
        return {"type": result_type(op), "payload": handler(message.get("payload")), "id": request_id}
    except Exception as exc:  # worker boundary: report, never raise
        return error_response(str(exc) or type(exc).__name__, request_id)


class JsonWorker:
    """Daemon thread that serves request messages from a queue."""

    def __init__(self, handler: Callable[[Any], Message] = handle_request, name: str = "jsonsmith-worker"):
        self._handler = handler
        self._name = name
        self._requests: queue.Queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return self._running and thread is not None and thread.is_alive()

    def start(self) -> "JsonWorker":
        with self._lock:
            if self._running:
                return self
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._running = True
            self._thread.start()
        return self

    def stop(self, timeout: float = 1.0) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            thread = self._thread
            self._requests.put((_STOP, None))
        if thread is not None and thread is not threading.current_thread():
            thread.join(max(0.0, float(timeout)))

    def post(self, message: Message, reply: Reply) -> None:
        if not self.is_running:
            raise WorkerTransportError("JSON worker is not running.")
        self._requests.put((message, reply))

    def _run(self) -> None:
        while True:
            message, reply = self._requests.get()
            if message is _STOP:
                break
            response = self._handler(message)
            try:
                reply(response)
            except Exception as exc:  # a broken reply must not kill the loop
                _LOG.warning("json_worker.reply_failed", exc_info=exc)


class JsonWorkerClient:
    """Request/response front end with an inline fallback.

    ``dispatch`` decides where callbacks run; the editor passes one that
    hops onto the tk main loop.
    """

    def __init__(
        self,
        worker: Optional[JsonWorker] = None,
        dispatch: Optional[Dispatch] = None,
        fallback: Callable[[Any], Message] = handle_request,
    ):
        self._worker = worker
        self._dispatch: Dispatch = dispatch or (lambda fn: fn())
        self._fallback = fallback
        self._callbacks: dict[str, tuple[Callable[[Any], Any], Optional[Callable[[str], Any]], Message]] = {}
        self._lock = threading.Lock()

    def pending_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def _new_request_id(self) -> str:
        while True:
            request_id = uuid.uuid4().hex[: app_constants.REQUEST_ID_LENGTH]
            if request_id not in self._callbacks:
                return request_id

    def request(
        self,
        op: str,
        payload: Any,
        callback: Callable[[Any], Any],
        on_error: Optional[Callable[[str], Any]] = None,
    ) -> str:
        message: Message = {"type": op, "payload": payload, "id": ""}
        with self._lock:
            request_id = self._new_request_id()
            message["id"] = request_id
            self._callbacks[request_id] = (callback, on_error, message)
        worker = self._worker
        if worker is not None:
            try:
                worker.post(message, self._on_response)
                return request_id
            except WorkerTransportError as exc:
                _LOG.debug("json_worker.fallback", extra={"request_type": op}, exc_info=exc)
        self._on_response(self._fallback(message))
        return request_id

    def _on_response(self, response: Message) -> None:
        request_id = response.get("id") if isinstance(response, dict) else None
        with self._lock:
            entry = self._callbacks.pop(request_id, None)
        if entry is None:
            return
        callback, on_error, message = entry
        if response.get("type") == app_constants.OP_ERROR:
            _LOG.warning(
                "json_worker.error_response",
                extra={"request_type": message.get("type"), "detail": response.get("payload")},
            )
            response = self._fallback(message)
        if response.get("type") == app_constants.OP_ERROR:
            detail = str(response.get("payload") or "")
            if on_error is not None:
                self._dispatch(lambda: on_error(detail))
            return
        payload = response.get("payload")
        self._dispatch(lambda: callback(payload))

    def validate(self, text: str, callback: Callable[[Any], Any], **kwargs: Any) -> str:
        return self.request(app_constants.OP_VALIDATE, text, callback, **kwargs)

    def get_stats(self, text: str, callback: Callable[[Any], Any], **kwargs: Any) -> str:
        return self.request(app_constants.OP_STATS, text, callback, **kwargs)

    def compare(self, left: str, right: str, callback: Callable[[Any], Any], **kwargs: Any) -> str:
        return self.request(app_constants.OP_COMPARE, {"left": left, "right": right}, callback, **kwargs)

    def format(self, text: str, callback: Callable[[Any], Any], indent_width: Optional[int] = None, **kwargs: Any) -> str:
        payload: Any = text if indent_width is None else {"text": text, "indent": indent_width}
        return self.request(app_constants.OP_FORMAT, payload, callback, **kwargs)

    def minify(self, text: str, callback: Callable[[Any], Any], **kwargs: Any) -> str:
        return self.request(app_constants.OP_MINIFY, text, callback, **kwargs)

    def sort_keys(self, text: str, callback: Callable[[Any], Any], indent_width: Optional[int] = None, **kwargs: Any) -> str:
        payload: Any = text if indent_width is None else {"text": text, "indent": indent_width}
        return self.request(app_constants.OP_SORT_KEYS, payload, callback, **kwargs)

    def close(self) -> None:
        with self._lock:
            self._callbacks.clear()
        if self._worker is not None:
            self._worker.stop()
