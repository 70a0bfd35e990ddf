import threading
from pathlib import Path
from typing import Any

from tracejson.config import ResolvedConfig
from tracejson.emitter import Sink
from tracejson.layer import JsonFormattingLayer
from tracejson.logger.context import (
    active_exception,
    current_span_var,
    get_caller_module,
    next_span_id,
)
from tracejson.record import Level


class Span:
    """A named interval of execution with its own fields.

    The span is registered with the layer on the first ``with`` entry and
    closed when the outermost ``with`` block exits. Nested entries of the same
    object reuse its identifier and recorded fields. A span object is entered
    from one thread at a time.
    """

    def __init__(self, layer: JsonFormattingLayer, name: str, target: str, fields: dict):
        self.layer = layer
        self.name = name
        self.target = target
        self.id = next_span_id()
        self.parent = None
        self._fields = fields
        self._tokens = []
        self._lock = threading.Lock()

    def __enter__(self) -> "Span":
        with self._lock:
            if not self._tokens:
                self.parent = current_span_var.get()
                self.layer.on_span_enter(
                    self.id, self.parent, self.name, self.target, self._fields
                )
            self._tokens.append(current_span_var.set(self.id))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with self._lock:
            current_span_var.reset(self._tokens.pop())
            if not self._tokens:
                self.layer.on_span_close(self.id)

    def record(self, **fields: Any) -> None:
        """Add or update fields on this span."""
        self.layer.on_span_record(self.id, fields)


class Logger:
    """Structured logger writing one JSON line per event.

    Args:
        target: Category attached to every event, the calling module's
            ``__name__`` by default
        layer: Formatting layer to write through; built from configuration
            when omitted
        config_dir: Directory holding ``config.yml``
        sink: Destination used when a new layer is built
        **overrides: Formatter options that win over file and environment
    """

    def __init__(
        self,
        target: str | None = None,
        *,
        layer: JsonFormattingLayer | None = None,
        config_dir: Path | str | None = ".tracejson",
        sink: Sink | None = None,
        **overrides: Any,
    ):
        self.target = target or get_caller_module()
        if layer is None:
            config = ResolvedConfig(config_dir, **overrides).get()
            layer = JsonFormattingLayer(config, sink)
        self.layer = layer

    def span(self, name: str, **fields: Any) -> Span:
        """Create a span; enter it with ``with`` to make it current.

        Example:
            >>> with log.span("request", request_id="abc") as span:
            ...     span.record(user="bob")
            ...     log.info("request done", status=200)
        """
        return Span(self.layer, name, self.target, fields)

    def log(self, level: Level | str, message: str | None = None, **fields: Any) -> bytes:
        return self.layer.on_event(
            level, self.target, message, fields, current_span_var.get()
        )

    def trace(self, message: str | None = None, **fields: Any) -> bytes:
        return self.log(Level.TRACE, message, **fields)

    def debug(self, message: str | None = None, **fields: Any) -> bytes:
        return self.log(Level.DEBUG, message, **fields)

    def info(self, message: str | None = None, **fields: Any) -> bytes:
        return self.log(Level.INFO, message, **fields)

    def warning(self, message: str | None = None, **fields: Any) -> bytes:
        return self.log(Level.WARN, message, **fields)

    warn = warning

    def error(self, message: str | None = None, **fields: Any) -> bytes:
        return self.log(Level.ERROR, message, **fields)

    def exception(self, message: str | None = None, **fields: Any) -> bytes:
        """Log at ERROR with the exception being handled under ``error``."""
        exc = active_exception()
        if exc is not None:
            fields.setdefault("error", exc)
        return self.log(Level.ERROR, message, **fields)
