"""Serialization of event records and hand-off to the sink."""

import logging
import platform
import threading
from collections.abc import Callable

import orjson

from tracejson.emitter.sinks import Sink
from tracejson.emitter.timestamps import RFC3339, TimestampFormatter
from tracejson.record import EventRecord

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "log formatting failed"
UNKNOWN_HOSTNAME = "unknown"

_SERIALIZATION_ERRORS = (orjson.JSONEncodeError, TypeError, ValueError, OverflowError)


class EmitterContext:
    """Values computed once and reused for the lifetime of a pipeline.

    The hostname and the timestamp formatter are built lazily on first use;
    afterwards they are read without locking.

    Args:
        timestamp_format: ``rfc3339`` or a strftime pattern
        utc_offset_hours: Fixed offset for timestamps
        hostname_fn: Resolves the host name, ``platform.node`` by default
    """

    def __init__(
        self,
        timestamp_format: str = RFC3339,
        utc_offset_hours: int = 0,
        hostname_fn: Callable[[], str] | None = None,
    ):
        self.timestamp_format = timestamp_format
        self.utc_offset_hours = utc_offset_hours
        self._hostname_fn = hostname_fn or platform.node
        self._hostname: str | None = None
        self._formatter: TimestampFormatter | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config, hostname_fn: Callable[[], str] | None = None) -> "EmitterContext":
        return cls(
            timestamp_format=config.timestamp_format,
            utc_offset_hours=config.utc_offset_hours,
            hostname_fn=hostname_fn,
        )

    @property
    def hostname(self) -> str:
        if self._hostname is not None:
            return self._hostname
        with self._lock:
            if self._hostname is None:
                try:
                    self._hostname = str(self._hostname_fn())
                except Exception:
                    logger.warning(
                        "Failed to resolve hostname, using %r",
                        UNKNOWN_HOSTNAME,
                        exc_info=True,
                    )
                    self._hostname = UNKNOWN_HOSTNAME
            return self._hostname

    @property
    def timestamps(self) -> TimestampFormatter:
        if self._formatter is not None:
            return self._formatter
        with self._lock:
            if self._formatter is None:
                self._formatter = TimestampFormatter(self.timestamp_format, self.utc_offset_hours)
            return self._formatter

    def timestamp(self) -> str:
        return self.timestamps.format()


class Emitter:
    """Encodes records as JSON lines and writes them to a sink.

    Encoding failures never reach the caller: the record is replaced with a
    short ERROR document describing the failure. Exceptions raised by the sink
    itself propagate unchanged.
    """

    def __init__(self, context: EmitterContext, sink: Sink, line_terminator: str = "\n"):
        self.context = context
        self.sink = sink
        self.line_terminator = line_terminator.encode()
        self._failure_reported = threading.Lock()

    def serialize(self, record: EventRecord) -> bytes:
        try:
            return orjson.dumps(record.to_document()) + self.line_terminator
        except _SERIALIZATION_ERRORS as e:
            self._report_failure(e)
            return self.fallback(e)

    def fallback(self, error: BaseException) -> bytes:
        document = {
            "level": "ERROR",
            "message": FALLBACK_MESSAGE,
            "error": f"{type(error).__name__}: {error}",
        }
        return orjson.dumps(document) + self.line_terminator

    def emit(self, record: EventRecord) -> bytes:
        """Serialize ``record``, write it to the sink and return the bytes."""
        data = self.serialize(record)
        self.sink.write(data)
        return data

    def _report_failure(self, error: BaseException) -> None:
        if not self._failure_reported.acquire(blocking=False):
            return
        logger.warning(
            "Failed to serialize log record, emitting fallback record",
            exc_info=error,
        )
