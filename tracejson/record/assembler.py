"""Assembly of one structured record per log event.

Example document produced by ``EventRecord.to_document``:
    {
        "timestamp": "2025-09-20T08:15:30.123456Z",
        "level": "INFO",
        "target": "svc.handler",
        "hostname": "web-1",
        "message": "request done",
        "fields": {"status": 200, "request_id": "abc"},
        "spans": [{"name": "request", "target": "svc.handler"}]
    }
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tracejson.fields import FieldSet, merge
from tracejson.spans import SpanSnapshot


class Level(str, Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"

    @classmethod
    def from_name(cls, name: "str | Level") -> "Level":
        if isinstance(name, Level):
            return name
        upper = name.upper()
        if upper == "WARNING":
            return cls.WARN
        if upper in ("CRITICAL", "FATAL"):
            return cls.ERROR
        return cls(upper)

    @classmethod
    def from_logging(cls, levelno: int) -> "Level":
        """Map a standard library level number onto the five levels."""
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


@dataclass(frozen=True)
class EventRecord:
    timestamp: str
    level: Level
    target: str
    fields: dict[str, Any]
    spans: tuple[dict[str, str], ...] = ()
    hostname: str | None = None
    message: str | None = None
    include_hostname: bool = field(default=True, compare=False)

    def to_document(self) -> dict[str, Any]:
        """Return the wire document with its fixed key order."""
        document: dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "target": self.target,
        }
        if self.include_hostname:
            document["hostname"] = self.hostname
        if self.message is not None:
            document["message"] = self.message
        document["fields"] = dict(self.fields)
        document["spans"] = [dict(span) for span in self.spans]
        return document


def merge_span_fields(fields: FieldSet, span_chain: Sequence[SpanSnapshot]) -> FieldSet:
    """Fold span fields into the event fields, nearest span first.

    The event's own fields win over every span, and each span wins over its
    ancestors.
    """
    merged = fields
    for span in span_chain:
        merged = merge(merged, span.fields)
    return merged


def assemble(
    level: Level | str,
    target: str,
    message: str | None,
    fields: FieldSet,
    span_chain: Sequence[SpanSnapshot],
    timestamp: str,
    hostname: str | None = None,
    include_hostname: bool = True,
) -> EventRecord:
    """Build the record for one event.

    Args:
        level: Event level
        target: Module path or category of the event
        message: Optional human readable message
        fields: The event's own fields, already converted to document nodes
        span_chain: Active spans, deepest first
        timestamp: Formatted event time
        hostname: Cached host name
        include_hostname: Whether the hostname key is part of the document

    Returns:
        An immutable ``EventRecord``
    """
    merged = merge_span_fields(fields, span_chain)
    spans = tuple({"name": span.name, "target": span.target} for span in reversed(span_chain))
    return EventRecord(
        timestamp=timestamp,
        level=Level.from_name(level),
        target=target,
        fields=merged.to_dict(),
        spans=spans,
        hostname=hostname,
        message=message,
        include_hostname=include_hostname,
    )
