"""Bridge from the standard library ``logging`` module into a layer."""

import logging

from tracejson.logger.context import current_span_id
from tracejson.record import Level


class LayerHandler(logging.Handler):
    """Forward ``logging.LogRecord`` objects to a ``JsonFormattingLayer``.

    Structured fields are taken from a ``fields`` mapping passed through
    ``extra``; an explicit ``span_id`` in ``extra`` overrides the span that is
    current in the calling context.

    Example:
        >>> log = logging.getLogger("svc.handler")
        >>> log.addHandler(LayerHandler(layer))
        >>> log.info("request done", extra={"fields": {"status": 200}})
    """

    def __init__(self, layer, level: int = logging.NOTSET):
        super().__init__(level)
        self.layer = layer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            fields = dict(getattr(record, "fields", None) or {})
            if record.exc_info and record.exc_info[1] is not None:
                fields.setdefault("error", record.exc_info[1])
            span = getattr(record, "span_id", None)
            self.layer.on_event(
                Level.from_logging(record.levelno),
                record.name,
                record.getMessage(),
                fields,
                span if span is not None else current_span_id(),
            )
        except Exception:
            self.handleError(record)
