"""Entry point for instrumentation callbacks.

``JsonFormattingLayer`` owns the span store, the value visitor and the
emitter of one pipeline. Instrumentation code notifies it through four
callbacks and never touches the store directly.
"""

from collections.abc import Mapping
from typing import Any

from tracejson.config import FormatterConfig, ResolvedConfig
from tracejson.emitter import Emitter, EmitterContext, Sink, StreamSink
from tracejson.fields import FieldSet, ValueVisitor, clean_text
from tracejson.record import EventRecord, Level, assemble
from tracejson.spans import SpanContextStore, SpanId, SpanSnapshot


class JsonFormattingLayer:
    """Turns span and event callbacks into JSON lines.

    Args:
        config: Validated options; resolved from ``.tracejson`` and the
            environment when omitted
        sink: Destination for encoded records, stdout by default
        context: Shared hostname and timestamp caches
        store: Span storage, created from ``config`` when omitted
    """

    def __init__(
        self,
        config: FormatterConfig | None = None,
        sink: Sink | None = None,
        *,
        context: EmitterContext | None = None,
        store: SpanContextStore | None = None,
    ):
        self.config = config if config is not None else ResolvedConfig().get()
        self.visitor = ValueVisitor(
            oversized_integer_policy=self.config.oversized_integer_policy,
            error_chain_depth_limit=self.config.error_chain_depth_limit,
            non_finite_float_policy=self.config.non_finite_float_policy,
        )
        self.store = store or SpanContextStore(
            shards=self.config.store_shards, max_depth=self.config.max_span_depth
        )
        self.context = context or EmitterContext.from_config(self.config)
        self.emitter = Emitter(
            self.context,
            sink if sink is not None else StreamSink(),
            line_terminator=self.config.line_terminator,
        )

    def _field_set(self, values: Mapping[str, Any] | FieldSet | None) -> FieldSet:
        if values is None:
            return FieldSet()
        if isinstance(values, FieldSet):
            return values
        return FieldSet.from_values(values, self.visitor)

    def on_span_enter(
        self,
        identifier: SpanId,
        parent: SpanId | None,
        name: str,
        target: str,
        initial_fields: Mapping[str, Any] | None = None,
    ) -> None:
        created = self.store.on_enter(
            identifier,
            parent,
            clean_text(name),
            clean_text(target),
            self._field_set(initial_fields),
        )
        if created and self.config.emit_span_events:
            self._emit_span_event(self.store.chain_of(identifier), "START")

    def on_span_record(self, identifier: SpanId, field_delta: Mapping[str, Any]) -> None:
        self.store.on_record(identifier, self._field_set(field_delta))

    def on_span_close(self, identifier: SpanId) -> None:
        if not self.config.emit_span_events:
            self.store.on_close(identifier)
            return
        chain = self.store.chain_of(identifier)
        if self.store.on_close(identifier) is not None and chain:
            self._emit_span_event(chain, "END")

    def format_event(
        self,
        level: Level | str,
        target: str,
        message: str | None = None,
        fields: Mapping[str, Any] | None = None,
        current_span: SpanId | None = None,
    ) -> EventRecord:
        """Assemble the record for an event without writing it."""
        return assemble(
            level,
            clean_text(target),
            clean_text(message) if message is not None else None,
            self._field_set(fields),
            self.store.chain_of(current_span),
            timestamp=self.context.timestamp(),
            hostname=self.context.hostname if self.config.include_hostname else None,
            include_hostname=self.config.include_hostname,
        )

    def on_event(
        self,
        level: Level | str,
        target: str,
        message: str | None = None,
        fields: Mapping[str, Any] | None = None,
        current_span: SpanId | None = None,
    ) -> bytes:
        """Format an event inside ``current_span`` and write it to the sink.

        Returns:
            The bytes handed to the sink
        """
        record = self.format_event(level, target, message, fields, current_span)
        return self.emitter.emit(record)

    def _emit_span_event(self, chain: list[SpanSnapshot], kind: str) -> None:
        span = chain[0]
        record = assemble(
            Level.INFO,
            span.target,
            f"[{span.name.upper()} - {kind}]",
            FieldSet(),
            chain,
            timestamp=self.context.timestamp(),
            hostname=self.context.hostname if self.config.include_hostname else None,
            include_hostname=self.config.include_hostname,
        )
        self.emitter.emit(record)
