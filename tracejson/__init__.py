from tracejson.config import FormatterConfig, ResolvedConfig
from tracejson.emitter import Emitter, EmitterContext, FileSink, StreamSink
from tracejson.errors import ConfigurationError, TraceJsonError
from tracejson.fields import FieldSet, ValueVisitor, merge
from tracejson.layer import JsonFormattingLayer
from tracejson.logger import LayerHandler, get_logger
from tracejson.main import Logger, Span
from tracejson.record import EventRecord, Level, assemble
from tracejson.spans import SpanContextStore

__all__ = [
    "ConfigurationError",
    "Emitter",
    "EmitterContext",
    "EventRecord",
    "FieldSet",
    "FileSink",
    "FormatterConfig",
    "JsonFormattingLayer",
    "LayerHandler",
    "Level",
    "Logger",
    "ResolvedConfig",
    "Span",
    "SpanContextStore",
    "StreamSink",
    "TraceJsonError",
    "ValueVisitor",
    "assemble",
    "get_logger",
    "merge",
]
