from tracejson.emitter.core import FALLBACK_MESSAGE, Emitter, EmitterContext
from tracejson.emitter.sinks import FileSink, Sink, StreamSink
from tracejson.emitter.timestamps import TimestampFormatter

__all__ = [
    "Emitter",
    "EmitterContext",
    "FALLBACK_MESSAGE",
    "FileSink",
    "Sink",
    "StreamSink",
    "TimestampFormatter",
]
