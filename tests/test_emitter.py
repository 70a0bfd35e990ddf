"""Unit tests for the emitter, its context and the sinks."""

from __future__ import annotations

import datetime
import io
import threading

import orjson
import pytest

from tracejson.emitter import (
    FALLBACK_MESSAGE,
    Emitter,
    EmitterContext,
    FileSink,
    StreamSink,
    TimestampFormatter,
)
from tracejson.emitter.core import UNKNOWN_HOSTNAME
from tracejson.fields import FieldSet
from tracejson.record import EventRecord, Level, assemble

from tests.conftest import MemorySink


class TestTimestampFormatter:
    """Tests for timestamp rendering."""

    def test_rfc3339_utc(self) -> None:
        moment = datetime.datetime(2025, 9, 20, 8, 15, 30, 123456, tzinfo=datetime.timezone.utc)
        assert TimestampFormatter().format(moment) == "2025-09-20T08:15:30.123456Z"

    def test_fixed_offset(self) -> None:
        moment = datetime.datetime(2025, 9, 20, 8, 15, 30, tzinfo=datetime.timezone.utc)
        text = TimestampFormatter(utc_offset_hours=2).format(moment)
        assert text == "2025-09-20T10:15:30.000000+02:00"

    def test_custom_pattern(self) -> None:
        moment = datetime.datetime(2025, 9, 20, 8, 15, 30, tzinfo=datetime.timezone.utc)
        assert TimestampFormatter("%Y-%m-%d %H:%M:%S").format(moment) == "2025-09-20 08:15:30"


class TestEmitterContext:
    """Tests for the write-once caches."""

    def test_hostname_resolved_once(self) -> None:
        calls = []

        def resolve() -> str:
            calls.append(1)
            return "web-1"

        context = EmitterContext(hostname_fn=resolve)
        threads = [threading.Thread(target=lambda: context.hostname) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert context.hostname == "web-1"
        assert len(calls) == 1

    def test_hostname_failure_degrades(self, caplog: pytest.LogCaptureFixture) -> None:
        calls = []

        def resolve() -> str:
            calls.append(1)
            raise OSError("no network")

        context = EmitterContext(hostname_fn=resolve)
        assert context.hostname == UNKNOWN_HOSTNAME
        assert context.hostname == UNKNOWN_HOSTNAME
        assert len(calls) == 1
        assert any(r.name == "tracejson.emitter.core" for r in caplog.records)

    def test_formatter_reused(self) -> None:
        context = EmitterContext(timestamp_format="%Y")
        assert context.timestamps is context.timestamps
        assert len(context.timestamp()) == 4


class TestEmitter:
    """Tests for serialization and fallback."""

    def _record(self, fields: dict) -> EventRecord:
        return assemble(Level.INFO, "svc", "msg", FieldSet(fields), [], timestamp="t", hostname="h")

    def test_round_trip(self) -> None:
        sink = MemorySink()
        emitter = Emitter(EmitterContext(), sink)
        record = self._record({"n": 2**64 - 1, "s": "x", "f": 0.5, "b": False, "z": None})
        data = emitter.emit(record)
        assert data.endswith(b"\n")
        assert sink.writes == [data]
        assert orjson.loads(data) == record.to_document()

    def test_crlf_terminator(self) -> None:
        emitter = Emitter(EmitterContext(), MemorySink(), line_terminator="\r\n")
        assert emitter.serialize(self._record({})).endswith(b"}\r\n")

    def test_fallback_on_unserializable_value(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = MemorySink()
        emitter = Emitter(EmitterContext(), sink)
        emitter.emit(self._record({"bad": {1, 2}}))
        emitter.emit(self._record({"bad": object()}))
        documents = sink.documents()
        assert len(documents) == 2
        assert documents[0]["level"] == "ERROR"
        assert documents[0]["message"] == FALLBACK_MESSAGE
        assert "error" in documents[0]
        assert len([r for r in caplog.records if r.name == "tracejson.emitter.core"]) == 1

    def test_fallback_reported_once_across_threads(self, caplog: pytest.LogCaptureFixture) -> None:
        emitter = Emitter(EmitterContext(), MemorySink())
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            for _ in range(20):
                emitter.emit(self._record({"bad": {1}}))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len([r for r in caplog.records if r.name == "tracejson.emitter.core"]) == 1

    def test_sink_errors_propagate(self) -> None:
        class FailingSink:
            def write(self, data: bytes) -> None:
                raise OSError("disk full")

        with pytest.raises(OSError):
            Emitter(EmitterContext(), FailingSink()).emit(self._record({}))


class TestSinks:
    """Tests for the bundled sinks."""

    def test_stream_sink_binary(self) -> None:
        stream = io.BytesIO()
        StreamSink(stream).write(b"line\n")
        assert stream.getvalue() == b"line\n"

    def test_stream_sink_uses_text_buffer(self) -> None:
        raw = io.BytesIO()
        text = io.TextIOWrapper(raw, encoding="utf-8")
        StreamSink(text).write(b"line\n")
        assert raw.getvalue() == b"line\n"

    def test_file_sink_appends(self, tmp_path) -> None:
        path = tmp_path / "logs" / "out.jsonl"
        sink = FileSink(path)
        sink.write(b"a\n")
        sink.write(b"b\n")
        sink.close()
        assert path.read_bytes() == b"a\nb\n"
