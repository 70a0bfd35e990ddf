"""Shared fixtures for tracejson tests."""

from __future__ import annotations

import threading

import orjson
import pytest

from tracejson.config import FormatterConfig
from tracejson.emitter import EmitterContext
from tracejson.layer import JsonFormattingLayer


class MemorySink:
    """Thread-safe sink that keeps every written line."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            self.writes.append(data)

    def documents(self) -> list[dict]:
        with self._lock:
            return [orjson.loads(line) for line in self.writes]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep configuration lookups away from the developer's cwd and env."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "TRACEJSON_TIMESTAMP_FORMAT",
        "TRACEJSON_UTC_OFFSET_HOURS",
        "TRACEJSON_OVERSIZED_INTEGER_POLICY",
        "TRACEJSON_NON_FINITE_FLOAT_POLICY",
        "TRACEJSON_ERROR_CHAIN_DEPTH_LIMIT",
        "TRACEJSON_INCLUDE_HOSTNAME",
        "TRACEJSON_EMIT_SPAN_EVENTS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def context() -> EmitterContext:
    return EmitterContext(hostname_fn=lambda: "test-host")


@pytest.fixture
def make_layer(sink: MemorySink, context: EmitterContext):
    def _make(**options) -> JsonFormattingLayer:
        return JsonFormattingLayer(FormatterConfig(**options), sink, context=context)

    return _make


@pytest.fixture
def layer(make_layer) -> JsonFormattingLayer:
    return make_layer()
