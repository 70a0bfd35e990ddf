"""Tests for the Logger front end and the logging bridge."""

from __future__ import annotations

import logging
import threading

from tracejson.logger import LayerHandler, current_span_id, get_logger
from tracejson.main import Logger


class TestLogger:
    """Tests for Logger and Span."""

    def test_target_defaults_to_caller_module(self, layer) -> None:
        assert Logger(layer=layer).target == __name__

    def test_nested_spans(self, layer, sink) -> None:
        log = Logger("svc.handler", layer=layer)
        with log.span("request", request_id="abc"):
            with log.span("db", table="users") as db:
                db.record(rows=3)
                log.info("query done", status=200)
        document = sink.documents()[0]
        assert document["fields"] == {
            "status": 200,
            "table": "users",
            "rows": 3,
            "request_id": "abc",
        }
        assert [s["name"] for s in document["spans"]] == ["request", "db"]
        assert current_span_id() is None
        assert len(layer.store) == 0

    def test_reentered_span_keeps_fields(self, layer, sink) -> None:
        log = Logger("svc", layer=layer)
        span = log.span("job")
        with span:
            span.record(step=1)
            with span:
                log.debug("inner")
            assert span.id in layer.store
        assert span.id not in layer.store
        assert sink.documents()[0]["fields"] == {"step": 1}

    def test_levels(self, layer, sink) -> None:
        log = Logger("svc", layer=layer)
        log.trace("a")
        log.debug("b")
        log.info("c")
        log.warn("d")
        log.warning("e")
        log.error("f")
        assert [d["level"] for d in sink.documents()] == [
            "TRACE",
            "DEBUG",
            "INFO",
            "WARN",
            "WARN",
            "ERROR",
        ]

    def test_exception_attaches_error(self, layer, sink) -> None:
        log = Logger("svc", layer=layer)
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("failed")
        document = sink.documents()[0]
        assert document["level"] == "ERROR"
        assert document["fields"]["error"] == {"message": "boom", "source": None}

    def test_spans_isolated_per_thread(self, layer, sink) -> None:
        log = Logger("svc", layer=layer)

        def worker(n: int) -> None:
            with log.span(f"w{n}", worker=n):
                log.info("tick")

        with log.span("main"):
            threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        documents = sink.documents()
        assert len(documents) == 4
        for document in documents:
            assert document["spans"][-1]["name"] == f"w{document['fields']['worker']}"

    def test_builds_layer_from_overrides(self, sink) -> None:
        log = Logger("svc", sink=sink, include_hostname=False)
        log.info("hi")
        assert "hostname" not in sink.documents()[0]


class TestLayerHandler:
    """Tests for the standard library bridge."""

    def test_record_forwarded(self, layer, sink) -> None:
        log = get_logger("tests.bridge.forward", layer)
        log.warning("disk %s", "low", extra={"fields": {"free": 12}})
        document = sink.documents()[0]
        assert document["level"] == "WARN"
        assert document["target"] == "tests.bridge.forward"
        assert document["message"] == "disk low"
        assert document["fields"] == {"free": 12}

    def test_exc_info_becomes_error_field(self, layer, sink) -> None:
        log = get_logger("tests.bridge.exc", layer)
        try:
            raise KeyError("k")
        except KeyError:
            log.exception("lookup failed")
        document = sink.documents()[0]
        assert document["level"] == "ERROR"
        assert document["fields"]["error"]["message"] == "'k'"

    def test_current_span_used(self, layer, sink) -> None:
        log = get_logger("tests.bridge.span", layer)
        front = Logger("svc", layer=layer)
        with front.span("request", request_id="abc"):
            log.info("inside")
        document = sink.documents()[0]
        assert document["fields"] == {"request_id": "abc"}

    def test_get_logger_reuses_configured_logger(self, layer) -> None:
        first = get_logger("tests.bridge.reuse", layer)
        second = get_logger("tests.bridge.reuse", layer)
        assert first is second
        assert len([h for h in first.handlers if isinstance(h, LayerHandler)]) == 1
        assert first.propagate is False
        assert first.level == logging.DEBUG
