from tracejson.spans.store import SpanContextStore, SpanId, SpanNode, SpanSnapshot

__all__ = ["SpanContextStore", "SpanId", "SpanNode", "SpanSnapshot"]
