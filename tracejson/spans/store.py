"""Per-span field storage shared by all instrumentation threads.

Spans are kept in a fixed number of shards, each guarded by its own lock, so
entering and closing spans only contends with spans hashed to the same shard.
Field recording takes the lock of the span node itself; unrelated spans never
wait on each other.
"""

import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass

from tracejson.fields import FieldSet

logger = logging.getLogger(__name__)

SpanId = Hashable


class SpanNode:
    """Mutable state of one active span. Owned by ``SpanContextStore``."""

    __slots__ = ("identifier", "parent", "name", "target", "fields", "_lock")

    def __init__(
        self,
        identifier: SpanId,
        parent: SpanId | None,
        name: str,
        target: str,
        fields: FieldSet | None = None,
    ):
        self.identifier = identifier
        self.parent = parent
        self.name = name
        self.target = target
        self.fields = fields.copy() if fields else FieldSet()
        self._lock = threading.Lock()

    def record(self, delta: FieldSet) -> None:
        with self._lock:
            for key, value in delta.items():
                self.fields.insert(key, value)

    def snapshot(self) -> "SpanSnapshot":
        with self._lock:
            fields = self.fields.copy()
        return SpanSnapshot(
            identifier=self.identifier,
            parent=self.parent,
            name=self.name,
            target=self.target,
            fields=fields,
        )


@dataclass(frozen=True, slots=True)
class SpanSnapshot:
    """Point-in-time copy of a span node, safe to read without locking."""

    identifier: SpanId
    parent: SpanId | None
    name: str
    target: str
    fields: FieldSet


class _Shard:
    __slots__ = ("nodes", "lock")

    def __init__(self):
        self.nodes: dict = {}
        self.lock = threading.Lock()


class SpanContextStore:
    """Maps span identifiers to their accumulated fields.

    Args:
        shards: Number of independently locked partitions
        max_depth: Longest parent chain ``chain_of`` will walk
    """

    def __init__(self, shards: int = 16, max_depth: int = 256):
        self.max_depth = max_depth
        self._shards = [_Shard() for _ in range(max(1, shards))]
        self._unknown_reported = threading.Lock()

    def _shard(self, identifier: SpanId) -> _Shard:
        return self._shards[hash(identifier) % len(self._shards)]

    def _get(self, identifier: SpanId) -> SpanNode | None:
        shard = self._shard(identifier)
        with shard.lock:
            return shard.nodes.get(identifier)

    def _report_unknown(self, operation: str, identifier: SpanId) -> None:
        if not self._unknown_reported.acquire(blocking=False):
            return
        logger.warning(
            "Span %r is not known to the store (%s); further occurrences are not reported",
            identifier,
            operation,
        )

    def on_enter(
        self,
        identifier: SpanId,
        parent: SpanId | None,
        name: str,
        target: str,
        fields: FieldSet | None = None,
    ) -> bool:
        """Create the span node unless it already exists.

        Returns:
            True if a node was created, False if the span was re-entered
        """
        shard = self._shard(identifier)
        with shard.lock:
            if identifier in shard.nodes:
                return False
            shard.nodes[identifier] = SpanNode(identifier, parent, name, target, fields)
            return True

    def on_record(self, identifier: SpanId, delta: FieldSet) -> None:
        """Add ``delta`` to the span's fields.

        Keys named in ``delta`` take its value; keys the span already had keep
        their position. Unknown spans are ignored.
        """
        node = self._get(identifier)
        if node is None:
            self._report_unknown("record", identifier)
            return
        node.record(delta)

    def on_close(self, identifier: SpanId) -> SpanSnapshot | None:
        """Remove the span node and return its final snapshot."""
        shard = self._shard(identifier)
        with shard.lock:
            node = shard.nodes.pop(identifier, None)
        if node is None:
            self._report_unknown("close", identifier)
            return None
        return node.snapshot()

    def get(self, identifier: SpanId) -> SpanSnapshot | None:
        node = self._get(identifier)
        return node.snapshot() if node is not None else None

    def chain_of(self, identifier: SpanId | None) -> list[SpanSnapshot]:
        """Snapshots from ``identifier`` up to its root, deepest first.

        The walk stops at a missing parent, a parent already visited, or after
        ``max_depth`` spans.
        """
        chain: list[SpanSnapshot] = []
        seen = set()
        current = identifier
        while current is not None and current not in seen and len(chain) < self.max_depth:
            seen.add(current)
            node = self._get(current)
            if node is None:
                break
            chain.append(node.snapshot())
            current = node.parent
        return chain

    def __contains__(self, identifier: SpanId) -> bool:
        return self._get(identifier) is not None

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.nodes)
        return total
