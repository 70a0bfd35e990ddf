"""Byte sinks that accept line-terminated records from many threads."""

import sys
import threading
from pathlib import Path
from typing import BinaryIO, Protocol


class Sink(Protocol):
    def write(self, data: bytes) -> None: ...


class StreamSink:
    """Writes to a binary stream, or to the buffer behind a text stream.

    Defaults to ``sys.stdout``. Each record is written and flushed under a lock
    so lines from different threads never interleave.
    """

    def __init__(self, stream=None):
        stream = sys.stdout if stream is None else stream
        self.stream: BinaryIO = getattr(stream, "buffer", stream)
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            self.stream.write(data)
            self.stream.flush()


class FileSink:
    """Appends records to a file, creating parent directories as needed."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, "ab")
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._lock:
            self._file.write(data)
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()
