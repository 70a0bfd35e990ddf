import contextvars
import sys
import threading

current_span_var = contextvars.ContextVar("tracejson_current_span", default=None)

_span_ids_lock = threading.Lock()
_last_span_id = 0


def next_span_id() -> int:
    """Allocate a process-unique span identifier."""
    global _last_span_id
    with _span_ids_lock:
        _last_span_id += 1
        return _last_span_id


def current_span_id():
    return current_span_var.get()


def active_exception() -> BaseException | None:
    """Return the exception being handled, if any."""
    return sys.exc_info()[1]


def get_caller_module(skip_stack: int = 2) -> str:
    frame = sys._getframe(skip_stack)
    return frame.f_globals.get("__name__", "__main__")
