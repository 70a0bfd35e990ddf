"""Conversion of typed field values into document nodes.

A document node is the plain Python value that the JSON encoder understands:
``None``, ``bool``, ``int``, ``float``, ``str``, ``list`` or ``dict``. Field
values are first classified into a closed set of kinds (see ``FieldKind``) and
each kind has exactly one conversion method on ``ValueVisitor``.

Example:
    >>> visitor = ValueVisitor(oversized_integer_policy="stringify")
    >>> visitor.visit(2**60)
    '1152921504606846976'
    >>> visitor.visit(ValueError("boom"))
    {'message': 'boom', 'source': None}
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1
U64_MAX = 2**64 - 1
# Largest integer a binary64 float represents exactly.
SAFE_INTEGER_MAX = 2**53 - 1

TRUNCATION_MARKER = "<error chain truncated>"

OVERSIZED_INTEGER_POLICIES = ("numeric", "stringify")
NON_FINITE_FLOAT_POLICIES = ("null", "string")


class FieldKind(str, Enum):
    NULL = "null"
    STR = "str"
    I64 = "i64"
    U64 = "u64"
    F64 = "f64"
    BOOL = "bool"
    DEBUG = "debug"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class FieldValue:
    """A field value tagged with its kind."""

    kind: FieldKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> "FieldValue":
        """Classify an arbitrary Python value.

        ``bool`` is checked before ``int`` since it is a subclass of it.
        Integers outside the unsigned 64-bit range become debug values and
        are rendered as decimal strings.
        """
        if isinstance(value, FieldValue):
            return value
        if value is None:
            return cls(FieldKind.NULL, None)
        if isinstance(value, bool):
            return cls(FieldKind.BOOL, value)
        if isinstance(value, int):
            if I64_MIN <= value <= I64_MAX:
                return cls(FieldKind.I64, int(value))
            if 0 <= value <= U64_MAX:
                return cls(FieldKind.U64, int(value))
            return cls(FieldKind.DEBUG, value)
        if isinstance(value, float):
            return cls(FieldKind.F64, float(value))
        if isinstance(value, str):
            return cls(FieldKind.STR, value)
        if isinstance(value, BaseException):
            return cls(FieldKind.ERROR, value)
        return cls(FieldKind.DEBUG, value)


def clean_text(value: str) -> str:
    """Return ``value`` as a plain str that encodes as UTF-8.

    Lone surrogates, as produced by ``os.fsdecode`` or ``surrogateescape``,
    are replaced with backslash escapes.
    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value.encode("utf-8", "backslashreplace").decode("utf-8")
    return str(value)


def _text(value: Any) -> str:
    try:
        text = str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"
    return clean_text(text)


def _error_message(exc: BaseException) -> str:
    message = _text(exc)
    return message if message else type(exc).__name__


def _error_source(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


class ValueVisitor:
    """Turns field values into document nodes.

    The visitor is stateless once constructed and may be shared between
    threads.

    Args:
        oversized_integer_policy: ``numeric`` keeps every 64-bit integer as a
            number, ``stringify`` renders integers beyond 2**53-1 in magnitude
            as decimal strings
        error_chain_depth_limit: Maximum number of error mappings produced for
            one cause chain
        non_finite_float_policy: ``null`` renders NaN and infinities as null,
            ``string`` renders them as ``"NaN"``, ``"inf"`` and ``"-inf"``
    """

    def __init__(
        self,
        oversized_integer_policy: str = "numeric",
        error_chain_depth_limit: int = 8,
        non_finite_float_policy: str = "null",
    ):
        self.oversized_integer_policy = oversized_integer_policy
        self.error_chain_depth_limit = error_chain_depth_limit
        self.non_finite_float_policy = non_finite_float_policy
        self._dispatch = {
            FieldKind.NULL: self._visit_null,
            FieldKind.STR: self._visit_str,
            FieldKind.I64: self._visit_int,
            FieldKind.U64: self._visit_int,
            FieldKind.F64: self._visit_float,
            FieldKind.BOOL: self._visit_bool,
            FieldKind.DEBUG: self._visit_debug,
            FieldKind.ERROR: self._visit_error,
        }

    def visit(self, value: Any):
        field = FieldValue.of(value)
        return self._dispatch[field.kind](field.value)

    def _visit_null(self, value):
        return None

    def _visit_str(self, value: str) -> str:
        return clean_text(value)

    def _visit_bool(self, value: bool) -> bool:
        return value

    def _visit_int(self, value: int) -> int | str:
        if self.oversized_integer_policy == "stringify" and abs(value) > SAFE_INTEGER_MAX:
            return str(value)
        return value

    def _visit_float(self, value: float) -> float | str | None:
        if math.isfinite(value):
            return value
        if self.non_finite_float_policy == "string":
            return repr(value).replace("nan", "NaN")
        return None

    def _visit_debug(self, value: Any) -> str:
        return _text(value)

    def _visit_error(self, exc: BaseException) -> dict:
        root = {"message": _error_message(exc), "source": None}
        current = root
        source = _error_source(exc)
        depth = 1
        while source is not None:
            if depth >= self.error_chain_depth_limit:
                current["source"] = TRUNCATION_MARKER
                break
            nested = {"message": _error_message(source), "source": None}
            current["source"] = nested
            current = nested
            source = _error_source(source)
            depth += 1
        return root
