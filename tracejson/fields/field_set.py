"""Insertion-ordered field mappings with base-wins merging."""

from collections.abc import Iterator, Mapping
from typing import Any

from tracejson.fields.visitor import ValueVisitor, clean_text


class FieldSet:
    """Ordered mapping from field name to document node.

    Re-inserting an existing key updates its value in place; the key keeps
    the position of its first insertion.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, Any] = dict(values) if values else {}

    @classmethod
    def from_values(cls, values: Mapping[str, Any], visitor: ValueVisitor) -> "FieldSet":
        """Build a field set by running every raw value through ``visitor``."""
        field_set = cls()
        for key, value in values.items():
            field_set.insert(clean_text(str(key)), visitor.visit(value))
        return field_set

    def insert(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def keys(self):
        return self._values.keys()

    def items(self):
        return self._values.items()

    def copy(self) -> "FieldSet":
        return FieldSet(self._values)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def merged(self, overlay: "FieldSet") -> "FieldSet":
        return merge(self, overlay)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __bool__(self) -> bool:
        return bool(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldSet):
            return list(self._values.items()) == list(other._values.items())
        return NotImplemented

    def __repr__(self) -> str:
        return f"FieldSet({self._values!r})"


def merge(base: FieldSet, overlay: FieldSet) -> FieldSet:
    """Return ``base`` followed by the ``overlay`` entries whose key is new.

    Base wins: an overlay value never replaces a base value with the same key.
    """
    result = base.copy()
    values = result._values
    for key, value in overlay.items():
        if key not in values:
            values[key] = value
    return result
