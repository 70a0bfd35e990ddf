from tracejson.fields.field_set import FieldSet, merge
from tracejson.fields.visitor import (
    TRUNCATION_MARKER,
    FieldKind,
    FieldValue,
    ValueVisitor,
    clean_text,
)

__all__ = [
    "FieldSet",
    "merge",
    "FieldKind",
    "FieldValue",
    "ValueVisitor",
    "TRUNCATION_MARKER",
    "clean_text",
]
