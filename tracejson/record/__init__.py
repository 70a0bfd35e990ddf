from tracejson.record.assembler import EventRecord, Level, assemble, merge_span_fields

__all__ = ["EventRecord", "Level", "assemble", "merge_span_fields"]
