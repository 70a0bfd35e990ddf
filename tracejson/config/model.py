from typing import Literal

from pydantic import BaseModel, Field, field_validator


class FormatterConfig(BaseModel, frozen=True, extra="forbid"):
    """Validated formatter options.

    ``timestamp_format`` is either ``rfc3339`` or a strftime pattern with at
    least one ``%`` directive.
    """

    timestamp_format: str = "rfc3339"
    utc_offset_hours: int = Field(default=0, ge=-12, le=14)
    oversized_integer_policy: Literal["numeric", "stringify"] = "numeric"
    non_finite_float_policy: Literal["null", "string"] = "null"
    error_chain_depth_limit: int = Field(default=8, ge=1)
    include_hostname: bool = True
    line_terminator: Literal["\n", "\r\n"] = "\n"
    emit_span_events: bool = False
    max_span_depth: int = Field(default=256, ge=1)
    store_shards: int = Field(default=16, ge=1)

    @field_validator("timestamp_format")
    @classmethod
    def _check_timestamp_format(cls, value: str) -> str:
        if value.lower() == "rfc3339":
            return "rfc3339"
        if "%" not in value:
            raise ValueError("custom timestamp format must contain a strftime directive")
        return value
