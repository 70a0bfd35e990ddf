import os
from pathlib import Path

from dotenv import load_dotenv

from tracejson.utils.files import find_config_file, load_from_yaml


class ConfigBuilder:
    """Collects raw formatter options from YAML, environment and defaults.

    For every option the YAML value wins, then the environment variable, then
    the default. Values are not validated here; see ``FormatterConfig``.
    """

    def __init__(self, config_dir: Path | str | None = ".tracejson"):
        self.config_dir = Path(config_dir) if config_dir is not None else None
        self.config_yaml = {}

        self.mapping = {
            "timestamp_format": {
                "config": "timestamp.format",
                "env": "TRACEJSON_TIMESTAMP_FORMAT",
                "default": "rfc3339",
            },
            "utc_offset_hours": {
                "config": "timestamp.utc_offset_hours",
                "env": "TRACEJSON_UTC_OFFSET_HOURS",
                "default": 0,
            },
            "oversized_integer_policy": {
                "config": "fields.oversized_integer_policy",
                "env": "TRACEJSON_OVERSIZED_INTEGER_POLICY",
                "default": "numeric",
            },
            "non_finite_float_policy": {
                "config": "fields.non_finite_float_policy",
                "env": "TRACEJSON_NON_FINITE_FLOAT_POLICY",
                "default": "null",
            },
            "error_chain_depth_limit": {
                "config": "fields.error_chain_depth_limit",
                "env": "TRACEJSON_ERROR_CHAIN_DEPTH_LIMIT",
                "default": 8,
            },
            "include_hostname": {
                "config": "record.include_hostname",
                "env": "TRACEJSON_INCLUDE_HOSTNAME",
                "default": True,
            },
            "line_terminator": {
                "config": "record.line_terminator",
                "default": "\n",
            },
            "emit_span_events": {
                "config": "spans.emit_events",
                "env": "TRACEJSON_EMIT_SPAN_EVENTS",
                "default": False,
            },
            "max_span_depth": {
                "config": "spans.max_depth",
                "default": 256,
            },
            "store_shards": {
                "config": "spans.store_shards",
                "default": 16,
            },
        }

        load_dotenv()
        self._load_yaml()

    def _load_yaml(self):
        if self.config_dir is None:
            return
        path = find_config_file(self.config_dir)
        if path is not None:
            self.config_yaml = load_from_yaml(path) or {}

    def _from_yaml(self, path: str):
        cur = self.config_yaml
        for part in path.split("."):
            if not isinstance(cur, dict) or part not in cur:
                return None
            cur = cur[part]
        return cur

    def _resolve(self, spec: dict):
        if spec.get("config"):
            val = self._from_yaml(spec["config"])
            if val is not None:
                return val

        if spec.get("env"):
            val = os.getenv(spec["env"])
            if val is not None:
                return val

        return spec.get("default")

    def build(self) -> dict:
        return {k: self._resolve(spec) for k, spec in self.mapping.items()}
