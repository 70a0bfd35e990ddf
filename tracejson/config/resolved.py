from pathlib import Path

from pydantic import ValidationError

from tracejson.config.builder import ConfigBuilder
from tracejson.config.model import FormatterConfig
from tracejson.errors import ConfigurationError


class ResolvedConfig:
    """Final formatter configuration for one pipeline.

    Keyword overrides win over every value found by ``ConfigBuilder``.
    Unknown or invalid options raise ``ConfigurationError``.
    """

    def __init__(self, config_dir: Path | str | None = ".tracejson", **overrides):
        self.config_dir = config_dir
        self.overrides = overrides

    def _apply_overrides(self, cfg: dict) -> dict:
        for k, v in self.overrides.items():
            cfg[k] = v
        return cfg

    def get(self) -> FormatterConfig:
        cfg = ConfigBuilder(self.config_dir).build()
        cfg = self._apply_overrides(cfg)
        try:
            return FormatterConfig(**cfg)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid formatter configuration",
                errors=e.errors(include_url=False),
            ) from e
