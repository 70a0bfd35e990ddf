from tracejson.config.builder import ConfigBuilder
from tracejson.config.model import FormatterConfig
from tracejson.config.resolved import ResolvedConfig

__all__ = ["ConfigBuilder", "FormatterConfig", "ResolvedConfig"]
