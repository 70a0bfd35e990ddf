import logging

from tracejson.logger.context import current_span_id, current_span_var, next_span_id
from tracejson.logger.handler import LayerHandler

__all__ = [
    "LayerHandler",
    "current_span_id",
    "current_span_var",
    "get_logger",
    "next_span_id",
]


def get_logger(name: str, layer, log_level: int = logging.DEBUG) -> logging.Logger:
    """Get or create a standard library logger that writes through ``layer``.

    Returns the existing logger unchanged if it already has handlers.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.addHandler(LayerHandler(layer))
    logger.setLevel(log_level)
    logger.propagate = False
    return logger
