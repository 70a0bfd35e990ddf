class TraceJsonError(Exception):
    """Base class for errors raised by tracejson."""


class ConfigurationError(TraceJsonError, ValueError):
    """Raised when formatter options are invalid at pipeline construction.

    Args:
        message: Human readable summary
        errors: Validation errors as reported by pydantic, if any
    """

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        details = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}"
            for e in self.errors
        )
        return f"{self.message} ({details})"
