"""Error types raised by the conversion engine."""

from typing import Optional


class ConversionError(Exception):
    """Raised when a payload or configuration cannot be converted.

    Only structural problems end up here: malformed JSON, unparsable XML, a
    configuration of the wrong type, or missing required configuration.
    Field-level data anomalies are handled by policy and never raise.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message
