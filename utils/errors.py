"""Error kinds shared by the data sources, the query pipeline and the API."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories a caller can distinguish."""
    INVALID_INPUT = "invalid_input"
    SOURCE_UNAVAILABLE = "source_unavailable"
    INVALID_SYMBOL = "invalid_symbol"
    GENERATION_FAILURE = "generation_failure"
    INTERNAL_FAILURE = "internal_failure"


class AgentError(Exception):
    """Base error carrying an ErrorKind and a user-facing message."""

    kind: ErrorKind = ErrorKind.INTERNAL_FAILURE

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        self.message = message
        if kind is not None:
            self.kind = kind
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, message={self.message!r})"


class InvalidInputError(AgentError):
    """Empty query or malformed parameters, rejected before dispatch."""
    kind = ErrorKind.INVALID_INPUT


class DataSourceError(AgentError):
    """Per-plugin fetch failure. Absorbed by the dispatcher."""
    kind = ErrorKind.SOURCE_UNAVAILABLE


class SourceUnavailableError(DataSourceError):
    kind = ErrorKind.SOURCE_UNAVAILABLE


class InvalidSymbolError(DataSourceError):
    kind = ErrorKind.INVALID_SYMBOL


class GenerationError(AgentError):
    """The language-generation step failed. Always surfaced to the caller."""
    kind = ErrorKind.GENERATION_FAILURE


class InternalFailureError(AgentError):
    kind = ErrorKind.INTERNAL_FAILURE


__all__ = [
    "ErrorKind",
    "AgentError",
    "InvalidInputError",
    "DataSourceError",
    "SourceUnavailableError",
    "InvalidSymbolError",
    "GenerationError",
    "InternalFailureError",
]
