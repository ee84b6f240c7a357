from .logger import setup_logger, logger
from .errors import (
    ErrorKind,
    AgentError,
    InvalidInputError,
    DataSourceError,
    SourceUnavailableError,
    InvalidSymbolError,
    GenerationError,
    InternalFailureError,
)
from .helpers import (
    utc_now,
    format_timestamp,
    format_currency,
    format_percentage,
)
from .validators import validate_symbol, validate_query

__all__ = [
    "setup_logger",
    "logger",
    "ErrorKind",
    "AgentError",
    "InvalidInputError",
    "DataSourceError",
    "SourceUnavailableError",
    "InvalidSymbolError",
    "GenerationError",
    "InternalFailureError",
    "utc_now",
    "format_timestamp",
    "format_currency",
    "format_percentage",
    "validate_symbol",
    "validate_query",
]
