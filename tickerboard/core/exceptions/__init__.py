"""Exception handling module."""

from tickerboard.core.exceptions.base import (
    EnvelopeDecodeError,
    FieldDecodeError,
    PatternMatchError,
    ProviderError,
    SessionError,
    TickerboardError,
    TransportError,
)
from tickerboard.core.exceptions.codes import ErrorCode

__all__ = [
    "TickerboardError",
    "ProviderError",
    "SessionError",
    "TransportError",
    "EnvelopeDecodeError",
    "PatternMatchError",
    "FieldDecodeError",
    "ErrorCode",
]
