"""Error codes shared across the fetch pipeline."""

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    SESSION_ERROR = "SESSION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    ENVELOPE_ERROR = "ENVELOPE_ERROR"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    FIELD_DECODE_ERROR = "FIELD_DECODE_ERROR"
