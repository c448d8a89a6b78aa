"""tickerboard核心异常类."""

from typing import Any

from tickerboard.core.exceptions.codes import ErrorCode


class TickerboardError(Exception):
    """tickerboard基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        payload: dict[str, Any] = {"code": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class ProviderError(TickerboardError):
    """数据提供商相关异常."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.setdefault("provider", provider_name)
        super().__init__(message, error_code, super_details)
        self.provider_name = provider_name


class SessionError(ProviderError):
    """会话令牌(cookie/crumb)获取失败."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if stage:
            super_details["stage"] = stage
        super().__init__(message, provider_name, ErrorCode.SESSION_ERROR.value, super_details)
        self.stage = stage


class TransportError(ProviderError):
    """网络异常."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, ErrorCode.NETWORK_ERROR.value, super_details)
        self.status_code = status_code


class EnvelopeDecodeError(ProviderError):
    """Top-level response envelope is absent or malformed."""

    def __init__(self, message: str, provider_name: str, details: dict[str, Any] | None = None):
        super().__init__(message, provider_name, ErrorCode.ENVELOPE_ERROR.value, details)


class PatternMatchError(ProviderError):
    """Composite page pattern did not match the markup."""

    def __init__(self, message: str, provider_name: str, details: dict[str, Any] | None = None):
        super().__init__(message, provider_name, ErrorCode.PATTERN_MISMATCH.value, details)


class FieldDecodeError(TickerboardError):
    """单个字段解码失败."""

    def __init__(self, message: str, instrument: str, field: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details.update({"instrument": instrument, "field": field})
        super().__init__(message, ErrorCode.FIELD_DECODE_ERROR.value, super_details)
        self.instrument = instrument
        self.field = field
