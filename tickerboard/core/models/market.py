"""Market-related enums and types."""

from enum import Enum


class Vendor(str, Enum):
    """数据供应商选择器枚举."""

    YAHOO = "yahoo"
    QQ = "qq"
    SINA = "sina"
    NETEASE = "netease"
    EASTMONEY = "eastmoney"
    EASTMONEY_LIMITUP = "eastmoney-limitup"
    EASTMONEY_LHB = "eastmoney-lhb"

    @classmethod
    def parse(cls, value: "Vendor | str") -> "Vendor":
        """Resolve a vendor selector, accepting underscores and any case."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        try:
            return cls(normalized)
        except ValueError as exc:
            allowed = ", ".join(vendor.value for vendor in cls)
            raise ValueError(f"Unsupported vendor '{value}'. Allowed values: {allowed}") from exc


class MarketState(str, Enum):
    """Yahoo marketState values."""

    PRE = "PRE"
    REGULAR = "REGULAR"
    POST = "POST"
    POSTPOST = "POSTPOST"
    PREPRE = "PREPRE"
    CLOSED = "CLOSED"
