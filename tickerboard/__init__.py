"""tickerboard - 全球市场指标行情

汇总多个数据源的指数、商品、汇率与债券收益率行情，生成一致的快照。
"""

from tickerboard.core.market import Market, fetch, get_market
from tickerboard.core.models import InstrumentRecord, Snapshot, Vendor

__version__ = "0.1.0"

__all__ = [
    "InstrumentRecord",
    "Market",
    "Snapshot",
    "Vendor",
    "fetch",
    "get_market",
    "__version__",
]
