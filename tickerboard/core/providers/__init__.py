"""数据提供商适配器."""

from tickerboard.core.providers.http import HttpConfig, create_client, send_get
from tickerboard.core.providers.qq import CN_INDEX_RULES, qq_profile
from tickerboard.core.providers.scraped import (
    ScrapedQuoteProvider,
    ScrapeProfile,
    ScrapeRule,
    build_composite_pattern,
)
from tickerboard.core.providers.session import SessionTokens, YahooSession
from tickerboard.core.providers.yahoo import DEFAULT_LAYOUT, QuoteBatch, YahooQuoteProvider

__all__ = [
    "CN_INDEX_RULES",
    "DEFAULT_LAYOUT",
    "HttpConfig",
    "QuoteBatch",
    "ScrapeProfile",
    "ScrapeRule",
    "ScrapedQuoteProvider",
    "SessionTokens",
    "YahooQuoteProvider",
    "YahooSession",
    "build_composite_pattern",
    "create_client",
    "qq_profile",
    "send_get",
]
