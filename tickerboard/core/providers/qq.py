"""腾讯财经 A股指数页面配置."""

from tickerboard.core.config import ProviderConfig
from tickerboard.core.providers.scraped import ScrapeProfile, ScrapeRule

PROVIDER_NAME = "qq"

# Page order: the composite pattern is matched in this sequence.
CN_INDEX_RULES: tuple[ScrapeRule, ...] = (
    ScrapeRule(key="szzs", marker="上证指数", name="SSE Composite"),
    ScrapeRule(key="szcz", marker="深证成指", name="SZSE Component"),
    ScrapeRule(key="hs300", marker="沪深300", name="CSI300"),
    ScrapeRule(key="cybz", marker="创业板指", name="ChiNext"),
)


def qq_profile(config: ProviderConfig | None = None) -> ScrapeProfile:
    config = config or ProviderConfig()
    return ScrapeProfile(
        name=PROVIDER_NAME,
        url=config.qq_page_url,
        origin="https://finance.qq.com",
        rules=CN_INDEX_RULES,
        encoding=config.qq_encoding,
    )
