"""Pytest configuration for the tickerboard test suite."""

from __future__ import annotations

import copy
import io
import json
from typing import Any, Callable

import httpx
import pytest

from tickerboard.core.config import TickerboardConfig
from tickerboard.core.logging import configure_logging, logger
from tickerboard.core.market import Market

# symbol -> (price, change, change percent)
QUOTES: dict[str, tuple[float, float, float]] = {
    "^DJI": (38654.42, 125.69, 0.3262),
    "^IXIC": (16274.94, -44.8, -0.2751),
    "^GSPC": (5123.69, 7.52, 0.147),
    "^N225": (40109.23, 198.41, 0.4971),
    "^HSI": (16589.44, -130.52, -0.7806),
    "^FTSE": (7727.42, 17.11, 0.2219),
    "^GDAXI": (17814.51, 78.4, 0.442),
    "^TNX": (4.25, -0.031, -0.7243),
    "CL=F": (78.26, -1.5, -2.3),
    "JPY=X": (149.57, 0.21, 0.1406),
    "EUR=X": (0.9213, -0.0008, -0.0868),
    "GC=F": (2185.5, 6.4, 0.2937),
}

CN_PAGE = """<!DOCTYPE html>
<html><head><meta charset="gbk"><title>腾讯财经</title></head>
<body>
<div class="index-bar">
  <ul>
    <li><a href="/sh000001"><span class="name">上证指数</span></a>
        <span class="pct">+0.52%</span>
        <span class="price">3,012.34</span>
        <span class="chg">+15.60</span></li>
    <li><span class="name">深证成指</span><span class="pct">-0.18%</span><span class="price">9,456.78</span><span class="chg">-17.02</span></li>
    <li><span class="name">沪深300</span><span class="pct">+0.41%</span><span class="price">3,520.10</span><span class="chg">+14.37</span></li>
    <li><span class="name">创业板指</span><span class="pct">-1.05%</span><span class="price">1,845.66</span><span class="chg">-19.58</span></li>
  </ul>
</div>
</body></html>
"""


def build_quote_payload(
    quotes: dict[str, tuple[float, float, float]] | None = None,
    market_state: str = "REGULAR",
) -> dict[str, Any]:
    """Build a quoteResponse envelope in request order."""

    results = []
    for symbol, (price, change, percent) in (quotes or QUOTES).items():
        results.append(
            {
                "symbol": symbol,
                "marketState": market_state,
                "regularMarketPrice": price,
                "regularMarketChange": change,
                "regularMarketChangePercent": percent,
            }
        )
    return {"quoteResponse": {"result": results, "error": None}}


class ProviderStub:
    """Routes mocked requests to canned Yahoo and QQ responses."""

    def __init__(self) -> None:
        self.quote_payload: Any = build_quote_payload()
        self.quote_status = 200
        self.quote_error = False
        self.crumb = "Xk3pQ9zT1bC"
        self.cookie_headers = [("set-cookie", "A3=d=AQABBKx2; Domain=.yahoo.com; Path=/; Secure; HttpOnly")]
        self.cn_page = CN_PAGE
        self.cn_status = 200
        self.cn_error = False
        self.requests: list[httpx.Request] = []

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == "fc.yahoo.com":
            return httpx.Response(404, headers=self.cookie_headers, text="Not Found")
        if path == "/v1/test/getcrumb":
            return httpx.Response(200, text=self.crumb)
        if path == "/v7/finance/quote":
            if self.quote_error:
                raise httpx.ConnectError("connection refused", request=request)
            if isinstance(self.quote_payload, (bytes, str)):
                return httpx.Response(self.quote_status, content=self.quote_payload)
            return httpx.Response(self.quote_status, json=copy.deepcopy(self.quote_payload))
        if host == "finance.qq.com":
            if self.cn_error:
                raise httpx.ReadTimeout("read timed out", request=request)
            return httpx.Response(self.cn_status, content=self.cn_page.encode("gbk"))
        return httpx.Response(404)


@pytest.fixture
def quotes() -> dict[str, tuple[float, float, float]]:
    return dict(QUOTES)


@pytest.fixture
def payload_builder() -> Callable[..., dict[str, Any]]:
    return build_quote_payload


@pytest.fixture
def cn_page() -> str:
    return CN_PAGE


@pytest.fixture
def stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def client_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    clients: list[httpx.Client] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def market(stub: ProviderStub, client_factory) -> Market:
    return Market(config=TickerboardConfig(), client=client_factory(stub))


@pytest.fixture
def log_records() -> Callable[[], list[dict[str, Any]]]:
    """Capture JSON log lines emitted while the test runs."""

    stream = io.StringIO()
    configure_logging("DEBUG", console_stream=stream, serialize=True)

    def read() -> list[dict[str, Any]]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]

    yield read
    logger.remove()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--tickerboard-run-integration",
        action="store_true",
        default=False,
        help="Run tests that hit the live quote providers.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--tickerboard-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --tickerboard-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
