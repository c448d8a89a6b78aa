"""Yahoo Finance quote provider (structured strategy)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from tickerboard.core.config import ProviderConfig
from tickerboard.core.exceptions import (
    EnvelopeDecodeError,
    FieldDecodeError,
    TickerboardError,
    TransportError,
)
from tickerboard.core.formatting import format_number, format_percent, parse_number
from tickerboard.core.logging import get_logger
from tickerboard.core.models import InstrumentRecord, InstrumentSpec, MarketState
from tickerboard.core.providers.http import send_get
from tickerboard.core.providers.session import SessionTokens
from tickerboard.core.result import Result

logger = get_logger(__name__)

PROVIDER_NAME = "yahoo"

DEFAULT_LAYOUT: tuple[InstrumentSpec, ...] = (
    InstrumentSpec(key="dow", symbol="^DJI", name="Dow"),
    InstrumentSpec(key="nasdaq", symbol="^IXIC", name="Nasdaq"),
    InstrumentSpec(key="sp500", symbol="^GSPC", name="S&P 500"),
    InstrumentSpec(key="tokyo", symbol="^N225", name="Nikkei 225"),
    InstrumentSpec(key="hong_kong", symbol="^HSI", name="Hang Seng"),
    InstrumentSpec(key="london", symbol="^FTSE", name="FTSE 100"),
    InstrumentSpec(key="frankfurt", symbol="^GDAXI", name="DAX"),
    InstrumentSpec(key="yield_10y", symbol="^TNX", name="10-year Yield"),
    InstrumentSpec(key="oil", symbol="CL=F", name="Oil", change_as_percent=True),
    InstrumentSpec(key="yen", symbol="JPY=X", name="Yen", change_as_percent=True),
    InstrumentSpec(key="euro", symbol="EUR=X", name="Euro", change_as_percent=True),
    InstrumentSpec(key="gold", symbol="GC=F", name="Gold", change_as_percent=True),
)

QUERY_PARTS: dict[str, str] = {
    "range": "1d",
    "interval": "5m",
    "indicators": "close",
    "includeTimestamps": "false",
    "includePrePost": "false",
    "corsDomain": "finance.yahoo.com",
    ".tsrc": "finance",
}


@dataclass(frozen=True)
class QuoteBatch:
    """Records extracted from one quote response."""

    records: dict[str, InstrumentRecord] = field(default_factory=dict)
    is_closed: bool = False
    field_errors: tuple[FieldDecodeError, ...] = ()


def request_symbols(layout: Sequence[InstrumentSpec]) -> str:
    """Comma separated symbol list in layout order."""
    return ",".join(spec.symbol for spec in layout)


def _decode_field(result: dict[str, Any], spec: InstrumentSpec, source: str, errors: list[FieldDecodeError]) -> float | None:
    value = parse_number(result.get(source))
    if value is None:
        errors.append(
            FieldDecodeError(
                f"{spec.symbol}: {source} missing or not numeric",
                instrument=spec.key,
                field=source,
                details={"raw": result.get(source)},
            )
        )
    return value


def assign(result: dict[str, Any], spec: InstrumentSpec, errors: list[FieldDecodeError]) -> InstrumentRecord:
    """Build one record from a quote result object.

    Change-as-percent instruments show the percent move in ``change`` and carry
    no ``percent`` field.
    """
    price = _decode_field(result, spec, "regularMarketPrice", errors)
    percent = _decode_field(result, spec, "regularMarketChangePercent", errors)

    fields: dict[str, str | None] = {
        "name": spec.name,
        "latest": format_number(price) if price is not None else None,
    }
    if spec.change_as_percent:
        fields["change"] = format_percent(percent) if percent is not None else None
    else:
        change = _decode_field(result, spec, "regularMarketChange", errors)
        fields["change"] = format_number(change) if change is not None else None
        fields["percent"] = format_number(percent) if percent is not None else None
    return InstrumentRecord(**fields)


class YahooQuoteProvider:
    """Yahoo Finance quote endpoint adapter and extractor."""

    name = PROVIDER_NAME

    def __init__(self, client: httpx.Client, config: ProviderConfig | None = None) -> None:
        self.client = client
        self.config = config or ProviderConfig()

    def _headers(self, tokens: SessionTokens) -> dict[str, str]:
        return {
            "Accept": "*/*",
            "Accept-Language": "en-US,en;q=0.5",
            "Content-Type": "application/json",
            "Cookie": tokens.cookie,
            "Origin": "https://finance.yahoo.com",
            "Referer": "https://finance.yahoo.com",
            "Sec-Fetch-Dest": "empty",
            "Sec-Fetch-Mode": "cors",
            "Sec-Fetch-Site": "same-site",
            "User-Agent": self.config.user_agent,
        }

    def fetch(self, layout: Sequence[InstrumentSpec], tokens: SessionTokens) -> Result[bytes]:
        """Issue the quote request for every symbol in ``layout``."""
        params = {"crumb": tokens.crumb, "symbols": request_symbols(layout), **QUERY_PARTS}
        try:
            response = send_get(
                self.client,
                self.config.yahoo_quote_url,
                provider=self.name,
                headers=self._headers(tokens),
                params=params,
            )
        except TransportError as e:
            return Result.failure(e)
        return Result.success(response.content)

    def extract(self, body: bytes | str, layout: Sequence[InstrumentSpec]) -> Result[QuoteBatch]:
        """Decode the quote envelope and map results to records by symbol."""
        try:
            results = self._results(body)
        except TickerboardError as e:
            return Result.failure(e)

        by_symbol: dict[str, dict[str, Any]] = {}
        for item in results:
            if isinstance(item, dict) and isinstance(item.get("symbol"), str):
                by_symbol.setdefault(item["symbol"], item)

        records: dict[str, InstrumentRecord] = {}
        errors: list[FieldDecodeError] = []
        for spec in layout:
            item = by_symbol.get(spec.symbol)
            if item is None:
                errors.append(FieldDecodeError(f"{spec.symbol}: no result", instrument=spec.key, field="*"))
                continue
            records[spec.key] = assign(item, spec, errors)

        log = logger.bind(provider=self.name)
        for error in errors:
            log.debug(error.message)

        return Result.success(
            QuoteBatch(records=records, is_closed=self._is_closed(by_symbol, layout), field_errors=tuple(errors))
        )

    def _results(self, body: bytes | str) -> list[Any]:
        try:
            payload = json.loads(body)
        except (ValueError, TypeError, RecursionError) as e:
            raise EnvelopeDecodeError(f"Invalid JSON from quote endpoint: {e}", self.name) from e

        envelope = payload.get("quoteResponse") if isinstance(payload, dict) else None
        if not isinstance(envelope, dict):
            raise EnvelopeDecodeError("Response has no quoteResponse object", self.name)
        results = envelope.get("result")
        if not isinstance(results, list):
            detail = envelope.get("error")
            raise EnvelopeDecodeError(
                "quoteResponse has no result list",
                self.name,
                details={"error": detail} if detail else None,
            )
        return results

    @staticmethod
    def _is_closed(by_symbol: dict[str, dict[str, Any]], layout: Sequence[InstrumentSpec]) -> bool:
        for spec in layout:
            item = by_symbol.get(spec.symbol)
            if item is None:
                continue
            state = item.get("marketState")
            if not isinstance(state, str):
                return False
            return state.upper() != MarketState.REGULAR.value
        return False
