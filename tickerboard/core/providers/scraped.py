"""HTML scraping providers (scraped strategy)."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from tickerboard.core.exceptions import PatternMatchError, TransportError
from tickerboard.core.formatting import format_number, format_percent, parse_number
from tickerboard.core.logging import get_logger
from tickerboard.core.models import InstrumentRecord
from tickerboard.core.providers.http import send_get
from tickerboard.core.result import Result

logger = get_logger(__name__)

ANY = r"\s*(?:.+?)"
PERCENT = r">(?P<{key}_percent>[\+\-]?[\d\.,]+%?)<"
PRICE = r">(?P<{key}_price>[\d\.,]+)</span>"
CHANGE = r">(?P<{key}_change>[\+\-]?[\d\.,]+)</span>"


@dataclass(frozen=True)
class ScrapeRule:
    """One instrument block on a page: header marker, percent, price, change."""

    key: str
    marker: str
    name: str
    has_change: bool = True

    def pattern(self) -> str:
        """Sub-pattern for this block.

        Each capture and the markup before it form an atomic group: a matched
        capture is never re-tried, so a page that stops matching fails fast.
        """
        captures = [PERCENT, PRICE]
        if self.has_change:
            captures.append(CHANGE)
        parts = [">" + re.escape(self.marker) + "<"]
        parts += ["(?>" + ANY + capture.format(key=self.key) + ")" for capture in captures]
        return "(?>" + "".join(parts) + ")"


@dataclass(frozen=True)
class ScrapeProfile:
    """Where to fetch a page and how to read it."""

    name: str
    url: str
    origin: str
    rules: tuple[ScrapeRule, ...]
    encoding: str = "utf-8"


def build_composite_pattern(rules: Sequence[ScrapeRule]) -> re.Pattern[str]:
    """Join per-instrument sub-patterns, in page order, into one regex."""
    if not rules:
        raise ValueError("at least one scrape rule is required")
    return re.compile(ANY.join(rule.pattern() for rule in rules), re.DOTALL)


def _record(rule: ScrapeRule, match: re.Match[str]) -> InstrumentRecord:
    price = parse_number(match.group(f"{rule.key}_price"))
    percent = parse_number(match.group(f"{rule.key}_percent"))
    latest = format_number(price) if price is not None else None
    percent_text = format_percent(percent) if percent is not None else None

    if not rule.has_change:
        return InstrumentRecord(name=rule.name, latest=latest, change=percent_text)

    change = parse_number(match.group(f"{rule.key}_change"))
    return InstrumentRecord(
        name=rule.name,
        latest=latest,
        change=format_number(change) if change is not None else None,
        percent=percent_text,
    )


class ScrapedQuoteProvider:
    """Fetches a vendor page and reads quotes with a composite pattern."""

    def __init__(self, client: httpx.Client, profile: ScrapeProfile, user_agent: str | None = None) -> None:
        self.client = client
        self.profile = profile
        self.user_agent = user_agent
        self.pattern = build_composite_pattern(profile.rules)

    @property
    def name(self) -> str:
        return self.profile.name

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.5",
            "Origin": self.profile.origin,
            "Referer": self.profile.origin,
        }
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers

    def fetch(self) -> Result[str]:
        """下载页面并按配置编码解码."""
        try:
            response = send_get(self.client, self.profile.url, provider=self.name, headers=self._headers())
        except TransportError as e:
            return Result.failure(e)
        return Result.success(response.content.decode(self.profile.encoding, errors="replace"))

    def extract(self, page: str) -> Result[dict[str, InstrumentRecord]]:
        """Match the composite pattern once; no match fails the whole provider."""
        match = self.pattern.search(page)
        if match is None:
            return Result.failure(
                PatternMatchError(
                    f"Page layout from {self.name} did not match the expected pattern",
                    self.name,
                    details={"page_length": len(page)},
                )
            )
        records = {rule.key: _record(rule, match) for rule in self.profile.rules}
        logger.bind(provider=self.name).debug(f"Scraped {len(records)} record(s)")
        return Result.success(records)
