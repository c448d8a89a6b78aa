"""Snapshot assembly across the primary and auxiliary providers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import httpx

from tickerboard.core.config import TickerboardConfig, load_config
from tickerboard.core.exceptions import ProviderError, TickerboardError, TransportError
from tickerboard.core.logging import get_logger, log_context
from tickerboard.core.models import InstrumentRecord, InstrumentSpec, Snapshot, Vendor
from tickerboard.core.providers import (
    DEFAULT_LAYOUT,
    HttpConfig,
    QuoteBatch,
    ScrapedQuoteProvider,
    YahooQuoteProvider,
    YahooSession,
    create_client,
    qq_profile,
)
from tickerboard.core.result import Result

logger = get_logger(__name__)

ERROR_PREFIX = "Error fetching market data...\n"

CN_FULL_OVERLAY = ("szzs", "szcz", "hs300", "cybz")


@dataclass(frozen=True)
class VendorProfile:
    """Auxiliary provider and the record keys it overlays."""

    auxiliary: str | None = None
    overlay: tuple[str, ...] = ()


VENDOR_PROFILES: dict[Vendor, VendorProfile] = {
    Vendor.YAHOO: VendorProfile(),
    Vendor.QQ: VendorProfile(auxiliary="qq", overlay=CN_FULL_OVERLAY),
    Vendor.SINA: VendorProfile(auxiliary="qq", overlay=CN_FULL_OVERLAY),
    Vendor.NETEASE: VendorProfile(auxiliary="qq", overlay=("szzs", "szcz")),
    Vendor.EASTMONEY: VendorProfile(auxiliary="qq", overlay=CN_FULL_OVERLAY),
    # Same overlay as eastmoney until those vendors get endpoints of their own.
    Vendor.EASTMONEY_LIMITUP: VendorProfile(auxiliary="qq", overlay=CN_FULL_OVERLAY),
    Vendor.EASTMONEY_LHB: VendorProfile(auxiliary="qq", overlay=CN_FULL_OVERLAY),
}


def apply_overlay(
    snapshot: Snapshot, records: Mapping[str, InstrumentRecord], keys: Sequence[str]
) -> Snapshot:
    """Replace whole records for ``keys`` with the auxiliary ones.

    Keys the auxiliary did not supply are left as they are.
    """
    replacements = {key: records[key] for key in keys if key in records}
    if not replacements:
        return snapshot
    return snapshot.with_records(replacements)


class Market:
    """Fetches consolidated market snapshots.

    ``fetch`` never raises for provider failures; the outcome of the last cycle
    is available from :meth:`ok`.
    """

    def __init__(
        self,
        config: TickerboardConfig | None = None,
        client: httpx.Client | None = None,
        layout: Sequence[InstrumentSpec] = DEFAULT_LAYOUT,
    ) -> None:
        self.config = config or load_config()
        self._owns_client = client is None
        self.client = client or create_client(HttpConfig.from_provider_config(self.config.providers))
        self.layout = tuple(layout)
        self.session = YahooSession(self.client, self.config.providers)
        self.primary = YahooQuoteProvider(self.client, self.config.providers)
        self.auxiliaries: dict[str, ScrapedQuoteProvider] = {
            "qq": ScrapedQuoteProvider(
                self.client, qq_profile(self.config.providers), user_agent=self.config.providers.user_agent
            ),
        }
        self._error = ""

    def __enter__(self) -> "Market":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def ok(self) -> tuple[bool, str]:
        """Return whether the last cycle succeeded and its error text."""
        return self._error == "", self._error

    def fetch(self, vendor: Vendor | str = Vendor.YAHOO) -> Snapshot:
        """Run one fetch cycle for ``vendor`` and return a fresh snapshot."""
        try:
            vendor = Vendor.parse(vendor)
        except ValueError as e:
            logger.warning(f"{e}; fetching primary quotes only")
            vendor = Vendor.YAHOO
        profile = VENDOR_PROFILES[vendor]

        with log_context(vendor=vendor.value) as cycle_id:
            log = logger.bind(vendor=vendor.value)
            log.debug(f"Starting fetch cycle {cycle_id}")

            primary = self._fetch_primary()
            if primary.ok:
                batch = primary.unwrap()
                self._error = ""
                if batch.field_errors:
                    log.warning(f"{len(batch.field_errors)} primary quote field(s) could not be decoded")
                snapshot = Snapshot(vendor=vendor, records=batch.records, is_closed=batch.is_closed)
            else:
                self._error = ERROR_PREFIX + primary.error.message
                log.error(f"Primary provider failed: {primary.error.message}")
                snapshot = Snapshot(vendor=vendor, ok=False, error=self._error)

            if profile.auxiliary is not None:
                auxiliary = self._fetch_auxiliary(profile.auxiliary)
                if auxiliary.ok:
                    snapshot = apply_overlay(snapshot, auxiliary.unwrap(), profile.overlay)
                else:
                    log.warning(f"Skipping {profile.auxiliary} overlay: {auxiliary.error.message}")

            log.debug(f"Fetch cycle finished with {len(snapshot.records)} record(s)")
            return snapshot

    def _fetch_primary(self) -> Result[QuoteBatch]:
        try:
            tokens = self.session.acquire()
        except TickerboardError as e:
            return Result.failure(e)

        raw = self.primary.fetch(self.layout, tokens)
        if not raw.ok:
            if isinstance(raw.error, TransportError) and raw.error.status_code in (401, 403):
                self.session.invalidate()
            return Result.failure(raw.error)
        return self.primary.extract(raw.unwrap(), self.layout)

    def _fetch_auxiliary(self, name: str) -> Result[dict[str, InstrumentRecord]]:
        provider = self.auxiliaries.get(name)
        if provider is None:
            return Result.failure(ProviderError(f"Unknown auxiliary provider '{name}'", name))
        page = provider.fetch()
        if not page.ok:
            return Result.failure(page.error)
        return provider.extract(page.unwrap())


_market: Market | None = None


def get_market() -> Market:
    """Return the lazily created process-wide :class:`Market`."""
    global _market
    if _market is None:
        _market = Market()
    return _market


def fetch(vendor: Vendor | str = Vendor.YAHOO) -> Snapshot:
    """Fetch a snapshot with the default market instance."""
    return get_market().fetch(vendor)


__all__ = ["ERROR_PREFIX", "VENDOR_PROFILES", "Market", "VendorProfile", "apply_overlay", "fetch", "get_market"]
