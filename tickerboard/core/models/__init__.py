"""Data models module."""

from tickerboard.core.models.market import MarketState, Vendor
from tickerboard.core.models.quote import InstrumentRecord, InstrumentSpec, Snapshot

__all__ = [
    "InstrumentRecord",
    "InstrumentSpec",
    "MarketState",
    "Snapshot",
    "Vendor",
]
