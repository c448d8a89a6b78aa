"""Core fetch/parse/merge pipeline."""

from tickerboard.core.market import VENDOR_PROFILES, Market, VendorProfile, apply_overlay
from tickerboard.core.models import InstrumentRecord, InstrumentSpec, Snapshot, Vendor
from tickerboard.core.result import Result

__all__ = [
    "InstrumentRecord",
    "InstrumentSpec",
    "Market",
    "Result",
    "Snapshot",
    "VENDOR_PROFILES",
    "Vendor",
    "VendorProfile",
    "apply_overlay",
]
