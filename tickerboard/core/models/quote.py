"""Quote records and snapshots."""

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from tickerboard.core.models.market import Vendor

RECORD_FIELDS = ("name", "latest", "change", "percent")


class InstrumentRecord(BaseModel):
    """单个指标的行情记录.

    ``change`` carries a ``%`` suffix for change-as-percent instruments, in
    which case ``percent`` is absent. Fields that failed to decode are None.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    latest: str | None = None
    change: str | None = None
    percent: str | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the fields that are present."""
        return {key: value for key in RECORD_FIELDS if (value := getattr(self, key)) is not None}

    def __getitem__(self, key: str) -> str:
        return self.as_dict()[key]

    def __contains__(self, key: object) -> bool:
        return key in self.as_dict()


class InstrumentSpec(BaseModel):
    """Maps a request symbol to the record it populates."""

    model_config = ConfigDict(frozen=True)

    key: str
    symbol: str
    name: str
    change_as_percent: bool = False


class Snapshot(BaseModel):
    """一次抓取周期的完整行情快照."""

    model_config = ConfigDict(frozen=True)

    vendor: Vendor = Vendor.YAHOO
    records: Mapping[str, InstrumentRecord] = Field(default_factory=dict, validate_default=True)
    is_closed: bool = False
    ok: bool = True
    error: str = ""
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("records")
    @classmethod
    def freeze_records(cls, value: Mapping[str, InstrumentRecord]) -> Mapping[str, InstrumentRecord]:
        """Expose records through a read-only view."""
        return MappingProxyType(dict(value))

    @field_serializer("records")
    def serialize_records(self, value: Mapping[str, InstrumentRecord]) -> dict[str, InstrumentRecord]:
        return dict(value)

    @field_serializer("fetched_at", when_used="json")
    def serialize_datetime(self, value: datetime) -> str:
        """Serialize datetime to isoformat string."""
        return value.isoformat()

    def get(self, key: str) -> InstrumentRecord | None:
        """Return the record for ``key`` if the cycle produced one."""
        return self.records.get(key)

    def field_values(self) -> dict[str, dict[str, str]]:
        """Plain mapping of every record's present fields."""
        return {key: record.as_dict() for key, record in self.records.items()}

    def with_records(self, replacements: Mapping[str, InstrumentRecord]) -> "Snapshot":
        """Return a new snapshot with whole records replaced or added."""
        merged = dict(self.records)
        merged.update(replacements)
        return self.model_copy(update={"records": MappingProxyType(merged)})
