"""Value-or-error container returned by adapter and extractor calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tickerboard.core.exceptions import TickerboardError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a value or the error that prevented producing it."""

    value: T | None = None
    error: TickerboardError | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: TickerboardError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


__all__ = ["Result"]
