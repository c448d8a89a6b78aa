"""Output formatters for market snapshots."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, TextIO

from rich.box import SIMPLE
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tickerboard.core.models import Snapshot

# Display rows: the board shows one line per group, in this order.
GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("US", ("dow", "nasdaq", "sp500")),
    ("World", ("tokyo", "hong_kong", "london", "frankfurt")),
    ("Rates & FX", ("yield_10y", "oil", "yen", "euro", "gold")),
    ("China", ("szzs", "szcz", "hs300", "cybz")),
)


class OutputFormatter:
    """Protocol-like base class for snapshot formatters."""

    name: str

    def render(self, snapshot: Snapshot, *, stream: TextIO) -> None:
        """Render the snapshot to the target stream."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render the snapshot as a Rich table."""

    name: str = "table"
    no_color: bool = False

    def console(self, stream: TextIO) -> Console:
        return Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)

    def render(self, snapshot: Snapshot, *, stream: TextIO) -> None:
        self.console(stream).print(self.build(snapshot))

    def build(self, snapshot: Snapshot) -> RenderableType:
        """Build the renderable for one snapshot, error banner included."""
        parts: list[RenderableType] = []
        if not snapshot.ok:
            parts.append(Panel(Text(snapshot.error), title="error", style="" if self.no_color else "red"))

        status = "closed" if snapshot.is_closed else "open"
        stamp = snapshot.fetched_at.strftime("%Y-%m-%d %H:%M:%S UTC")
        parts.append(Text(f"{snapshot.vendor.value} | U.S. markets {status} | {stamp}"))

        table = Table(box=SIMPLE, show_lines=False)
        header_style = "" if self.no_color else "bold"
        for column in ("group", "instrument", "latest", "change", "percent"):
            table.add_column(column, header_style=header_style)

        rows = 0
        for label, keys in GROUPS:
            for key in keys:
                record = snapshot.get(key)
                if record is None:
                    continue
                table.add_row(
                    label,
                    record.name or key,
                    self._cell(record.latest),
                    self._change_cell(record.change),
                    self._change_cell(record.percent),
                )
                label = ""
                rows += 1
        parts.append(table if rows else Text("No data available."))
        return Group(*parts)

    def _cell(self, value: str | None) -> str:
        return "-" if value is None else value

    def _change_cell(self, value: str | None) -> Text:
        if value is None:
            return Text("-")
        if self.no_color:
            return Text(value)
        return Text(value, style="red" if value.startswith("-") else "green")


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render one JSON line per snapshot."""

    name: str = "jsonl"

    def render(self, snapshot: Snapshot, *, stream: TextIO) -> None:
        json.dump(snapshot_payload(snapshot), stream, ensure_ascii=False, default=str)
        stream.write("\n")
        stream.flush()


def snapshot_payload(snapshot: Snapshot) -> dict[str, Any]:
    """Plain payload with absent record fields dropped."""

    return {
        "vendor": snapshot.vendor.value,
        "fetched_at": snapshot.fetched_at.isoformat(),
        "is_closed": snapshot.is_closed,
        "ok": snapshot.ok,
        "error": snapshot.error,
        "records": snapshot.field_values(),
    }


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, jsonl."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter", "snapshot_payload"]
