"""Per-vendor board commands."""

from __future__ import annotations

import sys
import time
from typing import Callable

import typer
from rich.live import Live

from tickerboard.core.config import TickerboardConfig
from tickerboard.core.market import Market
from tickerboard.core.models import Vendor

from .constants import FETCH_ERROR_EXIT_CODE
from .formatters import TableFormatter
from .utils import emit_error, get_cli_options, get_formatter

VENDOR_HELP: dict[Vendor, str] = {
    Vendor.YAHOO: "Global indicators from Yahoo Finance only.",
    Vendor.QQ: "Global indicators plus China indices from QQ Finance.",
    Vendor.SINA: "Global indicators plus China indices for the Sina vendor set.",
    Vendor.NETEASE: "Global indicators plus SSE/SZSE indices for the NetEase vendor set.",
    Vendor.EASTMONEY: "Global indicators plus China indices for the Eastmoney vendor set.",
    Vendor.EASTMONEY_LIMITUP: "Eastmoney limit-up board header.",
    Vendor.EASTMONEY_LHB: "Eastmoney dragon-tiger list board header.",
}


def get_market(config: TickerboardConfig) -> Market:
    """Factory hook for obtaining a :class:`Market` instance."""

    return Market(config=config)


def register(app: typer.Typer) -> None:
    """Register one subcommand per vendor on the provided application."""

    for vendor in Vendor:
        app.command(vendor.value, help=VENDOR_HELP[vendor])(_vendor_command(vendor))


def _vendor_command(vendor: Vendor) -> Callable[..., None]:
    def command(
        ctx: typer.Context,
        watch: float | None = typer.Option(
            None,
            "--watch",
            "-w",
            help="Refresh every N seconds (0 renders once). Defaults to the configured interval.",
        ),
        count: int = typer.Option(
            0,
            "--count",
            "-n",
            min=0,
            help="Stop after N refreshes when watching (0 runs until interrupted).",
        ),
    ) -> None:
        run_board(ctx, vendor, watch=watch, count=count)

    command.__name__ = f"{vendor.value.replace('-', '_')}_command"
    return command


def run_board(ctx: typer.Context, vendor: Vendor, *, watch: float | None = None, count: int = 0) -> None:
    """Fetch snapshots for ``vendor`` and render them."""

    options = get_cli_options(ctx)
    formatter = get_formatter(options)
    interval = options.config.display.refresh_interval if watch is None else watch
    if interval < 0:
        raise typer.BadParameter("refresh interval must not be negative", param_hint="--watch")

    market = get_market(options.config)
    try:
        if interval == 0:
            snapshot = market.fetch(vendor)
            formatter.render(snapshot, stream=sys.stdout)
            ok, message = market.ok()
            if not ok:
                emit_error(message, "FETCH_ERROR", details={"vendor": vendor.value})
                raise typer.Exit(code=FETCH_ERROR_EXIT_CODE)
            return

        if isinstance(formatter, TableFormatter):
            _watch_live(market, vendor, formatter, interval, count)
        else:
            _watch_lines(market, vendor, formatter, interval, count)
    finally:
        market.close()


def _cycles(count: int):
    cycle = 0
    while count == 0 or cycle < count:
        yield cycle
        cycle += 1


def _watch_live(market: Market, vendor: Vendor, formatter: TableFormatter, interval: float, count: int) -> None:
    console = formatter.console(sys.stdout)
    try:
        with Live(console=console, auto_refresh=False) as live:
            for cycle in _cycles(count):
                if cycle:
                    time.sleep(interval)
                live.update(formatter.build(market.fetch(vendor)), refresh=True)
    except KeyboardInterrupt:
        pass


def _watch_lines(market: Market, vendor: Vendor, formatter, interval: float, count: int) -> None:
    try:
        for cycle in _cycles(count):
            if cycle:
                time.sleep(interval)
            formatter.render(market.fetch(vendor), stream=sys.stdout)
    except KeyboardInterrupt:
        pass


__all__ = ["register", "run_board", "get_market"]
