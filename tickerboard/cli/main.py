"""Main entry point for the tickerboard command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from tickerboard import __version__
from tickerboard.core.config import load_config
from tickerboard.core.logging import configure_logging

from .board import register as register_board_commands
from .formatters import create_formatter

# logrus-style names accepted for compatibility with older invocations
LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL", "PANIC": "CRITICAL"}
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def create_app() -> typer.Typer:
    """Create a Typer application instance for tickerboard."""

    app = typer.Typer(add_completion=False, help="tickerboard - market indicators in the terminal")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Log level [debug|info|warning|error|fatal|panic]. Defaults to the configured level.",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            help="Path to a TOML config file.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        config = load_config(config_path)
        level = _resolve_level(log_level or config.logging.level)
        _configure_logging(level, config.logging.file, config.logging.serialize)

        ctx.obj.update(
            {
                "format": normalized_format,
                "log_level": level,
                "no_color": no_color,
                "config": config,
            }
        )

    @app.command("version")
    def version() -> None:
        """Print the tickerboard version."""
        typer.echo(f"tickerboard {__version__}")

    register_board_commands(app)
    return app


def _resolve_level(level_name: str) -> str:
    normalized = level_name.strip().upper()
    normalized = LEVEL_ALIASES.get(normalized, normalized)
    if normalized not in LOG_LEVELS:
        raise typer.BadParameter(f"unable to parse log level '{level_name}'", param_hint="--log-level")
    return normalized


def _configure_logging(level: str, file_path: str | None, serialize: bool) -> None:
    configure_logging(
        level,
        file_output=bool(file_path),
        file_path=file_path,
        serialize=serialize,
    )


app = create_app()


def run() -> None:
    """Console script entry point."""
    app()
