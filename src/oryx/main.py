"""CLI entrypoint for Oryx."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer

from .errors import ConfigurationError, OryxError
from .logger import setup_logging
from .settings import OryxSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Daily Stargate strategy health report.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("oryx")


@app.callback(invoke_without_command=True)
def report(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [oryx] table).",
        ),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option(
            "--rpc-url",
            help="JSON-RPC endpoint; overrides the Infura URL built from ORYX_INFURA_API_KEY.",
        ),
    ] = None,
    block_number: Annotated[
        int | None,
        typer.Option(
            "--block-number",
            help="Block number to use for rpc calls. If not provided, the latest block will be used.",
        ),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option(
            "--dry-run/--no-dry-run",
            help="Print the report instead of sending it to Telegram.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Build the Stargate report and send it to the committee chat.

    Loads configuration, checks credentials, then reads every configured
    strategy in order. Nothing is sent unless every strategy succeeds.
    """
    if config_path:
        os.environ["ORYX_CONFIG"] = str(config_path)

    init_kwargs: dict[str, bool | int | str] = {}
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if block_number is not None:
        init_kwargs["block_number"] = block_number
    if dry_run is not None:
        init_kwargs["dry_run"] = dry_run
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    try:
        settings = OryxSettings.load(**init_kwargs)
    except ConfigurationError as e:
        setup_logging()
        _build_logger().error("Configuration error: %s", e)
        raise typer.Exit(code=1) from e

    setup_logging(settings.log_level)
    logger = _build_logger()

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    try:
        settings.require_credentials()
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        raise typer.Exit(code=1) from e

    state = AppState(settings=settings, logger=logger)

    logger.info("================== ORYX RUNNING ==================")

    from .pipeline.run import run_report

    try:
        asyncio.run(run_report(state))
    except OryxError as e:
        raise typer.Exit(code=1) from e


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
