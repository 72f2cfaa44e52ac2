"""Text and console renderings of the Stargate report."""

from __future__ import annotations

from decimal import Decimal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..constants import MAX_RAW_AMOUNT, REPORT_SEPARATOR, REPORT_TITLE
from ..domain import StargateReport
from ..errors import AmountOverflowError
from ..units import truncate_to_cents


def _format_amount(value: Decimal) -> str:
    """Format a whole-unit amount with comma thousands separators."""
    whole = int(value)
    if not 0 <= whole < MAX_RAW_AMOUNT:
        raise AmountOverflowError(f"Amount {value} cannot be displayed")
    return f"{whole:,}"


def _format_ratio(value: Decimal) -> str:
    return str(truncate_to_cents(value))


def format_report(report: StargateReport) -> str:
    """Render the report as the plain-text message sent to the chat.

    Args:
        report: The assembled Stargate report

    Returns:
        Header line followed by one separator-led block per strategy,
        joined with newlines. Identical reports render identically.
    """
    lines = [REPORT_TITLE]

    for entry in report.individual_strategy_reports:
        lines.append(REPORT_SEPARATOR)
        lines.append(f"Asset – {entry.asset_name}")
        lines.append(f"Yearn Strategy TVL: ${_format_amount(entry.strategy_tvl)}")
        lines.append(f"Pool Current Ratio: {_format_ratio(entry.current_ratio)}")
        lines.append(
            f"Total Pool Liabilities: ${_format_amount(entry.pool_liabilities)}"
        )
        lines.append(f"Total Pool Liquidity: ${_format_amount(entry.pool_liquidity)}")

    return "\n".join(lines)


def format_report_table(report: StargateReport, console: Console | None = None) -> None:
    """Print a rich table of the report to stdout.

    Args:
        report: The Stargate report to format
        console: Console to print to, defaults to stdout
    """
    console = console or Console()

    table = Table(expand=True, show_lines=False)
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Strategy TVL", justify="right", style="green")
    table.add_column("Pool Liquidity", justify="right")
    table.add_column("Pool Liabilities", justify="right")
    table.add_column("Current Ratio", justify="right", style="yellow")

    for entry in report.individual_strategy_reports:
        table.add_row(
            entry.asset_name,
            f"${_format_amount(entry.strategy_tvl)}",
            f"${_format_amount(entry.pool_liquidity)}",
            f"${_format_amount(entry.pool_liabilities)}",
            _format_ratio(entry.current_ratio),
        )

    console.print()
    console.print(
        Panel(
            table,
            title=f"[bold white]{REPORT_TITLE} (dry run)[/]",
            border_style="cyan",
        )
    )
