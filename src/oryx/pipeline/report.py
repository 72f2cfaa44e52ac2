"""Report generation and publication stages."""

from __future__ import annotations

from ..report import format_report_table, generate_report
from ..report import publish_report as publish_report_impl
from .context import PipelineContext


async def build_report(ctx: PipelineContext) -> None:
    """Generate the Stargate report.

    Args:
        ctx: Pipeline context containing state and chain reader

    Sets the report in the context.
    """
    log = ctx.state.logger
    addresses = ctx.state.settings.strategy_addresses

    log.info(
        "Generating report for %d strateg%s at block %s...",
        len(addresses),
        "y" if len(addresses) == 1 else "ies",
        ctx.reader.block_identifier,
    )
    ctx.report = await generate_report(ctx.reader, addresses)


async def publish_report(ctx: PipelineContext) -> None:
    """Publish the Stargate report.

    Args:
        ctx: Pipeline context containing state, publisher and report

    In dry-run mode the report is also printed as a table.
    """
    s = ctx.state.settings
    report = ctx.report_required
    log = ctx.state.logger

    log.info("Publishing report (dry_run=%s)...", s.dry_run)

    if s.dry_run:
        format_report_table(report)

    ctx.message = await publish_report_impl(ctx.publisher, report)
