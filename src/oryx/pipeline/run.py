"""High-level pipeline orchestration."""

from __future__ import annotations

from ..clients.chain_reader import ChainReader, build_web3
from ..errors import OryxError
from ..report import Publisher, build_publisher
from ..state import AppState
from .context import PipelineContext
from .report import build_report, publish_report


async def _build_reader(state: AppState) -> ChainReader:
    """Create the shared chain reader, pinning every read to one block."""
    settings = state.settings
    w3 = build_web3(settings)

    if settings.block_number is None:
        settings.block_number = await ChainReader(w3).latest_block_number()
        state.logger.debug("Using latest block %d", settings.block_number)

    return ChainReader(w3, settings.block_number)


async def run_report(
    state: AppState,
    reader: ChainReader | None = None,
    publisher: Publisher | None = None,
) -> PipelineContext:
    """Execute the complete report pipeline.

    This is a thin orchestrator that sequences the pipeline steps:
    1. Report generation (every strategy, in order)
    2. Publication

    Any failure ends the run before anything is published.

    Args:
        state: Application state containing settings and logger
        reader: Chain reader to use; built from settings when omitted
        publisher: Publisher to use; chosen from settings when omitted

    Returns:
        The finished pipeline context
    """
    s = state.settings
    log = state.logger

    log.info(
        "Starting report",
        extra={"strategies": s.strategy_addresses, "dry_run": s.dry_run},
    )

    stage = "setup"
    try:
        if reader is None:
            reader = await _build_reader(state)
        if publisher is None:
            publisher = build_publisher(s)

        ctx = PipelineContext(state=state, reader=reader, publisher=publisher)

        stage = "build"
        await build_report(ctx)
        stage = "publish"
        await publish_report(ctx)
    except OryxError as exc:
        if exc.strategy_address is not None:
            log.error(
                "Report %s stage failed for strategy %s at step %s: %s",
                stage,
                exc.strategy_address,
                exc.step,
                exc.message,
            )
        else:
            log.error("Report %s stage failed: %s", stage, exc)
        raise

    log.info("Report completed")
    return ctx
