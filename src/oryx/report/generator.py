from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..domain import IndividualStrategyReport, StargateReport
from ..logger import get_logger
from ..processors import derive_strategy_report

if TYPE_CHECKING:
    from ..clients.chain_reader import ChainReader

logger = get_logger(__name__)


async def generate_report(
    reader: ChainReader,
    strategy_addresses: Sequence[str],
) -> StargateReport:
    """Generate the Stargate report for the configured strategies.

    Strategies are processed one after another in the given order, never
    concurrently. The first failure propagates and no report is built, even
    for strategies that already succeeded.

    Args:
        reader: Chain reader shared by every strategy
        strategy_addresses: Strategy contract addresses, in report order

    Returns:
        Report with one entry per address, in input order
    """
    entries: list[IndividualStrategyReport] = []
    for index, strategy_address in enumerate(strategy_addresses, start=1):
        logger.debug(
            "Deriving strategy %d/%d: %s",
            index,
            len(strategy_addresses),
            strategy_address,
        )
        entries.append(await derive_strategy_report(reader, strategy_address))

    return StargateReport(individual_strategy_reports=tuple(entries))
