from __future__ import annotations

from collections.abc import Awaitable
from decimal import Decimal
from typing import TYPE_CHECKING, TypeVar

from ..domain import IndividualStrategyReport
from ..errors import OryxError, ZeroLiabilitiesError
from ..logger import get_logger
from ..units import divide, scale_amount

if TYPE_CHECKING:
    from ..clients.chain_reader import ChainReader

logger = get_logger(__name__)

T = TypeVar("T")


def compute_current_ratio(
    pool_liquidity: Decimal, pool_liabilities: Decimal
) -> Decimal:
    """Divide pool liquidity by pool liabilities.

    Raises:
        ZeroLiabilitiesError: If ``pool_liabilities`` is zero.
    """
    if pool_liabilities == 0:
        raise ZeroLiabilitiesError("Pool liabilities are zero; current ratio undefined")
    return divide(pool_liquidity, pool_liabilities)


class _StrategySteps:
    """Runs the named steps for one strategy, tagging failures with context."""

    def __init__(self, strategy_address: str):
        self.strategy_address = strategy_address

    async def run(self, step: str, pending: Awaitable[T]) -> T:
        try:
            return await pending
        except OryxError as e:
            e.attach_context(self.strategy_address, step)
            raise

    def ratio(
        self, step: str, pool_liquidity: Decimal, pool_liabilities: Decimal
    ) -> Decimal:
        try:
            return compute_current_ratio(pool_liquidity, pool_liabilities)
        except OryxError as e:
            e.attach_context(self.strategy_address, step)
            raise


async def derive_strategy_report(
    reader: ChainReader, strategy_address: str
) -> IndividualStrategyReport:
    """Read one strategy's on-chain state and derive its health metrics.

    The reads run strictly in order since each one consumes the result of an
    earlier one: strategy -> want token -> decimals -> position value ->
    liquidity pool -> pool balance and LP supply.

    Amounts are truncated to whole units before the ratio is taken, so the
    ratio is computed from the same integers that are reported.

    Args:
        reader: Chain reader shared across strategies
        strategy_address: Strategy contract address

    Returns:
        The strategy's report; nothing is returned if any step fails.

    Raises:
        ChainCallError: If any contract read fails
        AmountOverflowError: If a raw amount exceeds 128 bits
        ZeroLiabilitiesError: If the pool's LP supply is zero
    """
    steps = _StrategySteps(strategy_address)

    want = await steps.run(
        "underlying_asset", reader.strategy_underlying_asset(strategy_address)
    )
    symbol = await steps.run("symbol", reader.token_symbol(want))

    logger.info("Creating report for %s", symbol)

    decimals = await steps.run("decimals", reader.token_decimals(want))

    logger.info("Strategy decimals: %d", decimals)

    strategy_tvl = scale_amount(
        await steps.run(
            "position_value", reader.strategy_position_value(strategy_address)
        ),
        decimals,
    )

    logger.info("Total position: $%s", strategy_tvl)

    pool_address = await steps.run(
        "liquidity_pool", reader.strategy_liquidity_pool(strategy_address)
    )

    logger.info("Pool address: %s", pool_address)

    pool_liquidity = scale_amount(
        await steps.run(
            "pool_liquidity", reader.token_balance_of(want, pool_address)
        ),
        decimals,
    )

    logger.info("Liquidity: %s", pool_liquidity)

    # The pool is itself an ERC20; its LP supply is what the pool owes depositors
    pool_liabilities = scale_amount(
        await steps.run("pool_liabilities", reader.token_total_supply(pool_address)),
        decimals,
    )

    logger.info("Pool liabilities: %s", pool_liabilities)

    current_ratio = steps.ratio("current_ratio", pool_liquidity, pool_liabilities)

    logger.debug("Current ratio: %s", current_ratio)

    return IndividualStrategyReport(
        asset_name=symbol,
        strategy_tvl=strategy_tvl,
        pool_liquidity=pool_liquidity,
        pool_liabilities=pool_liabilities,
        current_ratio=current_ratio,
    )
