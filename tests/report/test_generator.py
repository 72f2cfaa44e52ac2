import pytest

from oryx.domain import StargateReport
from oryx.errors import ChainCallError, ZeroLiabilitiesError
from oryx.report.generator import generate_report

from stargate_chain import USDC_STRATEGY, USDT_POOL, USDT_STRATEGY


@pytest.mark.asyncio
async def test_generate_report_preserves_configured_order(stargate_chain):
    """Entries follow the address list, whichever order it is given in."""
    report = await generate_report(stargate_chain, [USDT_STRATEGY, USDC_STRATEGY])

    assert isinstance(report, StargateReport)
    assert len(report) == 2
    assert [r.asset_name for r in report.individual_strategy_reports] == [
        "USDT",
        "USDC",
    ]


@pytest.mark.asyncio
async def test_generate_report_processes_strategies_sequentially(stargate_chain):
    """All reads for one strategy complete before the next strategy starts."""
    await generate_report(stargate_chain, [USDC_STRATEGY, USDT_STRATEGY])

    strategy_reads = [
        address
        for name, address in stargate_chain.calls
        if name == "strategy_underlying_asset"
    ]
    assert strategy_reads == [USDC_STRATEGY, USDT_STRATEGY]
    assert len(stargate_chain.calls) == 14
    assert all(
        address != USDT_STRATEGY for _, address in stargate_chain.calls[:7]
    )


@pytest.mark.asyncio
async def test_generate_report_with_no_strategies(stargate_chain):
    report = await generate_report(stargate_chain, [])

    assert report.individual_strategy_reports == ()


@pytest.mark.asyncio
async def test_generate_report_is_all_or_nothing(stargate_chain):
    """A failure on the second strategy discards the first strategy's result."""
    stargate_chain.fail_on.add(("token_total_supply", USDT_POOL))

    with pytest.raises(ChainCallError) as exc_info:
        await generate_report(stargate_chain, [USDC_STRATEGY, USDT_STRATEGY])

    assert exc_info.value.strategy_address == USDT_STRATEGY
    assert exc_info.value.step == "pool_liabilities"


@pytest.mark.asyncio
async def test_generate_report_stops_at_first_failure(stargate_chain):
    stargate_chain.tokens[
        stargate_chain.strategies[USDC_STRATEGY]["pool"]
    ]["total_supply"] = 0

    with pytest.raises(ZeroLiabilitiesError):
        await generate_report(stargate_chain, [USDC_STRATEGY, USDT_STRATEGY])

    assert all(address != USDT_STRATEGY for _, address in stargate_chain.calls)
