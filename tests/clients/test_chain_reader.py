from unittest.mock import MagicMock, PropertyMock

import pytest

from oryx.abi import load_erc20_abi, load_stargate_strategy_abi
from oryx.clients.chain_reader import ChainReader, build_web3
from oryx.errors import AmountOverflowError, ChainCallError
from oryx.settings import OryxSettings

from stargate_chain import USDC, USDC_POOL, USDC_STRATEGY


@pytest.fixture
def w3() -> MagicMock:
    return MagicMock()


@pytest.fixture
def contract(w3: MagicMock) -> MagicMock:
    return w3.eth.contract.return_value


@pytest.fixture
def reader(w3: MagicMock) -> ChainReader:
    return ChainReader(w3, block_identifier=19_000_000)


def _returns(contract: MagicMock, fn_name: str, value):
    fn = getattr(contract.functions, fn_name)
    fn.return_value.call.return_value = value
    return fn


def test_abis_expose_expected_functions():
    erc20 = {entry["name"] for entry in load_erc20_abi()}
    strategy = {entry["name"] for entry in load_stargate_strategy_abi()}

    assert erc20 == {"symbol", "decimals", "balanceOf", "totalSupply"}
    assert strategy == {"want", "valueOfLPTokens", "liquidityPool"}


def test_build_web3_uses_configured_rpc():
    w3 = build_web3(OryxSettings(rpc_url="http://localhost:8545"))

    assert w3.provider.endpoint_uri == "http://localhost:8545"


@pytest.mark.asyncio
async def test_token_symbol_calls_erc20_at_pinned_block(reader, w3, contract):
    fn = _returns(contract, "symbol", "USDC")

    assert await reader.token_symbol(USDC) == "USDC"

    w3.eth.contract.assert_called_once_with(address=USDC, abi=load_erc20_abi())
    fn.return_value.call.assert_called_once_with(block_identifier=19_000_000)


@pytest.mark.asyncio
async def test_token_decimals(reader, contract):
    _returns(contract, "decimals", 6)

    assert await reader.token_decimals(USDC) == 6


@pytest.mark.asyncio
async def test_token_decimals_out_of_range_rejected(reader, contract):
    _returns(contract, "decimals", 256)

    with pytest.raises(ChainCallError, match="decimals"):
        await reader.token_decimals(USDC)


@pytest.mark.asyncio
async def test_token_balance_of_passes_checksummed_owner(reader, contract):
    fn = _returns(contract, "balanceOf", 500_000_000_000)

    assert await reader.token_balance_of(USDC, USDC_POOL.lower()) == 500_000_000_000

    fn.assert_called_once_with(USDC_POOL)


@pytest.mark.asyncio
async def test_token_total_supply(reader, contract):
    _returns(contract, "totalSupply", 2**128 - 1)

    assert await reader.token_total_supply(USDC_POOL) == 2**128 - 1


@pytest.mark.asyncio
async def test_amounts_at_or_above_128_bits_overflow(reader, contract):
    _returns(contract, "totalSupply", 2**128)
    _returns(contract, "balanceOf", 2**255)
    _returns(contract, "valueOfLPTokens", 2**130)

    with pytest.raises(OverflowError):
        await reader.token_total_supply(USDC_POOL)
    with pytest.raises(AmountOverflowError):
        await reader.token_balance_of(USDC, USDC_POOL)
    with pytest.raises(AmountOverflowError):
        await reader.strategy_position_value(USDC_STRATEGY)


@pytest.mark.asyncio
async def test_strategy_reads_use_strategy_abi(reader, w3, contract):
    _returns(contract, "want", USDC.lower())
    _returns(contract, "valueOfLPTokens", 1_234_567_890_000)
    _returns(contract, "liquidityPool", USDC_POOL)

    assert await reader.strategy_underlying_asset(USDC_STRATEGY) == USDC
    assert await reader.strategy_position_value(USDC_STRATEGY) == 1_234_567_890_000
    assert await reader.strategy_liquidity_pool(USDC_STRATEGY) == USDC_POOL

    w3.eth.contract.assert_called_with(
        address=USDC_STRATEGY, abi=load_stargate_strategy_abi()
    )


@pytest.mark.asyncio
async def test_provider_failure_becomes_chain_call_error(reader, contract):
    cause = ConnectionError(
        "Max retries exceeded with url: /v3/SUPERSECRETKEY (connection refused)"
    )
    contract.functions.want.return_value.call.side_effect = cause

    with pytest.raises(ChainCallError, match=r"want\(\).*ConnectionError") as exc_info:
        await reader.strategy_underlying_asset(USDC_STRATEGY)

    assert "SUPERSECRETKEY" not in str(exc_info.value)
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_block_number_failure_keeps_rpc_url_out_of_message():
    w3 = MagicMock()
    type(w3.eth).block_number = PropertyMock(
        side_effect=ConnectionError(
            "HTTPSConnectionPool(host='mainnet.infura.io'): "
            "Max retries exceeded with url: /v3/SUPERSECRETKEY"
        )
    )

    with pytest.raises(ChainCallError, match="latest block number") as exc_info:
        await ChainReader(w3).latest_block_number()

    assert "SUPERSECRETKEY" not in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_malformed_responses_rejected(reader, contract):
    _returns(contract, "liquidityPool", "not-an-address")
    _returns(contract, "symbol", b"USDC")
    _returns(contract, "totalSupply", "12")

    with pytest.raises(ChainCallError, match="non-address"):
        await reader.strategy_liquidity_pool(USDC_STRATEGY)
    with pytest.raises(ChainCallError, match="non-string"):
        await reader.token_symbol(USDC)
    with pytest.raises(ChainCallError, match="non-integer"):
        await reader.token_total_supply(USDC_POOL)


@pytest.mark.asyncio
async def test_invalid_address_rejected_before_call(reader, w3):
    with pytest.raises(ChainCallError, match="Invalid contract address"):
        await reader.token_symbol("0x1234")

    w3.eth.contract.assert_not_called()


@pytest.mark.asyncio
async def test_latest_block_number(reader, w3):
    w3.eth.block_number = 19_123_456

    assert await reader.latest_block_number() == 19_123_456
