"""Read-only access to ERC20 tokens and Yearn Stargate strategies."""

from __future__ import annotations

import asyncio
from typing import Any

from eth_typing import URI, BlockIdentifier, ChecksumAddress
from web3 import Web3
from web3.contract import Contract

from ..abi import load_erc20_abi, load_stargate_strategy_abi
from ..constants import MAX_TOKEN_DECIMALS
from ..errors import ChainCallError
from ..logger import get_logger
from ..settings import OryxSettings
from ..units import check_raw_amount

logger = get_logger(__name__)


def build_web3(settings: OryxSettings) -> Web3:
    """Create the HTTP web3 client shared by every read of a run."""
    return Web3(Web3.HTTPProvider(URI(settings.rpc_url_required)))


class ChainReader:
    """Typed accessors over single ``eth_call`` reads.

    Each accessor performs exactly one contract call, off the event loop,
    with no batching and no retry. Every failure surfaces as
    ``ChainCallError``; amounts outside the 128-bit range raise
    ``AmountOverflowError``.

    The ``Web3`` handle is shared and never mutated, so one reader can serve
    every strategy of a run.
    """

    def __init__(self, w3: Web3, block_identifier: BlockIdentifier = "latest"):
        self.w3 = w3
        self.block_identifier = block_identifier

    def _checksum(self, address: str) -> ChecksumAddress:
        try:
            return Web3.to_checksum_address(address)
        except (TypeError, ValueError) as e:
            raise ChainCallError(f"Invalid contract address {address!r}: {e}") from e

    def _erc20(self, address: str) -> Contract:
        return self.w3.eth.contract(
            address=self._checksum(address), abi=load_erc20_abi()
        )

    def _strategy(self, address: str) -> Contract:
        return self.w3.eth.contract(
            address=self._checksum(address), abi=load_stargate_strategy_abi()
        )

    async def _call(self, contract: Contract, fn_name: str, *args: Any) -> Any:
        """Run one view call at the pinned block."""
        logger.debug("eth_call %s.%s%s", contract.address, fn_name, args)
        try:
            fn = getattr(contract.functions, fn_name)(*args)
            return await asyncio.to_thread(
                fn.call, block_identifier=self.block_identifier
            )
        except Exception as e:
            raise ChainCallError(
                f"Call to {fn_name}() on {contract.address} failed: "
                f"{type(e).__name__}"
            ) from e

    async def _call_amount(self, contract: Contract, fn_name: str, *args: Any) -> int:
        value = await self._call(contract, fn_name, *args)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ChainCallError(
                f"{fn_name}() on {contract.address} returned non-integer {value!r}"
            )
        return check_raw_amount(value, f"{fn_name}() on {contract.address}")

    async def _call_address(self, contract: Contract, fn_name: str) -> ChecksumAddress:
        value = await self._call(contract, fn_name)
        if not isinstance(value, str) or not Web3.is_address(value):
            raise ChainCallError(
                f"{fn_name}() on {contract.address} returned non-address {value!r}"
            )
        return Web3.to_checksum_address(value)

    async def token_symbol(self, token_address: str) -> str:
        value = await self._call(self._erc20(token_address), "symbol")
        if not isinstance(value, str):
            raise ChainCallError(
                f"symbol() on {token_address} returned non-string {value!r}"
            )
        return value

    async def token_decimals(self, token_address: str) -> int:
        value = await self._call(self._erc20(token_address), "decimals")
        if (
            not isinstance(value, int)
            or isinstance(value, bool)
            or not 0 <= value <= MAX_TOKEN_DECIMALS
        ):
            raise ChainCallError(
                f"decimals() on {token_address} returned invalid value {value!r}"
            )
        return value

    async def token_balance_of(self, token_address: str, owner_address: str) -> int:
        return await self._call_amount(
            self._erc20(token_address), "balanceOf", self._checksum(owner_address)
        )

    async def token_total_supply(self, token_address: str) -> int:
        return await self._call_amount(self._erc20(token_address), "totalSupply")

    async def strategy_underlying_asset(self, strategy_address: str) -> ChecksumAddress:
        """Return the strategy's ``want`` token."""
        return await self._call_address(self._strategy(strategy_address), "want")

    async def strategy_position_value(self, strategy_address: str) -> int:
        """Return the value of the strategy's LP tokens in raw ``want`` units."""
        return await self._call_amount(
            self._strategy(strategy_address), "valueOfLPTokens"
        )

    async def strategy_liquidity_pool(self, strategy_address: str) -> ChecksumAddress:
        return await self._call_address(
            self._strategy(strategy_address), "liquidityPool"
        )

    async def latest_block_number(self) -> int:
        try:
            return await asyncio.to_thread(lambda: self.w3.eth.block_number)
        except Exception as e:
            raise ChainCallError(
                f"Failed to fetch latest block number: {type(e).__name__}"
            ) from e
