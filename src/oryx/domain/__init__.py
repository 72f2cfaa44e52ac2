"""Domain models for the Stargate report."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class IndividualStrategyReport:
    """Health metrics of one Stargate strategy, in whole underlying-asset units."""

    asset_name: str
    strategy_tvl: Decimal
    pool_liquidity: Decimal
    pool_liabilities: Decimal
    current_ratio: Decimal


@dataclass(frozen=True)
class StargateReport:
    """Per-strategy reports in configuration order."""

    individual_strategy_reports: tuple[IndividualStrategyReport, ...]

    def __len__(self) -> int:
        return len(self.individual_strategy_reports)
