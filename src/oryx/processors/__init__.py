from __future__ import annotations

from .strategy_metrics import compute_current_ratio, derive_strategy_report

__all__ = [
    "compute_current_ratio",
    "derive_strategy_report",
]
