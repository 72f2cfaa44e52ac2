from __future__ import annotations

from dataclasses import dataclass

from ..clients.chain_reader import ChainReader
from ..domain import StargateReport
from ..report import Publisher
from ..state import AppState


@dataclass
class PipelineContext:
    state: AppState
    reader: ChainReader
    publisher: Publisher
    report: StargateReport | None = None
    message: str | None = None

    @property
    def report_required(self) -> StargateReport:
        if self.report is None:
            raise RuntimeError(
                "Report has not been set. Ensure build_report() is called before accessing this property."
            )
        return self.report
