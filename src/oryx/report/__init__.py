from __future__ import annotations

from .formatter import format_report, format_report_table
from .generator import generate_report
from .publisher import (
    ConsolePublisher,
    Publisher,
    TelegramPublisher,
    build_publisher,
    publish_report,
)

__all__ = [
    "ConsolePublisher",
    "Publisher",
    "TelegramPublisher",
    "build_publisher",
    "format_report",
    "format_report_table",
    "generate_report",
    "publish_report",
]
