"""Formatters for human-readable output."""

from .time_formatter import format_time, truncate_name
from .report_writer import ReportWriter

__all__ = ["format_time", "truncate_name", "ReportWriter"]
