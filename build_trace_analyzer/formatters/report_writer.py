"""
Plain-text report rendering.
"""

from typing import List, TextIO

from ..core.types import AnalysisConfig, AnalysisReport, ReportView
from .time_formatter import format_time, truncate_name


class ReportWriter:
    """Renders an AnalysisReport as a plain-text summary."""

    def __init__(self, config: AnalysisConfig):
        self.config = config

    def render(self, report: AnalysisReport) -> str:
        """
        Render the full report.

        Args:
            report: AnalysisReport from BuildAnalyzer.analyze()

        Returns:
            Report text
        """
        lines = self._summary_lines(report)
        for view in report.views.values():
            lines.append('')
            lines.extend(self._view_lines(view, report))
        lines.append('')
        return '\n'.join(lines)

    def write(self, report: AnalysisReport, out: TextIO) -> None:
        out.write(self.render(report))

    def _summary_lines(self, report: AnalysisReport) -> List[str]:
        totals = report.totals
        return [
            '**** Time summary:',
            f"Compilation ({totals.compilation_count} times, {totals.file_count} trace files):",
            f"  Total compiler time:        {format_time(totals.compiler_time_us)}",
            f"  Parsing (frontend):         {format_time(totals.frontend_time_us)}",
            f"  Codegen & opts (backend):   {format_time(totals.backend_time_us)}",
            f"  Wall-clock span:            {format_time(totals.wall_span_us)}",
            f"  Busy time:                  {format_time(totals.busy_time_us)}"
            f" (parallelism {totals.parallelism_factor:.2f}x)",
            f"  Events: {totals.event_count}, unique names: {totals.name_count}",
        ]

    def _view_lines(self, view: ReportView, report: AnalysisReport) -> List[str]:
        lines = [f"**** {view.title}:"]
        if not view.entries:
            lines.append('  (none)')
            return lines

        max_length = self.config.max_name_length
        for entry in view.entries:
            name = truncate_name(entry.name, max_length)
            line = f"{format_time(entry.duration_us):>10}: {name}"
            if view.key == 'headers':
                avg = entry.duration_us / entry.count
                line += f" (included {entry.count} times, avg {format_time(avg)}), included via:"
                lines.append(line)
                for chain, count in report.header_chains.get(entry.name, []):
                    via = ' '.join(truncate_name(n, max_length) for n in chain) or '(unknown)'
                    lines.append(f"    {count}x: {via}")
                continue
            if entry.count > 1:
                avg = entry.duration_us / entry.count
                line += f" ({entry.count} times, avg {format_time(avg)})"
            lines.append(line)
        return lines
