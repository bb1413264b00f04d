"""
Result builder for JSON output.
"""

from ..formatters import format_time


def prepare_results(report, analyzer=None):
    """
    Convert an analysis report to a structured, JSON-serializable format.

    Args:
        report: AnalysisReport from BuildAnalyzer.analyze()
        analyzer: Optional BuildAnalyzer, adds parsed/skipped file bookkeeping

    Returns:
        Dictionary with structured results for rendering
    """
    totals = report.totals

    summary = {
        'compilation_count': totals.compilation_count,
        'file_count': totals.file_count,
        'event_count': totals.event_count,
        'name_count': totals.name_count,
        'compiler_time_us': totals.compiler_time_us,
        'compiler_time_formatted': format_time(totals.compiler_time_us),
        'frontend_time_us': totals.frontend_time_us,
        'frontend_time_formatted': format_time(totals.frontend_time_us),
        'backend_time_us': totals.backend_time_us,
        'backend_time_formatted': format_time(totals.backend_time_us),
        'wall_span_us': totals.wall_span_us,
        'wall_span_formatted': format_time(totals.wall_span_us),
        'busy_time_us': totals.busy_time_us,
        'busy_time_formatted': format_time(totals.busy_time_us),
        'parallelism_factor': totals.parallelism_factor,
    }

    views = {}
    for key, view in report.views.items():
        views[key] = {
            'title': view.title,
            'entries': [
                {
                    'rank': entry.rank,
                    'name': entry.name,
                    'duration_us': entry.duration_us,
                    'duration_formatted': format_time(entry.duration_us),
                    'count': entry.count,
                    'avg_us': entry.duration_us / entry.count if entry.count else 0.0,
                }
                for entry in view.entries
            ]
        }

    header_chains = {
        header: [{'chain': list(chain), 'count': count} for chain, count in chains]
        for header, chains in report.header_chains.items()
    }

    final_results = {
        'summary': summary,
        'views': views,
        'header_chains': header_chains,
    }

    if analyzer is not None:
        final_results['files'] = {
            'parsed': list(analyzer.parsed_files),
            'empty': list(analyzer.empty_files),
            'skipped': dict(analyzer.skipped_files),
        }

    return final_results
