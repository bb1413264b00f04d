#!/usr/bin/env python3
"""
Build Trace Analyzer - Command Line Entry Point
"""

import json
import os
import sys
from pathlib import Path

from build_trace_analyzer import AnalysisConfig, BuildAnalyzer, NoEventsError
from build_trace_analyzer.formatters import ReportWriter
from build_trace_analyzer.web import prepare_results

DEFAULT_CONFIG_FILE = 'BuildTraceAnalyzer.ini'


def collect_trace_files(inputs):
    """Expand directories to their *.json files (sorted); keep file paths as given."""
    files = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            files.extend(str(p) for p in sorted(path.rglob('*.json')) if p.is_file())
        else:
            files.append(str(path))
    return files


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(
        description='Analyze clang -ftime-trace JSON files and report the most expensive parts of a build.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_build.py build/
  python analyze_build.py build/foo.json build/bar.json -o report.txt
  python analyze_build.py build/ --json -o report.json
  python analyze_build.py build/ --workers 8 --config BuildTraceAnalyzer.ini
        """
    )
    parser.add_argument('inputs', nargs='+', help='Trace JSON files or directories containing them')
    parser.add_argument('-o', '--output', dest='output_file', help='Output file (default: stdout)')
    parser.add_argument('--json', action='store_true', help='Write results as JSON instead of text')
    parser.add_argument('--config', dest='config_file', default=DEFAULT_CONFIG_FILE,
                        help=f'INI file with report sizes (default: {DEFAULT_CONFIG_FILE})')
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker processes used to decode trace files (default: 1)')
    args = parser.parse_args(argv)

    config = AnalysisConfig.from_ini(args.config_file, num_workers=args.workers)

    trace_files = collect_trace_files(args.inputs)
    if not trace_files:
        print(f"Error: no trace .json files found under {', '.join(args.inputs)}")
        return 1

    print(f"\nConfiguration:")
    print(f"  Trace files: {len(trace_files)}")
    print(f"  Config file: {args.config_file if os.path.exists(args.config_file) else '(defaults)'}")
    print(f"  Workers: {config.num_workers}\n")

    analyzer = BuildAnalyzer(config)
    analyzer.process_trace_files(trace_files)

    try:
        report = analyzer.analyze()
    except NoEventsError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        output = json.dumps(prepare_results(report, analyzer), indent=2)
    else:
        output = ReportWriter(config).render(report)

    if args.output_file:
        with open(args.output_file, 'w') as f:
            f.write(output)
        print(f"\n✓ Analysis written to {args.output_file}")
    else:
        print()
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
