#!/usr/bin/env python3
"""Bot Detector - Entry point"""

import argparse
import json
import sys

from rich.console import Console

from botdetect import VERSION, BotAnalyzer, load_config, print_report
from botdetect.logs import setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Bot Detector - Flag bot-like clients in web access logs",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument("logfile", help="Access log file to analyze")
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("-o", "--output", help="Output file (JSON)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("--shards", type=int, help="Parse the log in N parallel shards")
    parser.add_argument("--max-requests", type=int, help="Volume threshold per IP/country")
    parser.add_argument("--burst-window", type=float, help="Burst window in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"BotDetector v{VERSION}")

    args = parser.parse_args(argv)

    console = Console(stderr=args.json)
    setup_logging(args.verbose, console)

    try:
        config = load_config(args.config).with_overrides(
            shards=args.shards,
            max_requests=args.max_requests,
            burst_window_seconds=args.burst_window,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        return 2

    analyzer = BotAnalyzer(config=config, console=None if args.json else console)

    try:
        report = analyzer.analyze_file(args.logfile)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        return 1

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report, console)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(report, f, indent=2)
        console.print(f"\n[green]Report saved to:[/] {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
