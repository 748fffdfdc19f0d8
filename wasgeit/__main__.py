"""
Command line entry point.

Run with: python -m wasgeit [--venue KEY ...] [--config PATH] [--list] [--json]
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from .adapters import build_adapter_set
from .config import load_config, validate_config
from .errors import ConfigurationError, UnknownVenueError
from .fetcher import crawl_venues
from .log import configure_logging
from .models import VenueCrawlReport
from .registry import build_registry
from .resilience import HealthMonitor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wasgeit", description="Crawl venue program pages for upcoming concerts"
    )
    parser.add_argument("--venue", action="append", dest="venues", metavar="KEY",
                        help="Venue short name to crawl (repeatable, default: all)")
    parser.add_argument("--config", type=Path, help="JSON config file")
    parser.add_argument("--list", action="store_true", help="List venues and exit")
    parser.add_argument("--json", action="store_true", help="Print events as JSON")
    return parser


def print_reports(reports: list[VenueCrawlReport], as_json: bool) -> None:
    if as_json:
        print(json.dumps([r.model_dump(mode="json") for r in reports], indent=2, ensure_ascii=False))
        return

    for report in reports:
        print(f"== {report.venue} ({report.status})")
        if report.fetch_error:
            print(f"  fetch failed: {report.fetch_error}")
            continue
        for event in report.result.events:
            when = event.start.strftime("%a %d.%m.%Y %H:%M" if event.time_known else "%a %d.%m.%Y")
            print(f"  {when}  {event.title}  <{event.link}>")
        for failure in report.result.errors:
            print(f"  ! fragment {failure.fragment_index}: {failure.reason}")


def print_problems(problems: list[str]) -> None:
    for problem in problems:
        print(f"config error: {problem}", file=sys.stderr)


async def run(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print_problems(e.problems)
        return 2

    problems = validate_config(config)
    if problems:
        print_problems(problems)
        return 2

    configure_logging(config["logging"]["level"])

    try:
        registry = build_registry(config)
        adapters = build_adapter_set(registry)
    except ConfigurationError as e:
        print_problems(e.problems)
        return 2

    if args.list:
        for venue in registry:
            marker = "" if venue.short_name in adapters else "  (no adapter)"
            print(f"{venue.short_name:20} {venue.name:25} {venue.url}{marker}")
        return 0

    monitor = HealthMonitor()
    try:
        reports = await crawl_venues(
            adapters, keys=args.venues, fetch_settings=config["fetch"], monitor=monitor
        )
    except UnknownVenueError as e:
        print(str(e), file=sys.stderr)
        return 2

    print_reports(reports, args.json)

    summary = monitor.summary()
    print(
        f"{summary['fetched']}/{summary['total']} venues fetched, "
        f"{summary['events']} events, "
        f"{summary['extraction_errors']} extraction errors",
        file=sys.stderr,
    )
    for venue in monitor.degraded_venues():
        print(f"warning: most {venue} fragments failed, check its adapter", file=sys.stderr)
    return 1 if monitor.failed_venues() else 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
