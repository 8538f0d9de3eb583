"""Command line interface.

``vitalspy replay TRACE`` replays a recorded observation trace through a
fresh monitor and prints the resulting report as JSON.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace

from vitalspy.adapters.logging import LoggingSink
from vitalspy.adapters.sources.replay import ReplaySource
from vitalspy.config import MonitorConfig, load_config
from vitalspy.core.encoding.ndjson import encode_timeline
from vitalspy.core.encoding.report import encode_report
from vitalspy.core.errors import ConfigurationError
from vitalspy.monitor import PerformanceMonitor

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def _parse_environment(pairs: Sequence[str]) -> dict[str, str]:
    environment: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {pair!r}")
        environment[key] = value
    return environment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vitalspy",
        description="Collect and score page performance signals.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser(
        "replay", help="Replay an NDJSON observation trace and print the report."
    )
    replay.add_argument("trace", help="Path to the NDJSON trace file.")
    replay.add_argument(
        "--config",
        help="TOML configuration file or project directory with pyproject.toml.",
    )
    replay.add_argument("--label", help="Override the label shown in log output.")
    replay.add_argument(
        "--environment",
        "-e",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment descriptor entry copied into the report.",
    )
    replay.add_argument(
        "--timeline",
        action="store_true",
        help="Print the timeline as NDJSON instead of the report.",
    )
    replay.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Do not echo emitted events to stderr.",
    )
    return parser


def _load(args: argparse.Namespace) -> MonitorConfig:
    config = load_config(args.config) if args.config else MonitorConfig()
    if args.label:
        config = replace(config, options=replace(config.options, label=args.label))
    return config


def run_replay(args: argparse.Namespace) -> int:
    try:
        environment = _parse_environment(args.environment)
        config = _load(args)
    except (ConfigurationError, argparse.ArgumentTypeError, OSError) as exc:
        print(f"vitalspy: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        source = ReplaySource.from_path(args.trace)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"vitalspy: cannot read trace: {exc}", file=sys.stderr)
        return EXIT_ERROR

    sink = None if args.quiet else LoggingSink()
    monitor = PerformanceMonitor(config, sink=sink, clock=source.clock)
    monitor.start(source, source)
    count = source.play()
    logger.debug("Replayed %d trace records", count)

    if args.timeline:
        sys.stdout.write(encode_timeline(monitor.session.timeline.events))
    else:
        sys.stdout.write(encode_report(monitor.get_report(environment or None)) + "\n")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )
    if args.command == "replay":
        return run_replay(args)
    parser.error(f"unknown command {args.command!r}")
    return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
