#!/usr/bin/env python3
"""CLI entry point for the UPower battery monitor.

Prints Waybar JSON status lines for battery devices known to UPower.

Usage:
    python -m upower_battery [OPTIONS]
    upower-battery [OPTIONS]

Exits with code 0 on success or clean shutdown, 1 on runtime errors and
2 on invalid arguments.
"""

import argparse
import asyncio
import logging
import os
import signal
import sys

from . import __version__, configure_logging
from .duration import parse_duration
from .errors import BatteryMonitorError
from .kinds import DeviceKindFilter
from .models import MonitorConfig

logger = logging.getLogger("upower_battery")

DEFAULT_KINDS = "headset, headphones"


def _kinds_arg(value: str) -> DeviceKindFilter:
    try:
        return DeviceKindFilter.parse(value)
    except BatteryMonitorError as e:
        raise argparse.ArgumentTypeError(f"{e.message}. {e.suggestion}")


def _duration_arg(value: str):
    try:
        return parse_duration(value)
    except BatteryMonitorError as e:
        raise argparse.ArgumentTypeError(e.message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="upower-battery",
        description="Report UPower battery levels as Waybar JSON status lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
{DeviceKindFilter.help_text()}

Examples:
    # Print headset and headphone batteries once
    upower-battery

    # Keep a Waybar module updated with mouse and keyboard batteries
    upower-battery --listen --kinds mouse,keyboard --refresh 1m

Environment Variables:
    UPOWER_BATTERY_KINDS           Override default kinds ({DEFAULT_KINDS})
    UPOWER_BATTERY_LOW_PERCENTAGE  Override low percentage (20)
    UPOWER_BATTERY_LOW_CLASS       Override low class (low)
    UPOWER_BATTERY_REFRESH         Override refresh interval (15s)
    UPOWER_BATTERY_LOG_LEVEL       Override log level (INFO)
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-k",
        "--kinds",
        type=_kinds_arg,
        default=os.environ.get("UPOWER_BATTERY_KINDS", DEFAULT_KINDS),
        help=f"Device kinds to match, comma separated (default: {DEFAULT_KINDS})",
    )

    parser.add_argument(
        "--low-class",
        type=str,
        default=os.environ.get("UPOWER_BATTERY_LOW_CLASS", "low"),
        help="CSS class returned when the battery percentage is at or below --low-percentage",
    )

    parser.add_argument(
        "-l",
        "--low-percentage",
        type=float,
        default=os.environ.get("UPOWER_BATTERY_LOW_PERCENTAGE", "20"),
        help="The percentage at or below which --low-class is included in output (default: 20)",
    )

    parser.add_argument(
        "--listen",
        action="store_true",
        help="Run continuously, refreshing on UPower signals",
    )

    parser.add_argument(
        "-r",
        "--refresh",
        type=_duration_arg,
        default=os.environ.get("UPOWER_BATTERY_REFRESH", "15s"),
        help="How often to refresh even without UPower signals (default: 15s)",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("UPOWER_BATTERY_LOG_LEVEL", "INFO").upper(),
        help="Logging level, written to stderr (default: INFO)",
    )

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Parsed arguments namespace.
    """
    return build_parser().parse_args(argv)


def config_from_args(args: argparse.Namespace) -> MonitorConfig:
    """Assemble the monitor configuration from parsed arguments."""
    return MonitorConfig(
        kinds=args.kinds,
        low_percentage=args.low_percentage,
        low_class=args.low_class,
        listen=args.listen,
        refresh=args.refresh,
    )


async def main_async(config: MonitorConfig) -> int:
    """Async main entry point."""
    # Import here to speed up --help
    from .monitor import BatteryMonitor
    from .upower import UPowerSource

    try:
        source = UPowerSource.connect()
        monitor = BatteryMonitor(config, source)

        if config.listen:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, monitor.request_shutdown)

        await monitor.run()

    except BatteryMonitorError as e:
        logger.error(e.message)
        if e.suggestion:
            logger.error(e.suggestion)
        logger.debug(f"Error details: {e.to_dict()}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the battery monitor.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = parse_args(argv)
    configure_logging(args.log_level)

    config = config_from_args(args)
    logger.debug(f"Matching kinds: {config.kinds}")

    try:
        return asyncio.run(main_async(config))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
