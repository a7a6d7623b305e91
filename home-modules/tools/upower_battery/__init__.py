"""UPower battery status for Waybar custom modules.

This package polls UPower over the system D-Bus for battery-equipped
devices (headsets, mice, keyboards, ...) and prints one JSON status line
per matching device, either once or continuously as UPower reports changes.

Architecture:
    - UPower is queried through pydbus on the system bus
    - UPower signals wake the monitor; a refresh timer is the fallback
    - Status lines are NDJSON on stdout, logs go to stderr

Modules:
    - kinds: DeviceKind enumeration and the comma-separated kind filter
    - models: Pydantic models (DeviceSnapshot, WaybarOutput, MonitorConfig)
    - duration: Human-readable refresh interval parsing
    - upower: UPower device source and signal subscription
    - cycle: One enumerate-filter-format-emit pass
    - monitor: One-shot / continuous orchestration
"""

import logging

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "configure_logging",
]


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
) -> logging.Logger:
    """Configure package-level logging.

    Status lines own stdout, so the handler always writes to stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string. Defaults to standard format
            with timestamp, level, module, and message.

    Returns:
        Configured logger instance for the upower_battery package.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    logger = logging.getLogger("upower_battery")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler()  # stderr
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    return logger

