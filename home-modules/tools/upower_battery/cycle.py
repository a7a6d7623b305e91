"""One refresh cycle: enumerate, filter, format, emit.

Output is NDJSON for Waybar: one line per matching device, or a single
empty line when nothing matched so the module is cleared.
"""

import logging
import sys
from typing import Optional, TextIO

from .models import MonitorConfig, format_snapshot
from .upower import DeviceSource

logger = logging.getLogger(__name__)


def emit_lines(lines: list[str], output: Optional[TextIO] = None) -> None:
    """Write status lines and flush them as one batch."""
    stream = output or sys.stdout
    for line in lines:
        print(line, file=stream)
    stream.flush()


async def refresh_cycle(
    config: MonitorConfig,
    source: DeviceSource,
    output: Optional[TextIO] = None,
) -> int:
    """Emit the current status of every device matching the kind filter.

    Devices are reported in the order the source enumerates them. Lines
    are written only after every device was read, so a query error
    leaves no partial cycle on the output.

    Args:
        config: Monitor configuration
        source: Device source to query
        output: Stream for status lines (default: stdout)

    Returns:
        Number of devices reported

    Raises:
        DeviceQueryFailed: If enumeration or a device query fails
    """
    lines = []

    for path in await source.enumerate_devices():
        snapshot = await source.query_device(path)

        if not config.kinds.matches(snapshot.kind):
            logger.debug(f"Skipping {path} ({snapshot.kind})")
            continue

        record = format_snapshot(
            snapshot.percentage,
            snapshot.model,
            config.low_percentage,
            config.low_class,
        )
        lines.append(record.to_json())

    matched = len(lines)
    if matched == 0:
        lines.append("")

    emit_lines(lines, output)
    logger.debug(f"Refresh cycle reported {matched} device(s)")
    return matched
