"""Pydantic data models for the UPower battery monitor.

This module defines the data flowing through one refresh cycle:
- DeviceSnapshot: Properties of one UPower device, read once per cycle
- WaybarOutput: JSON line consumed by a Waybar custom module
- MonitorConfig: Read-only settings assembled from the command line
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .kinds import DeviceKind, DeviceKindFilter


# =============================================================================
# Device Snapshot
# =============================================================================


class DeviceSnapshot(BaseModel):
    """One device as seen during a single refresh cycle.

    Attributes:
        path: D-Bus object path of the device.
        kind: Device kind mapped from the UPower ``Type`` code.
        percentage: Charge level reported by UPower (0-100).
        model: Model name, empty when UPower does not know it.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="D-Bus object path")
    kind: DeviceKind = Field(default=DeviceKind.UNKNOWN, description="Device kind")
    percentage: float = Field(default=0.0, description="Charge percentage")
    model: str = Field(default="", description="Model name")


# =============================================================================
# Waybar Output
# =============================================================================


class WaybarOutput(BaseModel):
    """Status line for a Waybar custom module (``return-type: json``).

    Unset optional fields are left out of the JSON entirely; Waybar treats
    a missing ``class`` differently from an empty one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    tooltip: Optional[str] = None
    css_class: Optional[str] = Field(default=None, alias="class")
    percentage: Optional[float] = None

    def to_json(self) -> str:
        """Serialize to a single compact JSON line."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


def format_percentage(percentage: float) -> str:
    """Render a percentage, dropping the fraction when it is whole."""
    if float(percentage).is_integer():
        return f"{int(percentage)}%"
    return f"{percentage}%"


def format_snapshot(
    percentage: float,
    model: Optional[str],
    low_percentage: float,
    low_class: str,
) -> WaybarOutput:
    """Build the Waybar status line for one device.

    Args:
        percentage: Charge level reported by UPower
        model: Model name; empty or None leaves the tooltip out
        low_percentage: At or below this level the low class is set
        low_class: CSS class name for a low battery

    Returns:
        WaybarOutput for the device
    """
    return WaybarOutput(
        text=format_percentage(percentage),
        tooltip=model or None,
        css_class=low_class if percentage <= low_percentage else None,
        percentage=percentage,
    )


# =============================================================================
# Configuration
# =============================================================================


class MonitorConfig(BaseModel):
    """Settings for the monitor, fixed for the life of the process.

    Attributes:
        kinds: Device kinds to report.
        low_percentage: Percentage at or below which low_class is emitted.
        low_class: CSS class for low batteries.
        listen: Keep running and refresh on UPower signals.
        refresh: Idle time after a cycle before refreshing without a signal.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kinds: DeviceKindFilter = Field(
        default_factory=lambda: DeviceKindFilter([DeviceKind.HEADSET, DeviceKind.HEADPHONES]),
        description="Device kinds to match",
    )
    low_percentage: float = Field(default=20.0, description="Low battery threshold")
    low_class: str = Field(default="low", description="CSS class for low batteries")
    listen: bool = Field(default=False, description="Run continuously")
    refresh: timedelta = Field(
        default=timedelta(seconds=15),
        description="Fallback refresh interval",
    )

    @field_validator('refresh')
    @classmethod
    def validate_refresh(cls, v: timedelta) -> timedelta:
        """Refresh interval must be positive."""
        if v <= timedelta(0):
            raise ValueError(f"refresh interval must be positive, got {v}")
        return v
