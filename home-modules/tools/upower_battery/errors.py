"""
Error types for the UPower battery monitor.

Every failure surfaces as a BatteryMonitorError subclass carrying a
structured code; the entry point turns it into a non-zero exit status.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for the UPower battery monitor.

    - 1000-1099: Configuration errors
    - 1100-1199: Device source errors
    """

    # Configuration errors (1000-1099)
    UNKNOWN_KIND_NAME = 1000
    INVALID_DURATION = 1001

    # Device source errors (1100-1199)
    DEVICE_SOURCE_UNAVAILABLE = 1100
    DEVICE_QUERY_FAILED = 1101


class BatteryMonitorError(Exception):
    """Base exception for battery monitor errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize battery monitor error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured logging.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class UnknownKindName(BatteryMonitorError, ValueError):
    """A device kind name did not match any known kind."""

    def __init__(self, name: str, valid_names: Optional[list[str]] = None):
        """
        Initialize unknown kind error.

        Args:
            name: The offending kind name as given by the user
            valid_names: Accepted kind names, listed in the suggestion
        """
        suggestion = None
        if valid_names:
            suggestion = f"Use one of: {', '.join(valid_names)}"

        super().__init__(
            code=ErrorCode.UNKNOWN_KIND_NAME,
            message=f"Unknown device kind: {name!r}",
            suggestion=suggestion,
            context={"name": name}
        )
        self.name = name


class InvalidDuration(BatteryMonitorError, ValueError):
    """A refresh interval string could not be parsed."""

    def __init__(self, text: str, reason: str):
        super().__init__(
            code=ErrorCode.INVALID_DURATION,
            message=f"Invalid duration {text!r}: {reason}",
            suggestion="Use values like 15s, 500ms, 1m 30s or 2h",
            context={"text": text, "reason": reason}
        )


class DeviceSourceUnavailable(BatteryMonitorError):
    """The connection to UPower could not be established."""

    def __init__(self, reason: str):
        """
        Initialize device source error.

        Args:
            reason: Reason the system bus or UPower was unreachable
        """
        super().__init__(
            code=ErrorCode.DEVICE_SOURCE_UNAVAILABLE,
            message=f"UPower not available: {reason}",
            suggestion="Check that the system D-Bus and upower.service are running",
            context={"reason": reason}
        )


class DeviceQueryFailed(BatteryMonitorError):
    """Enumerating devices or reading a device property failed."""

    def __init__(self, operation: str, reason: str, device_path: Optional[str] = None):
        """
        Initialize device query error.

        Args:
            operation: Query that failed (e.g., "EnumerateDevices", "Percentage")
            reason: Reason for failure
            device_path: D-Bus object path of the device, if any
        """
        context = {"operation": operation, "reason": reason}
        if device_path:
            context["device_path"] = device_path

        target = f" on {device_path}" if device_path else ""
        super().__init__(
            code=ErrorCode.DEVICE_QUERY_FAILED,
            message=f"UPower {operation} failed{target}: {reason}",
            context=context
        )
        self.device_path = device_path
