"""UPower device source over the system D-Bus.

Device queries go through pydbus and run in worker threads so the asyncio
loop is never blocked by the bus. UPower signals are dispatched by a GLib
main loop on a daemon thread and forwarded to asyncio.
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol

from .errors import DeviceQueryFailed, DeviceSourceUnavailable
from .kinds import DeviceKind
from .models import DeviceSnapshot

logger = logging.getLogger(__name__)

# Import pydbus lazily to handle missing dependency gracefully
try:
    from pydbus import SystemBus
    from gi.repository import GLib
    PYDBUS_AVAILABLE = True
except ImportError:
    SystemBus = None
    GLib = None
    PYDBUS_AVAILABLE = False
    logger.debug("pydbus not available - UPower queries will not work")

UPOWER_BUS_NAME = "org.freedesktop.UPower"
UPOWER_OBJECT_PATH = "/org/freedesktop/UPower"

# Seconds to wait for the GLib thread when unsubscribing
GLIB_JOIN_TIMEOUT = 2.0


class NotificationStream(Protocol):
    """Source of change notifications."""

    async def next(self) -> str:
        """Wait for the next notification and return its signal name."""
        ...


class DeviceSource(Protocol):
    """Anything that can enumerate and describe battery devices."""

    async def enumerate_devices(self) -> list[str]:
        ...

    async def query_device(self, path: str) -> DeviceSnapshot:
        ...

    def notifications(self):
        """Async context manager yielding a NotificationStream."""
        ...


class UPowerNotifications:
    """Bridge UPower D-Bus signals into asyncio.

    At most one notification is held; signals arriving while one is
    pending are coalesced into it.
    """

    def __init__(self, bus, loop: asyncio.AbstractEventLoop):
        self.bus = bus
        self._loop = loop
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=1)
        self._subscription = None
        self._glib_loop = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Subscribe to UPower signals and start dispatching them."""
        self._subscription = self.bus.subscribe(
            sender=UPOWER_BUS_NAME,
            signal_fired=self._on_signal,
        )
        self._glib_loop = GLib.MainLoop()
        self._thread = threading.Thread(
            target=self._glib_loop.run,
            name="upower-signals",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Subscribed to UPower signals")

    def stop(self) -> None:
        """Unsubscribe and stop the GLib dispatch thread."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._glib_loop is not None:
            self._glib_loop.quit()
            self._glib_loop = None
        if self._thread is not None:
            self._thread.join(timeout=GLIB_JOIN_TIMEOUT)
            self._thread = None
        logger.debug("Unsubscribed from UPower signals")

    def _on_signal(self, sender, object_path, interface, signal, parameters) -> None:
        """GLib thread: hand the signal over to the asyncio loop."""
        logger.debug(f"UPower signal {interface}.{signal} from {object_path}")
        self._loop.call_soon_threadsafe(self._push, signal)

    def _push(self, signal: str) -> None:
        if self._queue.full():
            return
        self._queue.put_nowait(signal)

    async def next(self) -> str:
        return await self._queue.get()


class UPowerSource:
    """UPower daemon on the system bus."""

    def __init__(self, bus):
        """Initialize with an open bus.

        Args:
            bus: pydbus bus (SystemBus instance)
        """
        self.bus = bus
        self.upower = bus.get(UPOWER_BUS_NAME, UPOWER_OBJECT_PATH)

    @classmethod
    def connect(cls) -> "UPowerSource":
        """Connect to UPower on the system bus.

        Raises:
            DeviceSourceUnavailable: If pydbus is missing or UPower is unreachable
        """
        if not PYDBUS_AVAILABLE:
            raise DeviceSourceUnavailable("pydbus not available")

        try:
            source = cls(SystemBus())
        except Exception as e:
            raise DeviceSourceUnavailable(str(e)) from e

        logger.info("Connected to UPower on the system bus")
        return source

    async def enumerate_devices(self) -> list[str]:
        """Object paths of all devices, in UPower's order.

        Raises:
            DeviceQueryFailed: If EnumerateDevices fails
        """
        try:
            devices = await asyncio.to_thread(self.upower.EnumerateDevices)
        except Exception as e:
            raise DeviceQueryFailed("EnumerateDevices", str(e)) from e
        return list(devices)

    async def query_device(self, path: str) -> DeviceSnapshot:
        """Read type, percentage and model of one device.

        Raises:
            DeviceQueryFailed: If the device vanished or a property read failed
        """
        return await asyncio.to_thread(self._read_device, path)

    def _read_device(self, path: str) -> DeviceSnapshot:
        try:
            device = self.bus.get(UPOWER_BUS_NAME, path)
            type_code = device.Type
            percentage = float(device.Percentage)
            model = device.Model
        except Exception as e:
            raise DeviceQueryFailed("device query", str(e), device_path=path) from e

        return DeviceSnapshot(
            path=path,
            kind=DeviceKind.from_code(type_code),
            percentage=percentage,
            model=model or "",
        )

    @asynccontextmanager
    async def notifications(self) -> AsyncIterator[UPowerNotifications]:
        """Subscribe to UPower signals for the duration of the block."""
        stream = UPowerNotifications(self.bus, asyncio.get_running_loop())
        try:
            stream.start()
        except Exception as e:
            stream.stop()
            raise DeviceSourceUnavailable(f"cannot subscribe to signals: {e}") from e

        try:
            yield stream
        finally:
            # Joining the GLib thread blocks
            await asyncio.to_thread(stream.stop)
