"""Pytest fixtures for the UPower battery monitor tests."""

import asyncio
import io
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

import pytest

from upower_battery.errors import DeviceQueryFailed
from upower_battery.kinds import DeviceKind, DeviceKindFilter
from upower_battery.models import DeviceSnapshot, MonitorConfig


class FakeNotifications:
    """Notification stream fed by the test."""

    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()

    def fire(self, signal: str = "PropertiesChanged") -> None:
        self.queue.put_nowait(signal)

    async def next(self):
        return await self.queue.get()


class FakeDeviceSource:
    """In-memory stand-in for UPower.

    Devices are reported in insertion order. ``fail_after`` makes
    enumeration fail once that many cycles have run.
    """

    def __init__(self, devices=None):
        self.devices: dict[str, DeviceSnapshot] = {}
        for snapshot in devices or []:
            self.devices[snapshot.path] = snapshot
        self.notification_stream = FakeNotifications()
        self.enumerations = 0
        self.fail_after = None
        self.broken_paths: set[str] = set()
        self.subscribed = False

    async def enumerate_devices(self) -> list[str]:
        if self.fail_after is not None and self.enumerations >= self.fail_after:
            raise DeviceQueryFailed("EnumerateDevices", "upowerd went away")
        self.enumerations += 1
        return list(self.devices)

    async def query_device(self, path: str) -> DeviceSnapshot:
        if path in self.broken_paths:
            raise DeviceQueryFailed("device query", "No such object", device_path=path)
        return self.devices[path]

    @asynccontextmanager
    async def notifications(self):
        self.subscribed = True
        try:
            yield self.notification_stream
        finally:
            self.subscribed = False


def make_device(path: str, kind: DeviceKind, percentage: float, model: str = "") -> DeviceSnapshot:
    return DeviceSnapshot(
        path=f"/org/freedesktop/UPower/devices/{path}",
        kind=kind,
        percentage=percentage,
        model=model,
    )


@pytest.fixture
def headset():
    return make_device("headset_dev_AA_BB", DeviceKind.HEADSET, 15.0, "WH-1000XM4")


@pytest.fixture
def headphones():
    return make_device("headphones_dev_CC_DD", DeviceKind.HEADPHONES, 85.0, "Galaxy Buds")


@pytest.fixture
def laptop_battery():
    return make_device("battery_BAT0", DeviceKind.BATTERY, 64.0, "5B10W13930")


@pytest.fixture
def mouse():
    return make_device("mouse_dev_EE_FF", DeviceKind.MOUSE, 50.0, "")


@pytest.fixture
def fake_source(headset, headphones, laptop_battery):
    """Source with a laptop battery between two audio devices."""
    return FakeDeviceSource([headset, laptop_battery, headphones])


@pytest.fixture
def empty_source():
    return FakeDeviceSource()


@pytest.fixture
def sample_config():
    """Default configuration (headset, headphones)."""
    return MonitorConfig()


@pytest.fixture
def listen_config():
    """Continuous mode with a refresh long enough to never fire."""
    return MonitorConfig(listen=True, refresh=timedelta(hours=1))


@pytest.fixture
def output():
    """Captured status line stream."""
    return io.StringIO()


@pytest.fixture
def kinds_all_audio():
    return DeviceKindFilter.parse("headset, headphones, speakers, other-audio")


@pytest.fixture
def make_source():
    """Factory for fake sources with a given device list."""
    return FakeDeviceSource


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by configure_logging() during a test."""
    yield
    logger = logging.getLogger("upower_battery")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
