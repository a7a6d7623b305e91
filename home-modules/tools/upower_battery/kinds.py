"""UPower device kinds and the comma-separated kind filter."""

import shutil
import textwrap
from enum import Enum
from typing import Iterable, Iterator

from .errors import UnknownKindName

# Columns left free beside the wrapped help text, covering argparse indentation
HELP_MARGIN = 12
HELP_MIN_WIDTH = 40


class DeviceKind(Enum):
    """Device type as reported by the UPower ``Type`` property.

    The D-Bus interface documentation stops at ``phone``; upowerd itself
    reports the full range below.
    """
    UNKNOWN = 0
    LINE_POWER = 1
    BATTERY = 2
    UPS = 3
    MONITOR = 4
    MOUSE = 5
    KEYBOARD = 6
    PDA = 7
    PHONE = 8
    MEDIA_PLAYER = 9
    TABLET = 10
    COMPUTER = 11
    GAMING_INPUT = 12
    PEN = 13
    TOUCHPAD = 14
    MODEM = 15
    NETWORK = 16
    HEADSET = 17
    SPEAKERS = 18
    HEADPHONES = 19
    VIDEO = 20
    OTHER_AUDIO = 21
    REMOTE_CONTROL = 22
    PRINTER = 23
    SCANNER = 24
    CAMERA = 25
    WEARABLE = 26
    TOY = 27
    GENERIC = 28
    LAST = 29

    @property
    def canonical_name(self) -> str:
        """Lowercase, hyphenated name used on the command line."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_code(cls, code) -> "DeviceKind":
        """Map a UPower type code to a kind, falling back to UNKNOWN."""
        try:
            return cls(int(code))
        except (TypeError, ValueError):
            return cls.UNKNOWN

    @classmethod
    def from_name(cls, name: str) -> "DeviceKind":
        """Look up a kind by its canonical name.

        Raises:
            UnknownKindName: If no kind has that name
        """
        wanted = name.strip().lower()
        for kind in cls:
            if kind.canonical_name == wanted:
                return kind
        raise UnknownKindName(name.strip(), cls.names())

    @classmethod
    def names(cls) -> list[str]:
        """All canonical names in code order."""
        return [kind.canonical_name for kind in cls]

    def __str__(self) -> str:
        return self.canonical_name


class DeviceKindFilter:
    """Immutable set of device kinds, kept in code order."""

    __slots__ = ("_kinds", "_members")

    def __init__(self, kinds: Iterable[DeviceKind] = ()):
        self._members = frozenset(kinds)
        self._kinds = tuple(sorted(self._members, key=lambda kind: kind.value))

    @classmethod
    def parse(cls, text: str) -> "DeviceKindFilter":
        """Parse a comma-separated list of kind names.

        Blank entries are ignored, so an empty string gives an empty
        filter. Duplicates collapse.

        Raises:
            UnknownKindName: On the first name that is not a device kind
        """
        kinds = []
        for term in text.split(","):
            if not term.strip():
                continue
            kinds.append(DeviceKind.from_name(term))
        return cls(kinds)

    def matches(self, kind: DeviceKind) -> bool:
        return kind in self._members

    @staticmethod
    def help_text(width: int | None = None) -> str:
        """Describe the accepted kind names, wrapped for the terminal."""
        if width is None:
            width = shutil.get_terminal_size().columns - HELP_MARGIN
        width = max(width, HELP_MIN_WIDTH)

        return "Device kinds to match, comma separated. Possible values:\n\n{}".format(
            textwrap.fill(", ".join(DeviceKind.names()), width=width)
        )

    def __contains__(self, kind: object) -> bool:
        return kind in self._members

    def __iter__(self) -> Iterator[DeviceKind]:
        return iter(self._kinds)

    def __len__(self) -> int:
        return len(self._kinds)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeviceKindFilter):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __str__(self) -> str:
        return ", ".join(kind.canonical_name for kind in self._kinds)

    def __repr__(self) -> str:
        return f"DeviceKindFilter({str(self)!r})"
