"""Layout data structures: devices, rooms and blueprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from ..geometry import Point, Rectangle

if TYPE_CHECKING:
    from .conflict import Conflict


class DeviceType(Enum):
    """Kinds of devices that can be placed on a floor plan."""

    SMOKE_DETECTOR = "smoke-detector"
    HEAT_DETECTOR = "heat-detector"
    CO_DETECTOR = "co-detector"
    PULL_STATION = "pull-station"
    STROBE = "strobe"
    HORN = "horn"
    CAMERA = "camera"
    CARD_READER = "card-reader"
    DOOR_CONTACT = "door-contact"
    MOTION_SENSOR = "motion-sensor"

    @classmethod
    def from_string(cls, s: str) -> Optional["DeviceType"]:
        """Parse a device type, accepting underscores and any case.

        Returns None for names outside the enumeration.
        """
        s_norm = s.lower().strip().replace("_", "-").replace(" ", "-")
        for dtype in cls:
            if dtype.value == s_norm:
                return dtype
        return None


class SystemType(Enum):
    """System partition. Pairwise rules only compare devices of the same system."""

    FIRE = "fire"
    CCTV = "cctv"
    ACCESS = "access"

    @classmethod
    def from_string(cls, s: str) -> Optional["SystemType"]:
        s_lower = s.lower().strip()
        for stype in cls:
            if stype.value == s_lower:
                return stype
        return None


class RoomType(Enum):
    """Room usage categories."""

    OFFICE = "office"
    KITCHEN = "kitchen"
    HALLWAY = "hallway"
    STAIRWELL = "stairwell"
    STORAGE = "storage"
    OTHER = "other"

    @classmethod
    def from_string(cls, s: str) -> "RoomType":
        s_lower = s.lower().strip()
        for rtype in cls:
            if rtype.value == s_lower:
                return rtype
        return cls.OTHER


# A device type outside the enumeration is kept as its raw string.
DeviceKind = Union[DeviceType, str]


@dataclass
class Device:
    """A point-placed device on a floor plan.

    ``conflicts`` belongs to the validator and is replaced wholesale by every
    validation pass.
    """

    id: str
    device_type: DeviceKind
    system: SystemType
    x: float  # inches
    y: float  # inches
    rotation: float = 0.0  # degrees, cosmetic
    name: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    conflicts: list["Conflict"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.device_type, str):
            # Unrecognized names stay raw and skip the spacing table
            self.device_type = DeviceType.from_string(self.device_type) or self.device_type
        if not isinstance(self.system, SystemType):
            system = SystemType.from_string(str(self.system))
            if system is None:
                raise ValueError(f"Unknown system {self.system!r} for device {self.id}")
            self.system = system

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def label(self) -> str:
        """Name used in human-readable messages."""
        return self.name or self.id

    @property
    def type_name(self) -> str:
        if isinstance(self.device_type, DeviceType):
            return self.device_type.value
        return str(self.device_type)

    def __repr__(self) -> str:
        return f"Device({self.id}, {self.type_name}, pos=({self.x:.2f}, {self.y:.2f}))"


@dataclass(frozen=True)
class Room:
    """An axis-aligned room rectangle in blueprint inches."""

    id: str
    name: str
    x: float
    y: float
    width: float
    height: float
    type: RoomType = RoomType.OTHER

    @property
    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.height)


@dataclass
class Blueprint:
    """The floor plan a layout belongs to.

    The validator only uses it for context; rule logic never reads it.
    """

    id: str
    name: str = ""
    scale: float = 1.0
    width: float = 0.0
    height: float = 0.0
    rooms: list[Room] = field(default_factory=list)
    devices: list[Device] = field(default_factory=list)
