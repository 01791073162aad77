"""Plain message types for stamped poses, twists and odometry."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "OCC_GRID_UNKNOWN",
    "OCC_GRID_FREE",
    "OCC_GRID_OCCUPIED",
    "Time",
    "Header",
    "Vector3",
    "Twist",
    "TwistStamped",
    "Odometry",
    "Point",
    "Quaternion",
    "Pose",
    "PoseStamped",
]

OCC_GRID_UNKNOWN = -1
OCC_GRID_FREE = 0
OCC_GRID_OCCUPIED = 100

_NS_PER_SEC = 1_000_000_000


@dataclass(frozen=True, order=True)
class Time:
    """A non-negative point in time held as seconds and nanoseconds."""

    sec: int = 0
    nanosec: int = 0

    def __post_init__(self) -> None:
        if self.sec < 0 or self.nanosec < 0:
            raise ValueError("time must not be negative")
        if self.nanosec >= _NS_PER_SEC:
            extra, rest = divmod(self.nanosec, _NS_PER_SEC)
            object.__setattr__(self, "sec", self.sec + extra)
            object.__setattr__(self, "nanosec", rest)

    @classmethod
    def from_nanoseconds(cls, nanoseconds: int) -> Time:
        """Build a time from a count of nanoseconds."""
        if nanoseconds < 0:
            raise ValueError("time must not be negative")
        sec, nanosec = divmod(int(nanoseconds), _NS_PER_SEC)
        return cls(sec, nanosec)

    @classmethod
    def from_seconds(cls, seconds: float) -> Time:
        """Build a time from a (possibly fractional) number of seconds."""
        return cls.from_nanoseconds(round(seconds * _NS_PER_SEC))

    def nanoseconds(self) -> int:
        """Total nanoseconds since the epoch."""
        return self.sec * _NS_PER_SEC + self.nanosec

    def seconds(self) -> float:
        """Total seconds since the epoch as a float."""
        return self.nanoseconds() / _NS_PER_SEC

    def __add__(self, other: float) -> Time:
        """Shift this time forward by ``other`` seconds."""
        if isinstance(other, Time) or not isinstance(other, (int, float)):
            return NotImplemented
        return Time.from_nanoseconds(self.nanoseconds() + round(other * _NS_PER_SEC))

    __radd__ = __add__

    def __sub__(self, other):
        """Seconds between two times, or this time shifted back by ``other`` seconds."""
        if isinstance(other, Time):
            return (self.nanoseconds() - other.nanoseconds()) / _NS_PER_SEC
        if isinstance(other, (int, float)):
            return Time.from_nanoseconds(self.nanoseconds() - round(other * _NS_PER_SEC))
        return NotImplemented


@dataclass
class Header:
    stamp: Time = field(default_factory=Time)
    frame_id: str = ""


@dataclass
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __truediv__(self, divisor: float) -> Vector3:
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)


@dataclass
class Twist:
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)

    def __add__(self, other: Twist) -> Twist:
        return Twist(self.linear + other.linear, self.angular + other.angular)

    def __sub__(self, other: Twist) -> Twist:
        return Twist(self.linear - other.linear, self.angular - other.angular)

    def __truediv__(self, divisor: float) -> Twist:
        return Twist(self.linear / divisor, self.angular / divisor)


@dataclass
class TwistStamped:
    header: Header = field(default_factory=Header)
    twist: Twist = field(default_factory=Twist)


@dataclass
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Quaternion:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass
class Pose:
    position: Point = field(default_factory=Point)
    orientation: Quaternion = field(default_factory=Quaternion)


@dataclass
class PoseStamped:
    header: Header = field(default_factory=Header)
    pose: Pose = field(default_factory=Pose)


@dataclass
class Odometry:
    header: Header = field(default_factory=Header)
    child_frame_id: str = ""
    pose: Pose = field(default_factory=Pose)
    twist: Twist = field(default_factory=Twist)