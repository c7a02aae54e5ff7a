"""Value types for fixes, circles and attendance decisions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A location in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Circle:
    """A disc of positional uncertainty around a GPS fix.

    Attributes:
        center: Fix location.
        radius_m: Radius in meters. Built as accuracy + margin, see ``from_accuracy``.
    """

    center: GeoPoint
    radius_m: float

    @classmethod
    def from_accuracy(cls, center: GeoPoint, accuracy_m: float, margin_m: float) -> Circle:
        """Build an uncertainty circle from a measured accuracy plus a fixed margin."""

        return cls(center=center, radius_m=float(accuracy_m) + float(margin_m))


@dataclass(frozen=True, slots=True)
class OverlapResult:
    """Share of the claimant's circle covered by the anchor's circle (0..100)."""

    coverage_percentage: float


class AttendanceStatus(StrEnum):
    """Decision outcome.

    The coverage policy yields PRESENT/PROXY, the distance policy yields
    PRESENT/PENDING/ABSENT.
    """

    PRESENT = "present"
    PROXY = "proxy"
    PENDING = "pending"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class LocationFix:
    """A single reading from the location-acquisition side.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        accuracy_m: Horizontal accuracy in meters (0 is allowed).
        timestamp_ms: Unix epoch milliseconds, if known.
        network_name: Name of the network the device was on (e.g. WiFi SSID).
        source: Free-form provider tag ("gps", "network", ...).
    """

    latitude: float
    longitude: float
    accuracy_m: float
    timestamp_ms: int | None = None
    network_name: str | None = None
    source: str = "gps"

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class Measurement:
    """Inputs a decision policy looks at."""

    distance_m: float
    coverage_percentage: float
    same_network: bool = False


@dataclass(frozen=True, slots=True)
class AttendanceResult:
    """What gets stored for one submission."""

    distance_m: float
    coverage_percentage: float
    anchor_radius_m: float
    claimant_radius_m: float
    status: AttendanceStatus


@dataclass(frozen=True, slots=True)
class RosterEntry:
    """One expected attendee."""

    id: str
    name: str


DEFAULT_TZ: Final[str] = "Asia/Kolkata"
