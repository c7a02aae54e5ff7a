"""Attendance decision policies.

Two interchangeable strategies turn a Measurement into a status:

- CoveragePolicy: overlap-based, PRESENT when enough of the claimant's
  uncertainty disc lies inside the anchor's.
- DistancePolicy: flat distance threshold with a same-network extension, for
  coarse fixes where accuracy circles carry little information.

The caller picks one explicitly; neither falls back to the other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, Protocol

from presence_check.errors import InvalidInputError
from presence_check.models import AttendanceStatus, Measurement

DEFAULT_MINIMUM_COVERAGE_PERCENT: Final[float] = 50.0
DEFAULT_DISTANCE_THRESHOLD_M: Final[float] = 30.0
DEFAULT_EXTENDED_RADIUS_M: Final[float] = 50.0


class AttendanceDecisionPolicy(Protocol):
    """Maps a measurement to an attendance status."""

    name: str

    def decide(self, measurement: Measurement) -> AttendanceStatus: ...


@dataclass(frozen=True, slots=True)
class CoveragePolicy:
    """PRESENT if coverage >= minimum_coverage_percent, else PROXY."""

    minimum_coverage_percent: float = DEFAULT_MINIMUM_COVERAGE_PERCENT
    name: str = "coverage"

    def __post_init__(self) -> None:
        m = self.minimum_coverage_percent
        if not math.isfinite(m) or not 0.0 <= m <= 100.0:
            raise InvalidInputError(f"minimum_coverage_percent must be in [0, 100], got {m!r}")

    def decide(self, measurement: Measurement) -> AttendanceStatus:
        coverage = measurement.coverage_percentage
        if not math.isfinite(coverage):
            raise InvalidInputError(f"coverage must be finite, got {coverage!r}")
        if coverage >= self.minimum_coverage_percent:
            return AttendanceStatus.PRESENT
        return AttendanceStatus.PROXY


@dataclass(frozen=True, slots=True)
class DistancePolicy:
    """Distance-threshold decision.

    Rules, in order:
        1. distance <= threshold_m -> PRESENT
        2. same network on both sides and distance <= extended_radius_m -> PRESENT
        3. distance > extended_radius_m -> ABSENT
        4. otherwise PENDING (needs manual review)
    """

    threshold_m: float = DEFAULT_DISTANCE_THRESHOLD_M
    extended_radius_m: float = DEFAULT_EXTENDED_RADIUS_M
    name: str = "distance"

    def __post_init__(self) -> None:
        for label, value in (("threshold_m", self.threshold_m), ("extended_radius_m", self.extended_radius_m)):
            if not math.isfinite(value) or value < 0:
                raise InvalidInputError(f"{label} must be a finite non-negative number, got {value!r}")

    def decide(self, measurement: Measurement) -> AttendanceStatus:
        distance = measurement.distance_m
        if not math.isfinite(distance) or distance < 0:
            raise InvalidInputError(f"distance must be a finite non-negative number, got {distance!r}")

        if distance <= self.threshold_m:
            return AttendanceStatus.PRESENT
        if measurement.same_network and distance <= self.extended_radius_m:
            return AttendanceStatus.PRESENT
        if distance > self.extended_radius_m:
            return AttendanceStatus.ABSENT
        return AttendanceStatus.PENDING
