"""Circle-circle overlap, measured against the claimant's circle."""

from __future__ import annotations

import math

from presence_check.errors import InvalidInputError
from presence_check.geo import distance_m
from presence_check.models import Circle, OverlapResult


def _check_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError(f"{name} must be a finite non-negative number, got {value!r}")


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def lens_coverage(d: float, r1: float, r2: float) -> float:
    """Percentage of circle 2's area that lies inside circle 1.

    Args:
        d: Distance between the two centers in meters.
        r1: Radius of the covering circle (anchor).
        r2: Radius of the measured circle (claimant). The result is always
            normalised by this circle's area.

    Returns:
        Coverage in [0, 100].

    Raises:
        InvalidInputError: If any argument is negative or non-finite.
    """

    _check_non_negative("distance", d)
    _check_non_negative("anchor radius", r1)
    _check_non_negative("claimant radius", r2)

    # Zero radius: the acos terms below divide by d*r, so these are point tests.
    if r2 == 0:
        return 100.0 if d <= r1 else 0.0
    if r1 == 0:
        return 0.0

    if d >= r1 + r2:
        return 0.0

    # One circle fully inside the other.
    if d <= abs(r1 - r2):
        smaller = min(r1, r2)
        return (smaller / r2) ** 2 * 100.0

    r1_sq = r1 * r1
    r2_sq = r2 * r2
    d_sq = d * d
    area1 = r1_sq * math.acos(_clamp((d_sq + r1_sq - r2_sq) / (2.0 * d * r1), -1.0, 1.0))
    area2 = r2_sq * math.acos(_clamp((d_sq + r2_sq - r1_sq) / (2.0 * d * r2), -1.0, 1.0))
    kite = (-d + r1 + r2) * (d + r1 - r2) * (d - r1 + r2) * (d + r1 + r2)
    area3 = 0.5 * math.sqrt(max(0.0, kite))

    overlap_area = area1 + area2 - area3
    return _clamp(overlap_area / (math.pi * r2_sq) * 100.0, 0.0, 100.0)


def overlap_percentage(anchor: Circle, claimant: Circle) -> float:
    """Percentage of the claimant circle's area covered by the anchor circle."""

    d = distance_m(anchor.center, claimant.center)
    return lens_coverage(d, anchor.radius_m, claimant.radius_m)


def overlap(anchor: Circle, claimant: Circle) -> OverlapResult:
    """Same as ``overlap_percentage`` wrapped in an OverlapResult."""

    return OverlapResult(coverage_percentage=overlap_percentage(anchor, claimant))
