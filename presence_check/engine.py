"""Attendance evaluation: fixes -> circles -> distance/coverage -> status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from presence_check.errors import InvalidInputError
from presence_check.fixes import DEFAULT_REQUIRED_ACCURACY_M, validate_fix
from presence_check.geo import distance_m
from presence_check.models import AttendanceResult, Circle, LocationFix, Measurement
from presence_check.overlap import lens_coverage
from presence_check.policies import (
    DEFAULT_DISTANCE_THRESHOLD_M,
    DEFAULT_EXTENDED_RADIUS_M,
    DEFAULT_MINIMUM_COVERAGE_PERCENT,
    AttendanceDecisionPolicy,
    CoveragePolicy,
    DistancePolicy,
)

logger = logging.getLogger(__name__)

POLICY_NAMES = ("coverage", "distance")

DEFAULT_ANCHOR_MARGIN_M = 10.0
DEFAULT_CLAIMANT_MARGIN_M = 1.0


@dataclass(frozen=True, slots=True)
class RadiusMargins:
    """Meters added to raw accuracy when building each circle."""

    anchor_m: float = DEFAULT_ANCHOR_MARGIN_M
    claimant_m: float = DEFAULT_CLAIMANT_MARGIN_M


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Parameters for evaluation and policy construction."""

    margins: RadiusMargins = field(default_factory=RadiusMargins)
    minimum_coverage_percent: float = DEFAULT_MINIMUM_COVERAGE_PERCENT
    distance_threshold_m: float = DEFAULT_DISTANCE_THRESHOLD_M
    extended_radius_m: float = DEFAULT_EXTENDED_RADIUS_M
    required_accuracy_m: float = DEFAULT_REQUIRED_ACCURACY_M
    # If set, the same-network hint only holds when both sides are on this network.
    trusted_network: str | None = None


def policy_from_name(name: str, config: EngineConfig | None = None) -> AttendanceDecisionPolicy:
    """Build a decision policy by name ("coverage" or "distance")."""

    cfg = config or EngineConfig()
    key = name.strip().lower()
    if key == "coverage":
        return CoveragePolicy(minimum_coverage_percent=cfg.minimum_coverage_percent)
    if key == "distance":
        return DistancePolicy(threshold_m=cfg.distance_threshold_m, extended_radius_m=cfg.extended_radius_m)
    raise InvalidInputError(f"unknown policy {name!r}; expected one of {', '.join(POLICY_NAMES)}")


def same_network(anchor_network: str | None, claimant_network: str | None, trusted: str | None = None) -> bool:
    """True when both sides report the same non-empty network name.

    With ``trusted`` set, both names must also equal it (after trimming).
    """

    a = (anchor_network or "").strip()
    b = (claimant_network or "").strip()
    if not a or not b or a != b:
        return False
    t = (trusted or "").strip()
    if t and a != t:
        return False
    return True


def build_circles(anchor: LocationFix, claimant: LocationFix, margins: RadiusMargins) -> tuple[Circle, Circle]:
    """Uncertainty circles for both fixes (accuracy + margin)."""

    validate_fix(anchor)
    validate_fix(claimant)
    return (
        Circle.from_accuracy(anchor.point, anchor.accuracy_m, margins.anchor_m),
        Circle.from_accuracy(claimant.point, claimant.accuracy_m, margins.claimant_m),
    )


def evaluate(
    anchor: LocationFix,
    claimant: LocationFix,
    policy: AttendanceDecisionPolicy,
    config: EngineConfig | None = None,
) -> AttendanceResult:
    """Evaluate one attendance claim.

    Args:
        anchor: Reference fix (session owner).
        claimant: Fix being verified.
        policy: Decision strategy chosen by the caller.
        config: Margins and same-network settings. Defaults to EngineConfig().

    Returns:
        AttendanceResult with distance, coverage, both radii and the status.

    Raises:
        InvalidInputError: If either fix is malformed.
    """

    cfg = config or EngineConfig()
    anchor_circle, claimant_circle = build_circles(anchor, claimant, cfg.margins)

    d = distance_m(anchor_circle.center, claimant_circle.center)
    coverage = lens_coverage(d, anchor_circle.radius_m, claimant_circle.radius_m)
    measurement = Measurement(
        distance_m=d,
        coverage_percentage=coverage,
        same_network=same_network(anchor.network_name, claimant.network_name, cfg.trusted_network),
    )
    status = policy.decide(measurement)
    logger.debug(
        "evaluate: d=%.2fm r_anchor=%.2fm r_claimant=%.2fm coverage=%.2f%% same_network=%s policy=%s -> %s",
        d,
        anchor_circle.radius_m,
        claimant_circle.radius_m,
        coverage,
        measurement.same_network,
        policy.name,
        status,
    )
    return AttendanceResult(
        distance_m=d,
        coverage_percentage=coverage,
        anchor_radius_m=anchor_circle.radius_m,
        claimant_radius_m=claimant_circle.radius_m,
        status=status,
    )
