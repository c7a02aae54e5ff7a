"""
Tests for end-to-end evaluation of one claim.
"""

import logging
import math

import pytest

from conftest import BENGALURU, north_of
from presence_check.engine import (
    EngineConfig,
    RadiusMargins,
    build_circles,
    evaluate,
    policy_from_name,
    same_network,
)
from presence_check.errors import InvalidInputError
from presence_check.models import AttendanceStatus, LocationFix
from presence_check.policies import CoveragePolicy, DistancePolicy


def claimant_at(meters_north, accuracy=5.0, network=None):
    lat, lon = north_of(BENGALURU[0], BENGALURU[1], meters_north)
    return LocationFix(latitude=lat, longitude=lon, accuracy_m=accuracy, network_name=network)


class TestEvaluateCoverage:
    def test_same_spot_is_present(self):
        anchor = LocationFix(0.0, 0.0, accuracy_m=5.0)
        claimant = LocationFix(0.0, 0.0, accuracy_m=5.0)
        result = evaluate(anchor, claimant, CoveragePolicy())
        assert result.distance_m == 0.0
        assert result.anchor_radius_m == 15.0
        assert result.claimant_radius_m == 6.0
        assert result.coverage_percentage == 100.0
        assert result.status == AttendanceStatus.PRESENT

    def test_200m_away_is_proxy(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(200.0), CoveragePolicy())
        assert result.distance_m == pytest.approx(200.0, abs=1e-6)
        assert result.coverage_percentage == 0.0
        assert result.status == AttendanceStatus.PROXY

    def test_zero_accuracy_uses_margins_only(self, anchor_fix):
        anchor = LocationFix(anchor_fix.latitude, anchor_fix.longitude, accuracy_m=0.0)
        result = evaluate(anchor, claimant_at(0.0, accuracy=0.0), CoveragePolicy())
        assert result.anchor_radius_m == 10.0
        assert result.claimant_radius_m == 1.0
        assert result.status == AttendanceStatus.PRESENT

    def test_custom_margins(self, anchor_fix):
        config = EngineConfig(margins=RadiusMargins(anchor_m=0.0, claimant_m=0.0))
        result = evaluate(anchor_fix, claimant_at(9.0), CoveragePolicy(), config)
        assert result.anchor_radius_m == 5.0
        assert result.claimant_radius_m == 5.0
        assert 0.0 < result.coverage_percentage < 50.0
        assert result.status == AttendanceStatus.PROXY

    def test_logs_debug(self, anchor_fix, caplog):
        with caplog.at_level(logging.DEBUG, logger="presence_check.engine"):
            evaluate(anchor_fix, claimant_at(3.0), CoveragePolicy())
        assert "coverage=" in caplog.text


class TestEvaluateDistance:
    def test_within_threshold(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(25.0), DistancePolicy())
        assert result.status == AttendanceStatus.PRESENT

    def test_same_network_extended(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(45.0, network="campus-wifi"), DistancePolicy())
        assert result.status == AttendanceStatus.PRESENT

    def test_other_network_pending(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(45.0, network="mobile-hotspot"), DistancePolicy())
        assert result.status == AttendanceStatus.PENDING

    def test_far_absent(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(60.0, network="campus-wifi"), DistancePolicy())
        assert result.status == AttendanceStatus.ABSENT

    def test_trusted_network_required(self, anchor_fix):
        config = EngineConfig(trusted_network="iBUS")
        result = evaluate(anchor_fix, claimant_at(45.0, network="campus-wifi"), DistancePolicy(), config)
        assert result.status == AttendanceStatus.PENDING

    def test_coverage_still_reported(self, anchor_fix):
        result = evaluate(anchor_fix, claimant_at(0.0), DistancePolicy())
        assert result.coverage_percentage == 100.0


class TestInvalidFixes:
    @pytest.mark.parametrize(
        "fix",
        [
            LocationFix(math.nan, 0.0, 5.0),
            LocationFix(0.0, 200.0, 5.0),
            LocationFix(0.0, 0.0, -1.0),
            LocationFix(0.0, 0.0, math.inf),
        ],
    )
    def test_rejected(self, anchor_fix, fix):
        with pytest.raises(InvalidInputError):
            evaluate(anchor_fix, fix, CoveragePolicy())
        with pytest.raises(InvalidInputError):
            evaluate(fix, anchor_fix, CoveragePolicy())


class TestHelpers:
    def test_build_circles(self, anchor_fix):
        a, c = build_circles(anchor_fix, claimant_at(1.0, accuracy=2.0), RadiusMargins())
        assert a.radius_m == 15.0
        assert c.radius_m == 3.0
        assert a.center == anchor_fix.point

    @pytest.mark.parametrize(
        "a,b,trusted,expected",
        [
            ("campus-wifi", "campus-wifi", None, True),
            (" campus-wifi ", "campus-wifi", None, True),
            ("campus-wifi", "other", None, False),
            (None, "campus-wifi", None, False),
            ("", "", None, False),
            ("campus-wifi", "campus-wifi", "campus-wifi", True),
            ("guest", "guest", "campus-wifi", False),
            ("campus-wifi", "campus-wifi", " campus-wifi ", True),
        ],
    )
    def test_same_network(self, a, b, trusted, expected):
        assert same_network(a, b, trusted) is expected

    def test_policy_from_name(self):
        config = EngineConfig(minimum_coverage_percent=80.0, distance_threshold_m=20.0)
        coverage = policy_from_name("coverage", config)
        distance = policy_from_name(" Distance ", config)
        assert isinstance(coverage, CoveragePolicy)
        assert coverage.minimum_coverage_percent == 80.0
        assert isinstance(distance, DistancePolicy)
        assert distance.threshold_m == 20.0

    def test_policy_from_unknown_name(self):
        with pytest.raises(InvalidInputError):
            policy_from_name("kalman")
