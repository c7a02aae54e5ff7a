"""
Tests for the coverage and distance decision policies.
"""

import math

import pytest

from presence_check.errors import InvalidInputError
from presence_check.models import AttendanceStatus, Measurement
from presence_check.policies import AttendanceDecisionPolicy, CoveragePolicy, DistancePolicy


def m(distance=0.0, coverage=0.0, same_network=False):
    return Measurement(distance_m=distance, coverage_percentage=coverage, same_network=same_network)


class TestCoveragePolicy:
    def test_default_threshold_is_50(self):
        assert CoveragePolicy().minimum_coverage_percent == 50.0

    @pytest.mark.parametrize(
        "coverage,expected",
        [
            (100.0, AttendanceStatus.PRESENT),
            (50.0, AttendanceStatus.PRESENT),
            (49.999, AttendanceStatus.PROXY),
            (0.0, AttendanceStatus.PROXY),
        ],
    )
    def test_threshold(self, coverage, expected):
        assert CoveragePolicy().decide(m(coverage=coverage)) == expected

    def test_custom_threshold(self):
        policy = CoveragePolicy(minimum_coverage_percent=75.0)
        assert policy.decide(m(coverage=72.5)) == AttendanceStatus.PROXY
        assert policy.decide(m(coverage=75.0)) == AttendanceStatus.PRESENT

    def test_ignores_distance(self):
        assert CoveragePolicy().decide(m(distance=10_000.0, coverage=60.0)) == AttendanceStatus.PRESENT

    @pytest.mark.parametrize("value", [-1.0, 100.5, math.nan])
    def test_invalid_threshold(self, value):
        with pytest.raises(InvalidInputError):
            CoveragePolicy(minimum_coverage_percent=value)

    def test_nan_coverage_rejected(self):
        with pytest.raises(InvalidInputError):
            CoveragePolicy().decide(m(coverage=math.nan))


class TestDistancePolicy:
    def test_within_threshold(self):
        assert DistancePolicy().decide(m(distance=25.0)) == AttendanceStatus.PRESENT

    def test_exactly_threshold(self):
        assert DistancePolicy().decide(m(distance=30.0)) == AttendanceStatus.PRESENT

    def test_same_network_extends_range(self):
        assert DistancePolicy().decide(m(distance=45.0, same_network=True)) == AttendanceStatus.PRESENT
        assert DistancePolicy().decide(m(distance=50.0, same_network=True)) == AttendanceStatus.PRESENT

    def test_far_is_absent(self):
        assert DistancePolicy().decide(m(distance=60.0)) == AttendanceStatus.ABSENT

    def test_far_is_absent_even_on_same_network(self):
        assert DistancePolicy().decide(m(distance=60.0, same_network=True)) == AttendanceStatus.ABSENT

    def test_ambiguous_is_pending(self):
        assert DistancePolicy().decide(m(distance=35.0)) == AttendanceStatus.PENDING
        assert DistancePolicy().decide(m(distance=50.0)) == AttendanceStatus.PENDING

    def test_custom_threshold(self):
        policy = DistancePolicy(threshold_m=10.0)
        assert policy.decide(m(distance=25.0)) == AttendanceStatus.PENDING

    def test_ignores_coverage(self):
        assert DistancePolicy().decide(m(distance=10.0, coverage=0.0)) == AttendanceStatus.PRESENT

    @pytest.mark.parametrize("distance", [-1.0, math.nan, math.inf])
    def test_invalid_distance(self, distance):
        with pytest.raises(InvalidInputError):
            DistancePolicy().decide(m(distance=distance))

    def test_invalid_threshold(self):
        with pytest.raises(InvalidInputError):
            DistancePolicy(threshold_m=-5.0)


class TestInterchangeable:
    """Both policies satisfy the same interface and can be swapped."""

    @pytest.mark.parametrize("policy", [CoveragePolicy(), DistancePolicy()])
    def test_same_interface(self, policy):
        p: AttendanceDecisionPolicy = policy
        assert isinstance(p.decide(m(distance=5.0, coverage=90.0)), AttendanceStatus)
        assert p.name in ("coverage", "distance")

    def test_status_values_are_strings(self):
        assert AttendanceStatus.PRESENT == "present"
        assert str(AttendanceStatus.PROXY) == "proxy"
