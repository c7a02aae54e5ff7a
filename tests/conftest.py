"""
Pytest configuration and fixtures for presence_check tests
"""

import math

import pytest

from presence_check.geo import EARTH_RADIUS_M
from presence_check.models import LocationFix, RosterEntry

# Meters per degree of latitude on the spherical model: moving north by
# m / METERS_PER_DEG_LAT degrees gives a haversine distance of exactly m.
METERS_PER_DEG_LAT = EARTH_RADIUS_M * math.pi / 180.0

BENGALURU = (12.9716, 77.5946)


def north_of(lat, lon, meters):
    """Point `meters` due north of (lat, lon)."""
    return lat + meters / METERS_PER_DEG_LAT, lon


@pytest.fixture
def anchor_fix():
    """Anchor fix in Bengaluru with 5m accuracy (radius 15m with default margin)."""
    return LocationFix(latitude=BENGALURU[0], longitude=BENGALURU[1], accuracy_m=5.0, network_name="campus-wifi")


@pytest.fixture
def sample_roster():
    """Roster as produced by the upload collaborator."""
    return [
        RosterEntry(id="22FE10CSE00001", name="Asha Rao"),
        RosterEntry(id="22FE10CSE00002", name="Vikram Singh"),
        RosterEntry(id=" 22fe10cse00003 ", name="Meera Iyer"),
    ]


@pytest.fixture
def fixes_csv(tmp_path):
    """Fixes CSV with several readings per claimant and one damaged row."""
    lat0, lon0 = BENGALURU
    near_lat, _ = north_of(lat0, lon0, 3.0)
    far_lat, _ = north_of(lat0, lon0, 200.0)
    rows = [
        "claimant_id,latitude,longitude,accuracy,timestamp_ms,network,source",
        f"22FE10CSE00001,{near_lat},{lon0},12.0,1757215800000,campus-wifi,gps",
        f"22FE10CSE00001,{near_lat},{lon0},4.0,1757215805000,campus-wifi,fused",
        f"22FE10CSE00002,{far_lat},{lon0},5.0,1757215810000,,gps",
        "22FE10CSE00003,not-a-number,77.5946,5.0,,,",
        f"22FE10CSE00003,{lat0},{lon0},50.0,1757215820000,campus-wifi,network",
        f"OUTSIDER,{lat0},{lon0},3.0,1757215830000,,gps",
    ]
    path = tmp_path / "fixes.csv"
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def roster_csv(tmp_path):
    """Roster CSV using the registration_number header, saved with a BOM."""
    path = tmp_path / "roster.csv"
    path.write_text(
        "registration_number,name\n"
        "22FE10CSE00001,Asha Rao\n"
        "22FE10CSE00002,Vikram Singh\n"
        ",Nobody\n"
        "22FE10CSE00003,Meera Iyer\n",
        encoding="utf-8-sig",
    )
    return path
