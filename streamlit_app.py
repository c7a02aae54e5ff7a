from __future__ import annotations

import math

import streamlit as st

from presence_check.engine import (
    DEFAULT_ANCHOR_MARGIN_M,
    DEFAULT_CLAIMANT_MARGIN_M,
    POLICY_NAMES,
    EngineConfig,
    RadiusMargins,
    evaluate,
    policy_from_name,
)
from presence_check.errors import PresenceCheckError
from presence_check.geo import format_distance
from presence_check.models import AttendanceResult, AttendanceStatus, LocationFix
from presence_check.policies import (
    DEFAULT_DISTANCE_THRESHOLD_M,
    DEFAULT_EXTENDED_RADIUS_M,
    DEFAULT_MINIMUM_COVERAGE_PERCENT,
)

_STATUS_COLOURS = {
    AttendanceStatus.PRESENT: "green",
    AttendanceStatus.PROXY: "orange",
    AttendanceStatus.PENDING: "blue",
    AttendanceStatus.ABSENT: "red",
}


def _fix_inputs(label: str, lat: float, lon: float, acc: float) -> LocationFix:
    st.subheader(label)
    latitude = st.number_input(f"{label} latitude", value=lat, format="%.7f")
    longitude = st.number_input(f"{label} longitude", value=lon, format="%.7f")
    accuracy = st.number_input(f"{label} accuracy (m)", value=acc, min_value=0.0, step=1.0)
    network = st.text_input(f"{label} network name", value="")
    return LocationFix(
        latitude=float(latitude),
        longitude=float(longitude),
        accuracy_m=float(accuracy),
        network_name=network or None,
    )


def _radius_explainer(result: AttendanceResult) -> str:
    anchor_area = math.pi * result.anchor_radius_m**2
    claimant_area = math.pi * result.claimant_radius_m**2
    return (
        f"Anchor circle r={result.anchor_radius_m:.1f}m (area {anchor_area:.0f} m²), "
        f"claimant circle r={result.claimant_radius_m:.1f}m (area {claimant_area:.0f} m²). "
        "Coverage is the share of the claimant circle that lies inside the anchor circle."
    )


def main() -> None:
    st.set_page_config(page_title="Presence check", layout="wide")
    st.title("Presence check: anchor vs claimant GPS fix")

    with st.sidebar:
        anchor = _fix_inputs("Anchor", 12.9716, 77.5946, 8.0)
        claimant = _fix_inputs("Claimant", 12.97172, 77.5946, 5.0)

        st.subheader("Policy")
        policy_name = st.selectbox("Decision policy", options=list(POLICY_NAMES), index=0)
        with st.expander("Advanced parameters", expanded=False):
            anchor_margin = st.number_input("Anchor margin (m)", value=DEFAULT_ANCHOR_MARGIN_M, min_value=0.0)
            claimant_margin = st.number_input("Claimant margin (m)", value=DEFAULT_CLAIMANT_MARGIN_M, min_value=0.0)
            min_coverage = st.number_input(
                "Minimum coverage (%)", value=DEFAULT_MINIMUM_COVERAGE_PERCENT, min_value=0.0, max_value=100.0
            )
            threshold = st.number_input("Distance threshold (m)", value=DEFAULT_DISTANCE_THRESHOLD_M, min_value=0.0)
            extended = st.number_input("Same-network radius (m)", value=DEFAULT_EXTENDED_RADIUS_M, min_value=0.0)
            trusted = st.text_input("Trusted network (optional)", value="")

    config = EngineConfig(
        margins=RadiusMargins(anchor_m=float(anchor_margin), claimant_m=float(claimant_margin)),
        minimum_coverage_percent=float(min_coverage),
        distance_threshold_m=float(threshold),
        extended_radius_m=float(extended),
        trusted_network=trusted or None,
    )

    try:
        result = evaluate(anchor, claimant, policy_from_name(policy_name, config), config)
    except PresenceCheckError as exc:
        st.error(f"{exc.kind}: {exc}")
        return

    st.subheader("Result")
    c1, c2, c3 = st.columns(3)
    c1.metric("Status", str(result.status).upper())
    c2.metric("Coverage", f"{result.coverage_percentage:.1f}%")
    c3.metric("Distance", format_distance(result.distance_m))

    colour = _STATUS_COLOURS.get(result.status, "gray")
    st.markdown(f"Decision with the **{policy_name}** policy: :{colour}[{str(result.status).upper()}]")
    st.caption(_radius_explainer(result))


if __name__ == "__main__":
    main()
