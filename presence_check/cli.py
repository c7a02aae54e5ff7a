"""Command-line interface for presence_check.

Run:
    python -m presence_check check --anchor 12.9716 77.5946 8 --claimant 12.9717 77.5946 5
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from presence_check.batch import SessionParams, close_rows, evaluate_session
from presence_check.csv_io import load_fixes, load_roster, read_submitted_statuses, write_results
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
from presence_check.fixes import DEFAULT_REQUIRED_ACCURACY_M
from presence_check.geo import distance_m, format_distance
from presence_check.models import DEFAULT_TZ, GeoPoint, LocationFix
from presence_check.policies import (
    DEFAULT_DISTANCE_THRESHOLD_M,
    DEFAULT_EXTENDED_RADIUS_M,
    DEFAULT_MINIMUM_COVERAGE_PERCENT,
)
from presence_check.roster import lookup_name
from presence_check.timeutils import epoch_ms, parse_dt

logger = logging.getLogger(__name__)

# One message per error kind.
ERROR_MESSAGES: dict[str, str] = {
    "invalid_input": "Invalid coordinates or accuracy",
    "location_permission_denied": "Location permission denied; enable location access in settings",
    "location_services_disabled": "Location services are disabled; enable GPS on the device",
    "network_unavailable": "Network unavailable or network name could not be detected",
    "no_location_fix": "No location fix could be obtained",
    "insufficient_accuracy": "Location is not accurate enough",
    "duplicate_submission": "Attendance was already marked for this session",
    "session_expired": "The session has expired",
    "not_on_roster": "Id is not on the session roster",
}

EXIT_PRESENCE_ERROR = 2


def describe_error(exc: PresenceCheckError) -> str:
    """User-facing one-liner for an error, by kind."""

    base = ERROR_MESSAGES.get(exc.kind, "Attendance check failed")
    detail = str(exc)
    return f"{base}: {detail}" if detail else base


def _config_from_args(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig(
        margins=RadiusMargins(anchor_m=args.anchor_margin, claimant_m=args.claimant_margin),
        minimum_coverage_percent=args.min_coverage,
        distance_threshold_m=args.threshold,
        extended_radius_m=args.extended_radius,
        required_accuracy_m=args.required_accuracy,
        trusted_network=args.trusted_network,
    )


def _cmd_distance(args: argparse.Namespace) -> int:
    d = distance_m(GeoPoint(*args.from_point), GeoPoint(*args.to_point))
    print(f"{d:.3f} m ({format_distance(d)})")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    policy = policy_from_name(args.policy, config)
    anchor = LocationFix(*args.anchor, network_name=args.anchor_network)
    claimant = LocationFix(*args.claimant, network_name=args.claimant_network)
    result = evaluate(anchor, claimant, policy, config)

    if args.json:
        payload = asdict(result) | {"status": str(result.status), "policy": policy.name}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Status: {str(result.status).upper()}")
    print(f"Coverage: {result.coverage_percentage:.1f}%")
    print(f"Distance: {result.distance_m:.1f}m ({format_distance(result.distance_m)})")
    print(f"Radii: anchor={result.anchor_radius_m:.1f}m, claimant={result.claimant_radius_m:.1f}m")
    return 0


def _cmd_batch(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    policy = policy_from_name(args.policy, config)
    anchor = LocationFix(*args.anchor, network_name=args.anchor_network)

    fixes, summary = load_fixes(args.fixes)
    roster = load_roster(args.roster) if args.roster else None
    earlier = read_submitted_statuses(args.existing) if args.existing else {}
    expires_at_ms = epoch_ms(parse_dt(args.expires_at, args.tz)) if args.expires_at else None

    rows = evaluate_session(
        fixes,
        anchor,
        policy,
        config,
        SessionParams(roster=roster, expires_at_ms=expires_at_ms, already_submitted=earlier),
    )
    if args.close:
        if roster is None:
            print("--close needs --roster", file=sys.stderr)
            return 1
        rows = close_rows(roster, rows, earlier)

    write_results(rows, args.out)
    counts: dict[str, int] = {}
    for r in rows:
        key = str(r.final_status) if r.final_status is not None else r.error
        counts[key] = counts.get(key, 0) + 1
    print(
        f"claimants={len(fixes)} (rows parsed={summary.rows_parsed}, skipped={summary.rows_skipped}); "
        + ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
    )
    print(f"Written: {args.out}")
    return 0


def _cmd_roster_lookup(args: argparse.Namespace) -> int:
    roster = load_roster(args.roster)
    name = lookup_name(args.id, roster)
    if name is None:
        print(f"{args.id!r} not found in {args.roster}", file=sys.stderr)
        return 1
    print(name)
    return 0


def _add_policy_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--policy", type=str, default="coverage", choices=list(POLICY_NAMES), help="Decision policy")
    p.add_argument(
        "--min-coverage",
        type=float,
        default=DEFAULT_MINIMUM_COVERAGE_PERCENT,
        help="coverage policy: minimum %% of the claimant circle inside the anchor circle",
    )
    p.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_DISTANCE_THRESHOLD_M,
        help="distance policy: PRESENT within this many meters",
    )
    p.add_argument(
        "--extended-radius",
        type=float,
        default=DEFAULT_EXTENDED_RADIUS_M,
        help="distance policy: PRESENT within this radius when both sides share a network, ABSENT beyond it",
    )
    p.add_argument(
        "--anchor-margin", type=float, default=DEFAULT_ANCHOR_MARGIN_M, help="Meters added to anchor accuracy"
    )
    p.add_argument(
        "--claimant-margin", type=float, default=DEFAULT_CLAIMANT_MARGIN_M, help="Meters added to claimant accuracy"
    )
    p.add_argument(
        "--required-accuracy",
        type=float,
        default=DEFAULT_REQUIRED_ACCURACY_M,
        help="Reject claimant fixes less accurate than this (meters, batch only)",
    )
    p.add_argument("--trusted-network", type=str, default=None, help="Only this network name counts as 'same network'")
    p.add_argument("--anchor-network", type=str, default=None, help="Network name seen by the anchor device")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="presence_check")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_d = sub.add_parser("distance", help="Great-circle distance between two points")
    p_d.add_argument("--from", dest="from_point", type=float, nargs=2, required=True, metavar=("LAT", "LON"))
    p_d.add_argument("--to", dest="to_point", type=float, nargs=2, required=True, metavar=("LAT", "LON"))
    p_d.set_defaults(func=_cmd_distance)

    p_c = sub.add_parser("check", help="Evaluate one claim against an anchor fix")
    p_c.add_argument("--anchor", type=float, nargs=3, required=True, metavar=("LAT", "LON", "ACC"))
    p_c.add_argument("--claimant", type=float, nargs=3, required=True, metavar=("LAT", "LON", "ACC"))
    p_c.add_argument("--claimant-network", type=str, default=None, help="Network name seen by the claimant device")
    p_c.add_argument("--json", action="store_true", help="Print the result as JSON")
    _add_policy_args(p_c)
    p_c.set_defaults(func=_cmd_check)

    p_b = sub.add_parser("batch", help="Evaluate every claimant in a fixes CSV and write results.csv")
    p_b.add_argument("--fixes", type=str, default="fixes.csv", help="Claimant fixes CSV")
    p_b.add_argument("--anchor", type=float, nargs=3, required=True, metavar=("LAT", "LON", "ACC"))
    p_b.add_argument("--roster", type=str, default=None, help="Roster CSV (id/registration_number, name)")
    p_b.add_argument(
        "--existing",
        type=str,
        default=None,
        help="Earlier results.csv; its claimants count as submitted and keep their status at --close",
    )
    p_b.add_argument("--expires-at", type=str, default=None, help="Session end, e.g. 2025-09-07 10:10:00")
    p_b.add_argument("--tz", type=str, default=DEFAULT_TZ, help="Timezone (IANA) for --expires-at")
    p_b.add_argument("--close", action="store_true", help="Close the session: one row per roster member")
    p_b.add_argument("--out", type=str, default="results.csv", help="Output CSV path")
    _add_policy_args(p_b)
    p_b.set_defaults(func=_cmd_batch)

    p_r = sub.add_parser("roster-lookup", help="Print the name for an id in a roster CSV")
    p_r.add_argument("--roster", type=str, required=True, help="Roster CSV")
    p_r.add_argument("--id", type=str, required=True, help="Id to look up (case-insensitive)")
    p_r.set_defaults(func=_cmd_roster_lookup)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return int(args.func(args))
    except PresenceCheckError as exc:
        logger.debug("command failed", exc_info=True)
        print(describe_error(exc), file=sys.stderr)
        return EXIT_PRESENCE_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
