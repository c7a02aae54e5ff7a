from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Asia/Kolkata"
METERS_PER_DEG_LAT: Final[float] = 111_320.0


@dataclass(frozen=True, slots=True)
class Anchor:
    lat: float
    lon: float


def _offset(anchor: Anchor, north_m: float, east_m: float) -> tuple[float, float]:
    """Shift a point by meters north/east (small-distance approximation)."""

    lat = anchor.lat + north_m / METERS_PER_DEG_LAT
    lon = anchor.lon + east_m / (METERS_PER_DEG_LAT * math.cos(math.radians(anchor.lat)))
    return lat, lon


def generate_fixes(
    *,
    claimants: int,
    seed: int,
    start_local: datetime,
    anchor: Anchor,
    network: str,
) -> tuple[list[dict[str, str]], list[dict[str, str]]]:
    """Generate fake fixes (1-3 readings per claimant) and the matching roster."""

    rng = random.Random(seed)
    tz = ZoneInfo(TZ)
    cur = start_local.replace(tzinfo=tz)

    fixes: list[dict[str, str]] = []
    roster: list[dict[str, str]] = []
    for i in range(claimants):
        reg_no = f"22FE10CSE{i + 1:05d}"
        roster.append({"registration_number": reg_no, "name": f"Student {i + 1}"})

        # Most sit in the room, some are in the corridor, a few are far away.
        roll = rng.random()
        if roll < 0.7:
            dist = rng.uniform(0, 15)
        elif roll < 0.9:
            dist = rng.uniform(15, 60)
        else:
            dist = rng.uniform(150, 800)
        bearing = rng.uniform(0, 2 * math.pi)
        on_network = rng.random() < 0.8

        for _ in range(rng.choice([1, 2, 3])):
            jitter = rng.uniform(0, 4)
            lat, lon = _offset(anchor, dist * math.cos(bearing) + jitter, dist * math.sin(bearing) + jitter)
            cur = cur + timedelta(seconds=rng.uniform(1, 20))
            fixes.append(
                {
                    "claimant_id": reg_no,
                    "latitude": f"{lat:.7f}",
                    "longitude": f"{lon:.7f}",
                    "accuracy": f"{rng.choice([3.0, 5.0, 8.0, 12.0, 20.0, 35.0]):.1f}",
                    "timestamp_ms": str(int(cur.timestamp() * 1000)),
                    "network": network if on_network else "",
                    "source": rng.choice(["gps", "network", "fused"]),
                }
            )

    return fixes, roster


def _write(path: Path, rows: list[dict[str, str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        w.writerows(rows)


def main() -> int:
    p = argparse.ArgumentParser(description="Generate fake fixes.csv/roster.csv for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/fixes.csv", help="Output fixes CSV path")
    p.add_argument("--roster-out", type=str, default="sample_data/roster.csv", help="Output roster CSV path")
    p.add_argument("--claimants", type=int, default=40, help="Number of claimants")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--anchor-lat", type=float, default=26.8439, help="Anchor latitude")
    p.add_argument("--anchor-lon", type=float, default=75.5652, help="Anchor longitude")
    p.add_argument("--network", type=str, default="campus-wifi", help="Network name most claimants report")
    p.add_argument(
        "--start",
        type=str,
        default="2025-09-07 09:00:00",
        help="Start local time in Asia/Kolkata, e.g. '2025-09-07 09:00:00'",
    )
    args = p.parse_args()

    fixes, roster = generate_fixes(
        claimants=args.claimants,
        seed=args.seed,
        start_local=datetime.fromisoformat(args.start),
        anchor=Anchor(args.anchor_lat, args.anchor_lon),
        network=args.network,
    )
    if not fixes:
        print("Nothing to write (claimants=0)")
        return 1
    _write(Path(args.out), fixes)
    _write(Path(args.roster_out), roster)

    print(f"Generated: {args.out} (rows={len(fixes)}), {args.roster_out} (rows={len(roster)}), seed={args.seed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
