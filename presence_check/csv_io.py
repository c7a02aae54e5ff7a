"""CSV input/output for fixes, rosters and attendance results."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from presence_check.fixes import validate_fix
from presence_check.models import AttendanceResult, AttendanceStatus, LocationFix, RosterEntry

logger = logging.getLogger(__name__)

ROSTER_ID_COLUMNS = ("id", "registration_number", "reg_no")

RESULT_FIELDNAMES = [
    "claimant_id",
    "name",
    "distance_m",
    "coverage_percentage",
    "anchor_radius_m",
    "claimant_radius_m",
    "status",
    "error",
]


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


@dataclass(frozen=True, slots=True)
class ResultRow:
    """One line of results.csv: either a result or an error kind.

    ``status`` is only used for rows without a result (e.g. ABSENT at close).
    """

    claimant_id: str
    name: str = ""
    result: AttendanceResult | None = None
    error: str = ""
    status: AttendanceStatus | None = None

    @property
    def final_status(self) -> AttendanceStatus | None:
        return self.result.status if self.result is not None else self.status


def _parse_float(value: str) -> float:
    return float(value.strip())


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    s = value.strip()
    return s or None


def load_fixes(csv_path: str | Path) -> tuple[dict[str, list[LocationFix]], CsvSummary]:
    """Load claimant fixes grouped by claimant id.

    Columns:
        - claimant_id, latitude, longitude, accuracy (required)
        - timestamp_ms, network, source (optional)

    A claimant may have several rows (several raw readings); input order is kept.
    Rows that do not parse, or that fail validate_fix (coordinates out of range,
    NaN or negative accuracy), are skipped and counted.

    Returns:
        (fixes_by_claimant, summary)

    Raises:
        KeyError: If a required column is missing.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed = 0
    by_claimant: dict[str, list[LocationFix]] = {}
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        missing = [c for c in ("claimant_id", "latitude", "longitude", "accuracy") if c not in fieldnames]
        if missing:
            raise KeyError(f"CSV is missing required columns {missing}. Found: {list(fieldnames)}")

        for row in reader:
            rows_total += 1
            try:
                claimant_id = (row["claimant_id"] or "").strip()
                if not claimant_id:
                    raise ValueError("empty claimant_id")
                ts = _optional_text(row.get("timestamp_ms"))
                fix = validate_fix(
                    LocationFix(
                        latitude=_parse_float(row["latitude"]),
                        longitude=_parse_float(row["longitude"]),
                        accuracy_m=_parse_float(row["accuracy"]),
                        timestamp_ms=int(ts) if ts is not None else None,
                        network_name=_optional_text(row.get("network")),
                        source=_optional_text(row.get("source")) or "gps",
                    )
                )
            except (ValueError, TypeError, AttributeError):
                # damaged, blank or out-of-range row
                continue
            by_claimant.setdefault(claimant_id, []).append(fix)
            parsed += 1

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=parsed,
        rows_skipped=rows_total - parsed,
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("skipped %s damaged or invalid row(s) in %s", summary.rows_skipped, p)
    return by_claimant, summary


def load_roster(csv_path: str | Path) -> list[RosterEntry]:
    """Load a roster CSV with an id column and a name column.

    The id column may be called ``id``, ``registration_number`` or ``reg_no``.
    Rows with an empty id are skipped.
    """

    p = Path(csv_path)
    entries: list[RosterEntry] = []
    skipped = 0
    with p.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = [c.strip() for c in (reader.fieldnames or ())]
        reader.fieldnames = fieldnames
        id_col = next((c for c in ROSTER_ID_COLUMNS if c in fieldnames), None)
        if id_col is None or "name" not in fieldnames:
            raise KeyError(
                f"roster needs an id column ({'/'.join(ROSTER_ID_COLUMNS)}) and a name column. Found: {fieldnames}"
            )
        for row in reader:
            identifier = (row.get(id_col) or "").strip()
            if not identifier:
                skipped += 1
                continue
            entries.append(RosterEntry(id=identifier, name=(row.get("name") or "").strip()))

    if skipped:
        logger.warning("skipped %s roster row(s) without an id in %s", skipped, p)
    return entries


def write_results(rows: Iterable[ResultRow], out_path: str | Path) -> None:
    """Write attendance results to CSV."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=RESULT_FIELDNAMES)
        w.writeheader()
        for r in rows:
            res = r.result
            w.writerow(
                {
                    "claimant_id": r.claimant_id,
                    "name": r.name,
                    "distance_m": f"{res.distance_m:.2f}" if res else "",
                    "coverage_percentage": f"{res.coverage_percentage:.2f}" if res else "",
                    "anchor_radius_m": f"{res.anchor_radius_m:.2f}" if res else "",
                    "claimant_radius_m": f"{res.claimant_radius_m:.2f}" if res else "",
                    "status": str(r.final_status) if r.final_status is not None else "",
                    "error": r.error,
                }
            )


def read_submitted_statuses(results_path: str | Path) -> dict[str, AttendanceStatus]:
    """Claimant id -> status for every row of an earlier results.csv that has one.

    Rows with an unknown status value are skipped with a warning.
    """

    p = Path(results_path)
    statuses: dict[str, AttendanceStatus] = {}
    unknown = 0
    with p.open("r", encoding="utf-8", newline="") as f:
        for row in csv.DictReader(f):
            claimant_id = (row.get("claimant_id") or "").strip()
            status = (row.get("status") or "").strip().lower()
            if not claimant_id or not status:
                continue
            try:
                statuses[claimant_id] = AttendanceStatus(status)
            except ValueError:
                unknown += 1

    if unknown:
        logger.warning("skipped %s row(s) with an unknown status in %s", unknown, p)
    return statuses
