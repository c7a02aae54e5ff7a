"""Evaluate a whole session's worth of claims against one anchor fix."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Collection, Mapping, Sequence

from presence_check.csv_io import ResultRow
from presence_check.engine import EngineConfig, evaluate
from presence_check.errors import DuplicateSubmissionError, PresenceCheckError, SessionExpiredError
from presence_check.fixes import require_accuracy, select_best_fix, validate_fix
from presence_check.models import AttendanceStatus, LocationFix, RosterEntry
from presence_check.policies import AttendanceDecisionPolicy
from presence_check.roster import close_session, require_member

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionParams:
    """Session-level checks applied before evaluation."""

    roster: Sequence[RosterEntry] | None = None
    expires_at_ms: int | None = None
    # Claimant ids that already have a stored submission.
    already_submitted: Collection[str] = ()


def _key(identifier: str) -> str:
    return identifier.strip().lower()


def evaluate_claim(
    claimant_id: str,
    fixes: Sequence[LocationFix],
    anchor: LocationFix,
    policy: AttendanceDecisionPolicy,
    config: EngineConfig,
    session: SessionParams,
) -> ResultRow:
    """Run the session checks and the engine for one claimant.

    Raises:
        PresenceCheckError: The first check that fails, by kind.
    """

    name = ""
    if session.roster is not None:
        name = require_member(claimant_id, session.roster).name

    best = require_accuracy(select_best_fix(fixes), config.required_accuracy_m)
    expires = session.expires_at_ms
    if expires is not None and best.timestamp_ms is not None and best.timestamp_ms > expires:
        raise SessionExpiredError(f"fix at {best.timestamp_ms} is after session end {expires}")

    result = evaluate(anchor, best, policy, config)
    return ResultRow(claimant_id=claimant_id, name=name, result=result)


def evaluate_session(
    fixes_by_claimant: Mapping[str, Sequence[LocationFix]],
    anchor: LocationFix,
    policy: AttendanceDecisionPolicy,
    config: EngineConfig | None = None,
    session: SessionParams | None = None,
) -> list[ResultRow]:
    """Evaluate every claimant; failures are recorded per row, not raised.

    Claimant ids are compared case-insensitively: a second id that matches an
    earlier one (or one in ``session.already_submitted``) is a duplicate.

    Raises:
        InvalidInputError: If the anchor fix is malformed; no claimant is
            evaluated against a bad anchor.
    """

    validate_fix(anchor)
    cfg = config or EngineConfig()
    sess = session or SessionParams()
    seen = {_key(i) for i in sess.already_submitted}

    rows: list[ResultRow] = []
    for claimant_id, fixes in fixes_by_claimant.items():
        try:
            if _key(claimant_id) in seen:
                raise DuplicateSubmissionError(f"{claimant_id!r} already submitted")
            seen.add(_key(claimant_id))
            rows.append(evaluate_claim(claimant_id, fixes, anchor, policy, cfg, sess))
        except PresenceCheckError as exc:
            logger.info("claim %r rejected: %s (%s)", claimant_id, exc.kind, exc)
            rows.append(ResultRow(claimant_id=claimant_id, error=exc.kind))

    counts = Counter(str(r.result.status) if r.result else r.error for r in rows)
    logger.debug("session evaluated: %s", dict(counts))
    return rows


def close_rows(
    roster: Sequence[RosterEntry],
    rows: Sequence[ResultRow],
    earlier: Mapping[str, AttendanceStatus] | None = None,
) -> list[ResultRow]:
    """One row per roster member with the final status after closing the session.

    ``earlier`` holds statuses stored by a previous run (see
    ``read_submitted_statuses``); a member with no result in ``rows`` keeps that
    status. Members with neither get an ABSENT row with no measurements; the
    error kind that kept them out, if any, is kept.
    """

    results = {_key(r.claimant_id): r.result for r in rows if r.result is not None}
    errors = {_key(r.claimant_id): r.error for r in rows if r.result is None}
    statuses = {_key(k): v for k, v in (earlier or {}).items()}
    statuses.update((k, res.status) for k, res in results.items())
    final = close_session(roster, statuses)

    closed: list[ResultRow] = []
    for entry in roster:
        status = final[entry.id]
        res = results.get(_key(entry.id))
        if res is not None:
            closed.append(ResultRow(claimant_id=entry.id, name=entry.name, result=replace(res, status=status)))
        else:
            closed.append(
                ResultRow(claimant_id=entry.id, name=entry.name, error=errors.get(_key(entry.id), ""), status=status)
            )
    return closed
