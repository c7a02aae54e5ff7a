"""Roster lookups and end-of-session status assignment."""

from __future__ import annotations

from typing import Mapping, Sequence

from presence_check.errors import NotOnRosterError
from presence_check.models import AttendanceStatus, RosterEntry


def _norm(identifier: str) -> str:
    return identifier.strip().lower()


def find_entry(identifier: str, roster: Sequence[RosterEntry]) -> RosterEntry | None:
    """Return the entry whose id matches (case-insensitive, trimmed), or None."""

    key = _norm(identifier)
    for entry in roster:
        if _norm(entry.id) == key:
            return entry
    return None


def is_member(identifier: str, roster: Sequence[RosterEntry]) -> bool:
    return find_entry(identifier, roster) is not None


def lookup_name(identifier: str, roster: Sequence[RosterEntry]) -> str | None:
    entry = find_entry(identifier, roster)
    return entry.name if entry is not None else None


def require_member(identifier: str, roster: Sequence[RosterEntry]) -> RosterEntry:
    """Like find_entry, but raise NotOnRosterError when there is no match."""

    entry = find_entry(identifier, roster)
    if entry is None:
        raise NotOnRosterError(identifier)
    return entry


def close_session(
    roster: Sequence[RosterEntry],
    statuses: Mapping[str, AttendanceStatus],
) -> dict[str, AttendanceStatus]:
    """Final status for every roster member once a session ends.

    Members without a submission are ABSENT; a PENDING left unreviewed at close
    also becomes ABSENT. Keys of ``statuses`` are matched like ``find_entry``.

    Returns:
        Mapping of roster id (as written in the roster) -> final status.
    """

    by_key = {_norm(k): v for k, v in statuses.items()}
    final: dict[str, AttendanceStatus] = {}
    for entry in roster:
        status = by_key.get(_norm(entry.id), AttendanceStatus.ABSENT)
        if status == AttendanceStatus.PENDING:
            status = AttendanceStatus.ABSENT
        final[entry.id] = status
    return final
