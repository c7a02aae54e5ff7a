"""Validation and selection of raw location fixes."""

from __future__ import annotations

import math
from typing import Iterable

from presence_check.errors import InsufficientAccuracyError, InvalidInputError, NoLocationFixError
from presence_check.geo import validate_point
from presence_check.models import LocationFix

DEFAULT_REQUIRED_ACCURACY_M = 30.0


def validate_fix(fix: LocationFix) -> LocationFix:
    """Return the fix unchanged, or raise InvalidInputError if it is malformed."""

    validate_point(fix.point)
    if not math.isfinite(fix.accuracy_m) or fix.accuracy_m < 0:
        raise InvalidInputError(f"accuracy must be a finite non-negative number, got {fix.accuracy_m!r}")
    return fix


def select_best_fix(fixes: Iterable[LocationFix]) -> LocationFix:
    """Pick the most accurate fix (smallest accuracy radius).

    Ties keep the earliest fix in input order.

    Raises:
        NoLocationFixError: If no fix was given.
        InvalidInputError: If any fix is malformed.
    """

    best: LocationFix | None = None
    for fix in fixes:
        validate_fix(fix)
        if best is None or fix.accuracy_m < best.accuracy_m:
            best = fix
    if best is None:
        raise NoLocationFixError("no location fix available")
    return best


def require_accuracy(fix: LocationFix, required_m: float = DEFAULT_REQUIRED_ACCURACY_M) -> LocationFix:
    """Return the fix if its accuracy is within required_m meters."""

    if fix.accuracy_m > required_m:
        raise InsufficientAccuracyError(fix.accuracy_m, required_m)
    return fix
