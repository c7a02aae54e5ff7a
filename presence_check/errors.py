"""Error kinds raised by the engine and its collaborators.

Every error carries a stable ``kind`` string. The CLI and the batch CSV output
use it so callers can show a precise message instead of a generic failure.
"""

from __future__ import annotations


class PresenceCheckError(Exception):
    """Base class for all presence_check errors."""

    kind: str = "error"


class InvalidInputError(PresenceCheckError, ValueError):
    """Malformed geometry: NaN/inf or out-of-range coordinates, negative radius, etc."""

    kind = "invalid_input"


class LocationPermissionDeniedError(PresenceCheckError):
    """The device refused access to location."""

    kind = "location_permission_denied"


class LocationServicesDisabledError(PresenceCheckError):
    """Location services (GPS) are switched off on the device."""

    kind = "location_services_disabled"


class NetworkUnavailableError(PresenceCheckError):
    """No network connection, or the network name could not be detected."""

    kind = "network_unavailable"


class NoLocationFixError(PresenceCheckError):
    """Every acquisition attempt failed and no fix is available."""

    kind = "no_location_fix"


class InsufficientAccuracyError(PresenceCheckError):
    """The best available fix is less accurate than required."""

    kind = "insufficient_accuracy"

    def __init__(self, accuracy_m: float, required_m: float) -> None:
        super().__init__(f"accuracy {accuracy_m:.1f}m exceeds required {required_m:.1f}m")
        self.accuracy_m = accuracy_m
        self.required_m = required_m


class DuplicateSubmissionError(PresenceCheckError):
    """The claimant already has a submission for this session."""

    kind = "duplicate_submission"


class SessionExpiredError(PresenceCheckError):
    """The claim was made after the session closed."""

    kind = "session_expired"


class NotOnRosterError(PresenceCheckError):
    """The claimant id does not appear in the session roster."""

    kind = "not_on_roster"

    def __init__(self, claimant_id: str) -> None:
        super().__init__(f"{claimant_id!r} is not on the roster")
        self.claimant_id = claimant_id


ERROR_KINDS: tuple[type[PresenceCheckError], ...] = (
    InvalidInputError,
    LocationPermissionDeniedError,
    LocationServicesDisabledError,
    NetworkUnavailableError,
    NoLocationFixError,
    InsufficientAccuracyError,
    DuplicateSubmissionError,
    SessionExpiredError,
    NotOnRosterError,
)
