"""Custom exception hierarchy for aavaverify."""

from __future__ import annotations

from datetime import datetime
from typing import Optional


class AavaError(Exception):
    """Base exception for all aavaverify errors."""


class InvalidCoordinate(AavaError):
    """Latitude or longitude is missing, non-numeric or out of range."""

    def __init__(self, latitude: object, longitude: object):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Invalid coordinate: latitude={latitude!r}, longitude={longitude!r}"
        )


class TransportFailure(AavaError):
    """No response was received from the backend."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Backend unreachable during '{operation}'{detail}")


class ApplicationError(AavaError):
    """The backend answered with an error status or a malformed body."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Backend error {status_code}: {message}")


class ConsentMissing(AavaError):
    """A validation request arrived without a usable consent id."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"No consent on record for user '{user_id}'")


class ConsentExpired(AavaError):
    """The supplied consent record is no longer valid."""

    def __init__(self, consent_id: str, expires_at: Optional[datetime]):
        self.consent_id = consent_id
        self.expires_at = expires_at
        super().__init__(f"Consent '{consent_id}' expired at {expires_at}")
