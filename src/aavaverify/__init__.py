"""aavaverify — DIGIPIN grid codes and address validation with offline fallback."""

from aavaverify.audit import InMemoryAuditLog
from aavaverify.client import BackendClient
from aavaverify.engine import ValidationEngine
from aavaverify.exceptions import (
    AavaError,
    ApplicationError,
    ConsentExpired,
    ConsentMissing,
    InvalidCoordinate,
    TransportFailure,
)
from aavaverify.matcher import AddressMatcher, Match
from aavaverify.models import (
    AddressParts,
    AuditRecord,
    ConsentRecord,
    Coordinate,
    DigipinResult,
    GazetteerEntry,
    GridBoundary,
    ValidationCheck,
    ValidationRequest,
    ValidationResult,
)
from aavaverify.offline import OfflineBackend
from aavaverify.service import Mode, State, ValidationService

__all__ = [
    "ValidationService",
    "Mode",
    "State",
    "BackendClient",
    "OfflineBackend",
    "ValidationEngine",
    "AddressMatcher",
    "Match",
    "InMemoryAuditLog",
    "Coordinate",
    "AddressParts",
    "GridBoundary",
    "DigipinResult",
    "GazetteerEntry",
    "ValidationCheck",
    "ValidationRequest",
    "ValidationResult",
    "ConsentRecord",
    "AuditRecord",
    "AavaError",
    "InvalidCoordinate",
    "TransportFailure",
    "ApplicationError",
    "ConsentMissing",
    "ConsentExpired",
]
