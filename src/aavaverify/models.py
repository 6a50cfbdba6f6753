"""Typed value models for aavaverify.

Every model is immutable. ``to_dict`` produces the JSON-object shape the
backend speaks; models received from the backend also have ``from_dict``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    # fromisoformat() before 3.11 does not accept the 'Z' suffix
    return datetime.fromisoformat(raw.replace("Z", "+00:00"))


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point. Range checking is left to ``is_valid``."""

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """True if both values are finite and within WGS84 range."""
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class AddressParts:
    """Structured address as typed by the user; every field is optional."""

    house_no: Optional[str] = None
    street: Optional[str] = None
    area: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    landmark: Optional[str] = None

    _WIRE_NAMES = {
        "house_no": "houseNo",
        "street": "street",
        "area": "area",
        "district": "district",
        "pincode": "pincode",
        "landmark": "landmark",
    }

    def filled_count(self) -> int:
        """Number of fields holding non-blank text."""
        return sum(
            1 for f in fields(self) if (getattr(self, f.name) or "").strip()
        )

    def has_minimum_address(self) -> bool:
        """True when street, area or district is present (submit gate)."""
        return any(
            (value or "").strip()
            for value in (self.street, self.area, self.district)
        )

    def to_dict(self) -> dict:
        return {
            self._WIRE_NAMES[f.name]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }


@dataclass(frozen=True)
class GridBoundary:
    """Axis-aligned rectangle around a grid-coded point."""

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            self.lat_min <= coordinate.latitude <= self.lat_max
            and self.lon_min <= coordinate.longitude <= self.lon_max
        )

    def to_dict(self) -> dict:
        return {
            "lat_min": self.lat_min,
            "lat_max": self.lat_max,
            "lon_min": self.lon_min,
            "lon_max": self.lon_max,
        }


@dataclass(frozen=True)
class DigipinResult:
    """A grid code together with the cell it describes."""

    digipin: str
    latitude: float
    longitude: float
    boundary: GridBoundary
    precision_meters: float
    timestamp: datetime = field(default_factory=_utcnow, compare=False)

    def to_dict(self) -> dict:
        return {
            "digipin": self.digipin,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "grid_boundaries": self.boundary.to_dict(),
            "precision_meters": self.precision_meters,
            "timestamp": _format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: dict) -> DigipinResult:
        return cls(
            digipin=data["digipin"],
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            boundary=GridBoundary(**data["grid_boundaries"]),
            precision_meters=float(data.get("precision_meters", 0)),
            timestamp=_parse_timestamp(data.get("timestamp")) or _utcnow(),
        )


@dataclass(frozen=True)
class GazetteerEntry:
    """A known reference address used as ground truth when offline."""

    id: str
    display_name: str
    address_parts: AddressParts
    coordinate: Coordinate
    digipin: str


@dataclass(frozen=True)
class ValidationCheck:
    """Outcome of one independent validation check."""

    name: str
    passed: bool
    confidence: float        # 0.0-1.0
    details: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "check_name": self.name,
            "passed": self.passed,
            "confidence": self.confidence,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ValidationCheck:
        return cls(
            name=data["check_name"],
            passed=bool(data["passed"]),
            confidence=float(data["confidence"]),
            details=data.get("details"),
        )


@dataclass(frozen=True)
class ValidationRequest:
    """Everything the caller submits for one address validation."""

    user_id: str
    consent_id: str
    address_parts: AddressParts
    coordinate: Coordinate
    digipin: Optional[str] = None

    def to_dict(self) -> dict:
        payload = {
            "userId": self.user_id,
            "consentId": self.consent_id,
            "addressParts": self.address_parts.to_dict(),
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
        }
        if self.digipin:
            payload["digipin"] = self.digipin
        return payload


@dataclass(frozen=True)
class ValidationResult:
    """Verdict for one validation call, online or synthesised offline."""

    request_id: str
    is_valid: bool
    confidence_score: float  # 0.0-1.0, informational only
    digipin: str
    checks: tuple[ValidationCheck, ...]
    normalized_address: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)
    processing_time_ms: float = 0.0
    offline: bool = False    # True when produced by the local fallback

    def to_dict(self) -> dict:
        return {
            "requestId": self.request_id,
            "isValid": self.is_valid,
            "confidenceScore": self.confidence_score,
            "digipin": self.digipin,
            "normalizedAddress": self.normalized_address,
            "validationDetails": {
                "checks": [check.to_dict() for check in self.checks],
                "timestamp": _format_timestamp(self.timestamp),
                "processingTimeMs": self.processing_time_ms,
            },
            "offline": self.offline,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ValidationResult:
        details = data.get("validationDetails") or {}
        return cls(
            request_id=data["requestId"],
            is_valid=bool(data["isValid"]),
            confidence_score=float(data["confidenceScore"]),
            digipin=data["digipin"],
            checks=tuple(
                ValidationCheck.from_dict(c) for c in details.get("checks", [])
            ),
            normalized_address=data.get("normalizedAddress"),
            timestamp=_parse_timestamp(details.get("timestamp")) or _utcnow(),
            processing_time_ms=float(details.get("processingTimeMs", 0.0)),
            offline=bool(data.get("offline", False)),
        )


@dataclass(frozen=True)
class ConsentRecord:
    """Time-bounded authorisation to validate a user's address."""

    consent_id: str
    user_id: str
    action: str
    status: str              # granted | pending | revoked
    granted_at: datetime
    expires_at: Optional[datetime] = None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Granted and not yet expired at *now* (defaults to the current time)."""
        if self.status != "granted":
            return False
        if self.expires_at is None:
            return True
        return (now or _utcnow()) < self.expires_at

    def to_dict(self) -> dict:
        return {
            "consentId": self.consent_id,
            "userId": self.user_id,
            "action": self.action,
            "status": self.status,
            "timestamp": _format_timestamp(self.granted_at),
            "expiresAt": _format_timestamp(self.expires_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ConsentRecord:
        return cls(
            consent_id=data["consentId"],
            user_id=data["userId"],
            action=data["action"],
            status=data["status"],
            granted_at=_parse_timestamp(data.get("timestamp")) or _utcnow(),
            expires_at=_parse_timestamp(data.get("expiresAt")),
        )


@dataclass(frozen=True)
class AuditRecord:
    """One audit-trail entry emitted after a successful operation."""

    operation: str           # generate_digipin | request_consent | validate_address
    user_id: str
    request_id: Optional[str]
    inputs: dict[str, Any]
    result: dict[str, Any]
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "userId": self.user_id,
            "requestId": self.request_id,
            "inputs": self.inputs,
            "result": self.result,
            "timestamp": _format_timestamp(self.timestamp),
        }
