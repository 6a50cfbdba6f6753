"""Address validation checks and their aggregation into a verdict.

Each check is a plain callable taking a ValidationRequest and returning a
ValidationCheck. The engine runs every check in order, never short-circuits,
and aggregates the outcomes:

* ``is_valid`` is the logical AND of every check's ``passed``;
* ``confidence_score`` is the mean check confidence rounded to 2 places and
  is informational only.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional, Sequence

from aavaverify import address, grid
from aavaverify.exceptions import InvalidCoordinate
from aavaverify.models import ValidationCheck, ValidationRequest, ValidationResult

logger = logging.getLogger(__name__)

Check = Callable[[ValidationRequest], ValidationCheck]

MIN_ADDRESS_PARTS = 3
EMPTY_ADDRESS_PLACEHOLDER = "Demo Location"


def new_request_id() -> str:
    return f"req-{uuid.uuid4().hex}"


def _derived_digipin(request: ValidationRequest) -> Optional[str]:
    try:
        return grid.encode(request.coordinate).digipin
    except InvalidCoordinate:
        return None


# ── Checks ────────────────────────────────────────────────────


def coordinate_validity(request: ValidationRequest) -> ValidationCheck:
    coord = request.coordinate
    passed = coord.is_valid()
    return ValidationCheck(
        name="coordinate_validity",
        passed=passed,
        confidence=1.0,
        details=(
            "Coordinates are within valid range"
            if passed
            else f"Coordinates out of range: ({coord.latitude}, {coord.longitude})"
        ),
    )


def digipin_match(request: ValidationRequest) -> ValidationCheck:
    expected = _derived_digipin(request)
    if expected is None:
        passed, details = False, "No DIGIPIN can be derived from invalid coordinates"
    elif not request.digipin:
        # Nothing was supplied to verify; the code is only checked against itself.
        passed, details = True, "DIGIPIN derived from coordinates (not independently verified)"
    elif request.digipin.upper() == expected:
        passed, details = True, "DIGIPIN matches coordinate grid"
    else:
        passed, details = False, f"DIGIPIN {request.digipin} does not match grid cell {expected}"
    return ValidationCheck(
        name="digipin_match", passed=passed, confidence=0.95, details=details
    )


def address_completeness(request: ValidationRequest) -> ValidationCheck:
    filled = request.address_parts.filled_count()
    return ValidationCheck(
        name="address_completeness",
        passed=filled >= MIN_ADDRESS_PARTS,
        confidence=0.85,
        details=f"{filled} address components present (minimum {MIN_ADDRESS_PARTS})",
    )


def geocoding_reverse_match(request: ValidationRequest) -> ValidationCheck:
    # No reverse geocoder exists offline; the backend runs the real check.
    return ValidationCheck(
        name="geocoding_reverse_match",
        passed=True,
        confidence=0.88,
        details="Reverse geocoding unavailable offline; assumed to match",
    )


DEFAULT_CHECKS: tuple[Check, ...] = (
    coordinate_validity,
    digipin_match,
    address_completeness,
    geocoding_reverse_match,
)


# ── Engine ────────────────────────────────────────────────────


class ValidationEngine:
    """Runs an ordered battery of independent checks over a request."""

    def __init__(self, checks: Sequence[Check] = DEFAULT_CHECKS):
        if not checks:
            raise ValueError("ValidationEngine needs at least one check")
        self._checks = tuple(checks)

    def run_checks(self, request: ValidationRequest) -> list[ValidationCheck]:
        """Run every check, in order, regardless of earlier failures."""
        return [check(request) for check in self._checks]

    @staticmethod
    def aggregate(checks: Sequence[ValidationCheck]) -> tuple[bool, float]:
        """Return (is_valid, confidence_score) for a list of check outcomes."""
        if not checks:
            raise ValueError("cannot aggregate an empty list of checks")
        is_valid = all(c.passed for c in checks)
        mean = sum(c.confidence for c in checks) / len(checks)
        return is_valid, round(mean, 2)

    def validate(self, request: ValidationRequest) -> ValidationResult:
        """Run the battery and build a complete ValidationResult."""
        started = time.perf_counter()
        checks = self.run_checks(request)
        is_valid, score = self.aggregate(checks)
        normalized = address.normalise(request.address_parts)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        result = ValidationResult(
            request_id=new_request_id(),
            is_valid=is_valid,
            confidence_score=score,
            digipin=request.digipin or _derived_digipin(request) or "",
            checks=tuple(checks),
            normalized_address=normalized or EMPTY_ADDRESS_PLACEHOLDER,
            processing_time_ms=elapsed_ms,
        )
        logger.debug(
            "Validated %s: valid=%s score=%.2f failed=%s",
            result.request_id,
            is_valid,
            score,
            [c.name for c in checks if not c.passed],
        )
        return result
