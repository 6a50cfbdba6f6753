"""Local stand-in for the backend, used in demo mode and as the fallback."""

from __future__ import annotations

import dataclasses
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from aavaverify import grid
from aavaverify.engine import ValidationEngine
from aavaverify.models import (
    ConsentRecord,
    Coordinate,
    DigipinResult,
    ValidationRequest,
    ValidationResult,
)

CONSENT_TTL = timedelta(hours=24)


class OfflineBackend:
    """
    Synthesises backend responses from local computation only.

    Exposes the same coroutine interface as BackendClient so the two are
    interchangeable. Holds no mutable state.
    """

    def __init__(self, engine: Optional[ValidationEngine] = None):
        self._engine = engine or ValidationEngine()

    async def generate_digipin(self, coordinate: Coordinate) -> DigipinResult:
        return grid.encode(coordinate)

    async def request_consent(
        self, user_id: str, action: str = "address_validation"
    ) -> ConsentRecord:
        now = datetime.now(timezone.utc)
        return ConsentRecord(
            consent_id=f"consent-{uuid.uuid4().hex}",
            user_id=user_id,
            action=action,
            status="granted",
            granted_at=now,
            expires_at=now + CONSENT_TTL,
        )

    async def validate_address(self, request: ValidationRequest) -> ValidationResult:
        # The engine derives the grid code itself when the request has none.
        result = self._engine.validate(request)
        return dataclasses.replace(result, offline=True)

    async def revoke_consent(self, consent_id: str) -> bool:
        return True
