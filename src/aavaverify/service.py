"""ValidationService: remote-first orchestration with offline fallback."""

from __future__ import annotations

import enum
import logging
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from aavaverify.audit import AuditSink
from aavaverify.exceptions import (
    ConsentExpired,
    ConsentMissing,
    InvalidCoordinate,
    TransportFailure,
)
from aavaverify.models import (
    AuditRecord,
    ConsentRecord,
    Coordinate,
    DigipinResult,
    ValidationRequest,
    ValidationResult,
)
from aavaverify.offline import OfflineBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

ANONYMOUS_USER = "anonymous"


class Mode(enum.Enum):
    ONLINE = "online"    # remote backend first, offline on transport failure
    OFFLINE = "offline"  # demo mode: never touch the network


class State(enum.Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FALLBACK_SUCCEEDED = "fallback_succeeded"
    FAILED = "failed"


class Backend(Protocol):
    """Operations shared by BackendClient and OfflineBackend."""

    async def generate_digipin(self, coordinate: Coordinate) -> DigipinResult: ...

    async def request_consent(self, user_id: str, action: str = ...) -> ConsentRecord: ...

    async def validate_address(self, request: ValidationRequest) -> ValidationResult: ...

    async def revoke_consent(self, consent_id: str) -> bool: ...


class ValidationService:
    """
    Runs each operation through a two-stage pipeline.

    Stage one is the *primary* backend (normally a BackendClient). If it
    raises TransportFailure, stage two, the *fallback* backend, produces a
    response of the same shape. ApplicationError and every other exception
    propagate untouched. In ``Mode.OFFLINE`` only the fallback runs.

    Every successful generate/consent/validate call emits one AuditRecord to
    *audit*, if given. A failing sink is logged and otherwise ignored.

    ``state`` reflects the most recent call only and, like the client's
    ``is_online`` flag, is an advisory hint under concurrent use.
    """

    def __init__(
        self,
        primary: Optional[Backend] = None,
        fallback: Optional[Backend] = None,
        mode: Mode = Mode.ONLINE,
        audit: Optional[AuditSink] = None,
    ):
        if mode is Mode.ONLINE and primary is None:
            raise ValueError("Mode.ONLINE requires a primary backend")
        self.mode = mode
        self.state = State.IDLE
        self._primary = primary
        self._fallback = fallback or OfflineBackend()
        self._audit = audit

    # ── Public API ────────────────────────────────────────────────

    async def generate_digipin(
        self, coordinate: Coordinate, user_id: str = ANONYMOUS_USER
    ) -> DigipinResult:
        """Grid code for *coordinate*; raises InvalidCoordinate before any I/O."""
        if not coordinate.is_valid():
            raise InvalidCoordinate(coordinate.latitude, coordinate.longitude)

        result = await self._dispatch(
            "generate_digipin", lambda backend: backend.generate_digipin(coordinate)
        )
        self._emit(
            AuditRecord(
                operation="generate_digipin",
                user_id=user_id,
                request_id=None,
                inputs=coordinate.to_dict(),
                result=result.to_dict(),
            )
        )
        return result

    async def request_consent(
        self, user_id: str, action: str = "address_validation"
    ) -> ConsentRecord:
        record = await self._dispatch(
            "request_consent",
            lambda backend: backend.request_consent(user_id, action),
        )
        self._emit(
            AuditRecord(
                operation="request_consent",
                user_id=user_id,
                request_id=record.consent_id,
                inputs={"action": action},
                result=record.to_dict(),
            )
        )
        return record

    async def validate_address(
        self,
        request: ValidationRequest,
        consent: Optional[ConsentRecord] = None,
    ) -> ValidationResult:
        """
        Validate *request*, remotely if possible.

        Raises ConsentMissing or ConsentExpired, without running any check,
        when the request carries no consent id or *consent* does not cover it.
        """
        _require_consent(request, consent)

        result = await self._dispatch(
            "validate_address", lambda backend: backend.validate_address(request)
        )
        self._emit(
            AuditRecord(
                operation="validate_address",
                user_id=request.user_id,
                request_id=result.request_id,
                inputs=request.to_dict(),
                result=result.to_dict(),
            )
        )
        return result

    async def revoke_consent(self, consent_id: str) -> bool:
        """
        Revoke a consent on the backend.

        There is no offline equivalent when online: a TransportFailure here
        propagates, because the revocation may not have been recorded.
        """
        if self.mode is Mode.OFFLINE:
            return await self._fallback.revoke_consent(consent_id)
        try:
            return await self._primary.revoke_consent(consent_id)
        except TransportFailure:
            logger.warning("revoke_consent: backend unreachable, %s may not be revoked", consent_id)
            raise

    # ── Private helpers ───────────────────────────────────────────

    async def _dispatch(
        self, operation: str, call: Callable[[Backend], Awaitable[T]]
    ) -> T:
        self.state = State.REQUESTING
        try:
            if self.mode is Mode.ONLINE:
                try:
                    result = await call(self._primary)
                except TransportFailure as exc:
                    logger.warning(
                        "%s: backend unreachable (%s), falling back to offline mode",
                        operation,
                        exc.cause,
                    )
                else:
                    self.state = State.SUCCEEDED
                    return result
            result = await call(self._fallback)
        except Exception:
            self.state = State.FAILED
            raise
        self.state = State.FALLBACK_SUCCEEDED
        return result

    def _emit(self, entry: AuditRecord) -> None:
        if self._audit is None:
            return
        try:
            self._audit.record(entry)
        except Exception:
            logger.exception(
                "Failed to write audit entry for %s (user %s)",
                entry.operation,
                entry.user_id,
            )


def _require_consent(
    request: ValidationRequest, consent: Optional[ConsentRecord]
) -> None:
    if not request.consent_id:
        raise ConsentMissing(request.user_id)
    if consent is None:
        return
    if (
        consent.consent_id != request.consent_id
        or consent.user_id != request.user_id
        or consent.status != "granted"
    ):
        raise ConsentMissing(request.user_id)
    if not consent.is_active():
        raise ConsentExpired(consent.consent_id, consent.expires_at)
