"""HTTP client for the remote AAVA validation backend."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx

from aavaverify.exceptions import ApplicationError, TransportFailure
from aavaverify.models import (
    ConsentRecord,
    Coordinate,
    DigipinResult,
    ValidationRequest,
    ValidationResult,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0
CLIENT_ID = "aava-mobile-app"


class BackendClient:
    """
    Thin async wrapper over the backend's JSON API.

    Network-level failures (no response at all) raise TransportFailure;
    an error status or a malformed body raises ApplicationError. Retrying
    is left to callers.

    ``is_online`` is a best-effort hint updated by every call; concurrent
    calls may race on it harmlessly.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.is_online = True
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    # ── Public API ────────────────────────────────────────────────

    async def generate_digipin(self, coordinate: Coordinate) -> DigipinResult:
        return await self._post(
            "generate_digipin",
            "/generate-digipin",
            DigipinResult.from_dict,
            coordinate.to_dict(),
        )

    async def request_consent(
        self, user_id: str, action: str = "address_validation"
    ) -> ConsentRecord:
        return await self._post(
            "request_consent",
            "/consent",
            ConsentRecord.from_dict,
            {"userId": user_id, "action": action, "clientId": CLIENT_ID},
        )

    async def validate_address(self, request: ValidationRequest) -> ValidationResult:
        return await self._post(
            "validate_address",
            "/validate-address",
            ValidationResult.from_dict,
            request.to_dict(),
        )

    async def revoke_consent(self, consent_id: str) -> bool:
        return await self._post(
            "revoke_consent",
            f"/consent/{consent_id}/revoke",
            lambda data: bool(data["success"]),
        )

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> BackendClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── Private helpers ───────────────────────────────────────────

    async def _post(
        self,
        operation: str,
        path: str,
        parse: Callable[[Any], T],
        payload: Optional[dict] = None,
    ) -> T:
        """
        POST *payload* to *path* and return the body decoded by *parse*.

        Raises TransportFailure when no response arrives (including timeouts)
        and ApplicationError for any 4xx/5xx response or a body that is not
        the expected JSON shape.
        """
        try:
            response = await self._http.post(path, json=payload)
        except httpx.TransportError as exc:
            self.is_online = False
            logger.debug("%s: transport error %r", operation, exc)
            raise TransportFailure(operation, exc) from exc

        self.is_online = True
        if response.is_error:
            raise ApplicationError(response.status_code, _error_message(response))
        try:
            return parse(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.debug("%s: malformed response body %r", operation, response.text[:200])
            raise ApplicationError(
                response.status_code, f"malformed response body for '{operation}'"
            ) from exc


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text or response.reason_phrase
