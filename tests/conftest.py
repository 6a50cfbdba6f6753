"""Shared test fixtures — sample addresses and fake backends."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from aavaverify.exceptions import ApplicationError, TransportFailure
from aavaverify.models import AddressParts, Coordinate, ValidationRequest

DELHI = Coordinate(28.6139, 77.2090)

VALIDATION_PAYLOAD = {
    "requestId": "req-remote-1",
    "isValid": True,
    "confidenceScore": 0.97,
    "digipin": "DP12191B1BE6F2",
    "normalizedAddress": "Main Street, Sector 15, New Delhi",
    "validationDetails": {
        "checks": [
            {
                "check_name": "geocoding_reverse_match",
                "passed": True,
                "confidence": 0.97,
                "details": "Confirmed by reverse geocoder",
            }
        ],
        "timestamp": "2024-01-15T10:30:00Z",
        "processingTimeMs": 412.5,
    },
}


@pytest.fixture()
def delhi() -> Coordinate:
    return DELHI


@pytest.fixture()
def validation_payload() -> dict:
    return json.loads(json.dumps(VALIDATION_PAYLOAD))


@pytest.fixture()
def main_street() -> AddressParts:
    return AddressParts(street="Main Street", area="Sector 15", district="New Delhi")


@pytest.fixture()
def validation_request(main_street: AddressParts) -> ValidationRequest:
    return ValidationRequest(
        user_id="user-1",
        consent_id="consent-abc",
        address_parts=main_street,
        coordinate=DELHI,
    )


@pytest.fixture()
def mock_transport() -> Callable[..., httpx.MockTransport]:
    """
    Build an httpx.MockTransport from a handler.

    The handler receives the request and the decoded JSON body (or None)
    and returns an httpx.Response or raises an httpx exception.
    """

    def _build(handler):
        def _handle(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content) if request.content else None
            return handler(request, body)

        return httpx.MockTransport(_handle)

    return _build


class UnreachableBackend:
    """Backend whose every call fails as if the network were down."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def _fail(self, operation: str):
        self.calls.append(operation)
        raise TransportFailure(operation, httpx.ConnectError("connection refused"))

    async def generate_digipin(self, coordinate):
        return await self._fail("generate_digipin")

    async def request_consent(self, user_id, action="address_validation"):
        return await self._fail("request_consent")

    async def validate_address(self, request):
        return await self._fail("validate_address")

    async def revoke_consent(self, consent_id):
        return await self._fail("revoke_consent")


class RejectingBackend:
    """Backend that always answers with an application error."""

    def __init__(self, status_code: int = 422, message: str = "Invalid payload"):
        self.status_code = status_code
        self.message = message

    async def _reject(self):
        raise ApplicationError(self.status_code, self.message)

    async def generate_digipin(self, coordinate):
        return await self._reject()

    async def request_consent(self, user_id, action="address_validation"):
        return await self._reject()

    async def validate_address(self, request):
        return await self._reject()

    async def revoke_consent(self, consent_id):
        return await self._reject()


@pytest.fixture()
def unreachable_backend() -> UnreachableBackend:
    return UnreachableBackend()


@pytest.fixture()
def rejecting_backend() -> RejectingBackend:
    return RejectingBackend()
