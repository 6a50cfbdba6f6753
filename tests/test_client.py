"""Tests for aavaverify.client module."""

import httpx
import pytest

from aavaverify.client import CLIENT_ID, BackendClient
from aavaverify.exceptions import ApplicationError, TransportFailure
from aavaverify.models import ConsentRecord, Coordinate, ValidationRequest, ValidationResult


class TestGenerateDigipin:
    @pytest.mark.asyncio
    async def test_parses_response(self, mock_transport, delhi: Coordinate):
        def handler(request, body):
            assert request.url.path == "/generate-digipin"
            assert body == {"latitude": 28.6139, "longitude": 77.2090}
            return httpx.Response(
                200,
                json={
                    "digipin": "39J-438-TJC7",
                    "latitude": 28.6139,
                    "longitude": 77.2090,
                    "grid_boundaries": {
                        "lat_min": 28.61,
                        "lat_max": 28.62,
                        "lon_min": 77.20,
                        "lon_max": 77.21,
                    },
                    "precision_meters": 4,
                    "timestamp": "2024-01-15T10:30:00Z",
                },
            )

        async with BackendClient(transport=mock_transport(handler)) as client:
            result = await client.generate_digipin(delhi)
        assert result.digipin == "39J-438-TJC7"
        assert result.boundary.contains(delhi)
        assert result.timestamp.year == 2024


class TestRequestConsent:
    @pytest.mark.asyncio
    async def test_sends_client_id(self, mock_transport):
        def handler(request, body):
            assert body == {"userId": "user-1", "action": "address_validation", "clientId": CLIENT_ID}
            return httpx.Response(
                201,
                json={
                    "consentId": "consent-9",
                    "userId": "user-1",
                    "action": "address_validation",
                    "status": "granted",
                    "timestamp": "2024-01-15T10:30:00Z",
                    "expiresAt": "2024-01-16T10:30:00Z",
                },
            )

        async with BackendClient(transport=mock_transport(handler)) as client:
            record = await client.request_consent("user-1")
        assert isinstance(record, ConsentRecord)
        assert record.consent_id == "consent-9"
        assert record.expires_at is not None


class TestValidateAddress:
    @pytest.mark.asyncio
    async def test_parses_result(
        self, mock_transport, validation_request: ValidationRequest, validation_payload: dict
    ):
        def handler(request, body):
            assert body["consentId"] == "consent-abc"
            assert body["addressParts"] == {
                "street": "Main Street",
                "area": "Sector 15",
                "district": "New Delhi",
            }
            assert "digipin" not in body
            return httpx.Response(200, json=validation_payload)

        async with BackendClient(transport=mock_transport(handler)) as client:
            result = await client.validate_address(validation_request)
        assert isinstance(result, ValidationResult)
        assert result.request_id == "req-remote-1"
        assert result.offline is False
        assert result.checks[0].name == "geocoding_reverse_match"
        assert client.is_online is True


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_status_is_application_error(self, mock_transport, delhi: Coordinate):
        def handler(request, body):
            return httpx.Response(422, json={"detail": "latitude out of service area"})

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(ApplicationError) as exc_info:
                await client.generate_digipin(delhi)
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "latitude out of service area"

    @pytest.mark.asyncio
    async def test_plain_text_error_body(self, mock_transport, delhi: Coordinate):
        def handler(request, body):
            return httpx.Response(503, text="maintenance")

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(ApplicationError) as exc_info:
                await client.generate_digipin(delhi)
        assert exc_info.value.message == "maintenance"
        assert client.is_online is True

    @pytest.mark.asyncio
    async def test_html_body_is_application_error(
        self, mock_transport, validation_request: ValidationRequest
    ):
        def handler(request, body):
            return httpx.Response(200, text="<html><body>Sign in to Wi-Fi</body></html>")

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(ApplicationError) as exc_info:
                await client.validate_address(validation_request)
        assert exc_info.value.status_code == 200
        assert "malformed response body" in exc_info.value.message

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{"status": "ok"}, {"requestId": "r-1", "isValid": True}, [], "ok"],
    )
    async def test_incomplete_json_is_application_error(
        self, mock_transport, validation_request: ValidationRequest, payload
    ):
        def handler(request, body):
            return httpx.Response(200, json=payload)

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(ApplicationError) as exc_info:
                await client.validate_address(validation_request)
        assert exc_info.value.status_code == 200
        assert "validate_address" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_revoke_without_success_flag(self, mock_transport):
        def handler(request, body):
            return httpx.Response(200, json={})

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(ApplicationError):
                await client.revoke_consent("consent-9")
        assert client.is_online is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            httpx.ConnectTimeout("dns lookup timed out"),
        ],
    )
    async def test_no_response_is_transport_failure(self, mock_transport, delhi: Coordinate, error):
        def handler(request, body):
            raise error

        async with BackendClient(transport=mock_transport(handler)) as client:
            with pytest.raises(TransportFailure) as exc_info:
                await client.generate_digipin(delhi)
        assert exc_info.value.operation == "generate_digipin"
        assert exc_info.value.cause is error
        assert client.is_online is False


class TestRevokeConsent:
    @pytest.mark.asyncio
    async def test_revoke(self, mock_transport):
        def handler(request, body):
            assert request.url.path == "/consent/consent-9/revoke"
            return httpx.Response(200, json={"success": True})

        async with BackendClient(transport=mock_transport(handler)) as client:
            assert await client.revoke_consent("consent-9") is True
