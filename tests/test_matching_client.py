from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from app.config import MatchingConfig
from app.schemas.intake import ProcessingRequest, StorageHandle
from app.services.matching_client import MatchingClient
from app.utils.exceptions import DownstreamError

pytestmark = pytest.mark.unit

URL = "http://matching.test/process"


def request() -> ProcessingRequest:
    return ProcessingRequest(
        delivery_id="apply-0001",
        name="Jane Doe",
        email="jane@x.com",
        phone="555-0100",
        resume_text="Tire tech",
        storage_handle=StorageHandle("intake/jane.pdf"),
        external_job_id="ext-job-42",
        external_job_title="Tire Technician",
        truncated_raw_payload="{}",
        received_at=datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc),
    )


def client_for(handler, api_key: str | None = "matching-key") -> MatchingClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MatchingClient(MatchingConfig(url=URL, api_key=api_key, timeout_seconds=5), http_client=http_client)


@pytest.mark.asyncio
async def test_posts_contract_fields_and_returns_result() -> None:
    seen: list[httpx.Request] = []

    def handler(req: httpx.Request) -> httpx.Response:
        seen.append(req)
        return httpx.Response(200, json={"applicationId": "app-77", "status": "new"})

    result = await client_for(handler).process(request())

    assert result.application_id == "app-77"
    assert result.status == "new"
    sent = json.loads(seen[0].content)
    assert sent["deliveryId"] == "apply-0001"
    assert sent["storageHandle"] == "intake/jane.pdf"
    assert sent["externalJobTitle"] == "Tire Technician"
    assert sent["receivedAt"] == "2026-01-05T12:00:00+00:00"
    assert seen[0].headers["Authorization"] == "Bearer matching-key"


@pytest.mark.asyncio
async def test_non_2xx_raises_downstream_error() -> None:
    def handler(_req: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="overloaded")

    with pytest.raises(DownstreamError, match="HTTP 503"):
        await client_for(handler).process(request())


@pytest.mark.asyncio
async def test_missing_application_id_raises_with_service_error() -> None:
    def handler(_req: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "No active jobs available"})

    with pytest.raises(DownstreamError, match="No active jobs available"):
        await client_for(handler).process(request())


@pytest.mark.asyncio
async def test_transport_error_raises_downstream_error() -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=req)

    with pytest.raises(DownstreamError, match="request failed"):
        await client_for(handler).process(request())


@pytest.mark.asyncio
async def test_unconfigured_url_raises() -> None:
    with pytest.raises(DownstreamError, match="not configured"):
        await MatchingClient(MatchingConfig(url="")).process(request())
