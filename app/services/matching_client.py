"""
Matching Service Client

Hands a normalized application to the downstream matching/scoring service.
That service resolves the job mapping, scores the candidate and creates the
application record; it answers with `{applicationId, status}`.
"""

from typing import Optional

import httpx

from app.config import MatchingConfig
from app.schemas.intake import ProcessingRequest, ProcessingResult
from app.utils.exceptions import DownstreamError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class MatchingClient:
    """HTTP client for the matching service"""

    def __init__(self, config: MatchingConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.http_client = http_client

    async def process(self, request: ProcessingRequest) -> ProcessingResult:
        """
        Submit one application for matching.

        Raises:
            DownstreamError: On transport errors, non-2xx responses or a
                response without an application id
        """
        if not self.config.url:
            raise DownstreamError("Matching service URL not configured", "MatchingClient")

        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        try:
            if self.http_client is not None:
                response = await self.http_client.post(
                    self.config.url, json=request.to_json(), headers=headers, timeout=self.config.timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                    response = await client.post(self.config.url, json=request.to_json(), headers=headers)
        except httpx.HTTPError as e:
            raise DownstreamError(f"Matching service request failed: {e}", "MatchingClient")

        if response.status_code >= 400:
            raise DownstreamError(
                f"Matching service returned HTTP {response.status_code}: {response.text[:200]}",
                "MatchingClient",
            )

        try:
            body = response.json()
        except ValueError:
            raise DownstreamError("Matching service returned invalid JSON", "MatchingClient")

        application_id = body.get("applicationId") if isinstance(body, dict) else None
        if not application_id:
            error = body.get("error") if isinstance(body, dict) else None
            raise DownstreamError(error or "Matching service returned no applicationId", "MatchingClient")

        logger.info(f"[MatchingClient] Delivery {request.delivery_id} -> application {application_id}")
        return ProcessingResult(application_id=str(application_id), status=str(body.get("status") or "success"))
