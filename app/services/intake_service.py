"""
Application Intake Service

Orchestrates one job-board delivery: resume acquisition, best-effort file
storage, per-delivery idempotency, the matching service call, and exactly one
audit log entry. `process` never raises; every failure is reported through the
returned IntakeResult and the log so the webhook can always answer 200.
"""

import asyncio
import json
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from app.schemas.intake import (
    STATUS_DUPLICATE,
    STATUS_ERROR,
    STATUS_SUCCESS,
    IntakeResult,
    ProcessingRequest,
    WebhookLogEntry,
)
from app.schemas.webhook import IncomingApplicationPayload
from app.services.claim_service import DeliveryClaimService
from app.services.matching_client import MatchingClient
from app.services.resume_service import ResumeAcquirer
from app.services.storage_service import ResumeStorer
from app.services.webhook_log_service import WebhookLogService
from app.utils.datetime_utils import get_now_utc
from app.utils.exceptions import DownstreamError, PayloadError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def decode_payload(raw_body: bytes) -> IncomingApplicationPayload:
    """
    Decode a webhook body into the validated payload model.

    Raises:
        PayloadError: If the body is not JSON or not an object of the expected shape
    """
    try:
        data = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PayloadError(f"Invalid JSON payload: {e}", "IntakeService")
    try:
        return IncomingApplicationPayload.model_validate(data)
    except ValidationError as e:
        raise PayloadError(f"Unexpected payload shape: {e.error_count()} validation error(s)", "IntakeService")


class IntakeService:
    """Coordinator for job-board application deliveries"""

    def __init__(
        self,
        acquirer: ResumeAcquirer,
        storer: ResumeStorer,
        claims: DeliveryClaimService,
        matching: MatchingClient,
        webhook_logs: WebhookLogService,
        max_raw_payload_chars: int = 10000,
        matching_timeout_seconds: float = 60.0,
        claim_poll_interval_seconds: float = 0.25,
    ):
        self.acquirer = acquirer
        self.storer = storer
        self.claims = claims
        self.matching = matching
        self.webhook_logs = webhook_logs
        self.max_raw_payload_chars = max_raw_payload_chars
        self.matching_timeout_seconds = matching_timeout_seconds
        self.claim_poll_interval_seconds = claim_poll_interval_seconds

    def truncate_payload(self, raw_body: str) -> str:
        return raw_body[:self.max_raw_payload_chars]

    async def process(
        self,
        payload: IncomingApplicationPayload,
        raw_body: str = "",
        received_at: Optional[datetime] = None,
    ) -> IntakeResult:
        """
        Process one delivery.

        Args:
            payload: Decoded webhook payload
            raw_body: Raw request body, stored truncated in the log
            received_at: Receipt time (defaults to now)

        Returns:
            IntakeResult; never raises
        """
        received_at = received_at or get_now_utc()
        delivery_id = payload.delivery_id
        applicant = payload.applicant
        job = payload.job

        name = (applicant.fullName if applicant else None) or "Unknown"
        email = (applicant.email if applicant else None) or ""
        phone = (applicant.phoneNumber if applicant else None) or ""
        job_id = (job.jobId if job else None) or ""
        job_title = (job.jobTitle if job else None) or ""
        raw_payload = self.truncate_payload(raw_body)

        def log_entry(status: str, application_id: Optional[str] = None, error: Optional[str] = None) -> WebhookLogEntry:
            return WebhookLogEntry(
                delivery_id=delivery_id,
                received_at=received_at,
                applicant_name=name,
                applicant_email=email,
                external_job_id=job_id,
                external_job_title=job_title,
                status=status,
                application_id=application_id,
                error_message=error,
                raw_payload=raw_payload,
            )

        logger.info(f"[IntakeService] Delivery received: id={delivery_id or '<none>'} applicant={name!r} job={job_title!r}")

        claimed = False
        try:
            if delivery_id:
                claim = await asyncio.to_thread(self.claims.claim, delivery_id)
                if not claim.created:
                    application_id = claim.application_id or await self._await_winner(delivery_id)
                    await asyncio.to_thread(
                        self.webhook_logs.append,
                        log_entry(STATUS_DUPLICATE, application_id, "Application already processed"),
                    )
                    return IntakeResult(
                        success=True,
                        status=STATUS_DUPLICATE,
                        application_id=application_id,
                        message="Application already processed",
                    )
                claimed = True
            else:
                logger.warning("[IntakeService] Delivery has no id; processing without duplicate check")

            # PDF parsing is CPU bound
            resume = await asyncio.to_thread(self.acquirer.acquire, payload)
            storage_handle = None
            if resume.raw_bytes:
                storage_handle = await self.storer.store(resume.raw_bytes, resume.content_type, resume.file_name)

            request = ProcessingRequest(
                delivery_id=delivery_id,
                name=name,
                email=email,
                phone=phone,
                resume_text=resume.text,
                storage_handle=storage_handle,
                external_job_id=job_id,
                external_job_title=job_title,
                truncated_raw_payload=raw_payload,
                received_at=received_at,
                locale=payload.locale,
                questions=[
                    {"question": q.question or "", "answer": q.answer or ""}
                    for q in payload.questions
                ],
            )
            try:
                result = await asyncio.wait_for(self.matching.process(request), timeout=self.matching_timeout_seconds)
            except asyncio.TimeoutError:
                raise DownstreamError(
                    f"Matching service timed out after {self.matching_timeout_seconds}s", "IntakeService"
                )

            if claimed:
                try:
                    await asyncio.to_thread(self.claims.complete, delivery_id, result.application_id)
                except Exception as e:
                    # The application exists; the claim row still blocks redeliveries
                    logger.error(f"[IntakeService] Could not record application on claim {delivery_id}: {e}")

            await asyncio.to_thread(self.webhook_logs.append, log_entry(STATUS_SUCCESS, result.application_id))
            logger.info(f"[IntakeService] ✅ Delivery {delivery_id or '<none>'} -> application {result.application_id}")
            return IntakeResult(
                success=True,
                status=STATUS_SUCCESS,
                application_id=result.application_id,
                message=result.status,
            )

        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.error(f"[IntakeService] Error processing delivery {delivery_id or '<none>'}: {error_message}", exc_info=True)
            if claimed:
                await asyncio.to_thread(self.claims.release, delivery_id)
            await asyncio.to_thread(self.webhook_logs.append, log_entry(STATUS_ERROR, error=error_message))
            return IntakeResult(success=False, status=STATUS_ERROR, error=error_message, message="Processing failed")

    async def _await_winner(self, delivery_id: str) -> Optional[str]:
        """
        Poll a claim held by a concurrent request until its application id is
        recorded, the claim is released, or the matching timeout elapses.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.matching_timeout_seconds
        while loop.time() < deadline:
            await asyncio.sleep(self.claim_poll_interval_seconds)
            row = await asyncio.to_thread(self.claims.get, delivery_id)
            if row is None:
                logger.info(f"[IntakeService] Claim on {delivery_id} released by its owner")
                return None
            if row.get("application_id"):
                return row["application_id"]
        logger.warning(f"[IntakeService] No application recorded for {delivery_id} within {self.matching_timeout_seconds}s")
        return None

    async def record_malformed(self, error_message: str, received_at: Optional[datetime] = None) -> None:
        """Log a delivery that never decoded into a payload."""
        logger.error(f"[IntakeService] Malformed delivery: {error_message}")
        await asyncio.to_thread(self.webhook_logs.log_unparsed_error, error_message, received_at)
