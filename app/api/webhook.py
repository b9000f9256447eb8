"""
Job-board webhook endpoint.

The sender retries on any non-2xx answer, so every outcome except a rejected
signature is reported as HTTP 200 with `success`/`error` in the body.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_container
from app.schemas.webhook import WebhookDescription, WebhookResponse
from app.services.container import ServiceContainer
from app.services.intake_service import decode_payload
from app.utils.datetime_utils import get_now_utc
from app.utils.exceptions import PayloadError
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Webhook"])

WEBHOOK_PATH = "/webhook-intake"


@router.post(WEBHOOK_PATH, response_model=WebhookResponse, response_model_exclude_none=True)
async def receive_application(request: Request, container: ServiceContainer = Depends(get_container)):
    """
    Receive one job application delivery from the job board.
    """
    received_at = get_now_utc()
    raw_body = await request.body()

    webhook_config = container.config.webhook
    signature = request.headers.get(webhook_config.signature_header)
    if not container.signature_verifier.verify(raw_body, signature, webhook_config.secret):
        logger.error("[API] Invalid webhook signature")
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Invalid signature"})

    intake = container.intake_service
    try:
        payload = decode_payload(raw_body)
    except PayloadError as e:
        await intake.record_malformed(e.message, received_at)
        return WebhookResponse(success=False, status="error", error=e.message)

    result = await intake.process(payload, raw_body.decode("utf-8", errors="replace"), received_at)
    return WebhookResponse(
        success=result.success,
        applicationId=result.application_id,
        status=result.status,
        error=result.error,
    )


@router.get(WEBHOOK_PATH, response_model=WebhookDescription)
async def describe_webhook():
    """Liveness/description for whoever configures the job board."""
    return WebhookDescription(
        status="Webhook intake endpoint active",
        endpoint=WEBHOOK_PATH,
        method="POST",
        description=(
            "This endpoint receives job applications from the job board. "
            "Configure job postings to POST applications to this URL."
        ),
    )
