from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_container
from app.schemas.integration import (
    JobMappingRequest,
    JobMappingResponse,
    WebhookLogResponse,
    WebhookStatsResponse,
)
from app.services.container import ServiceContainer
from app.utils.api_key import get_api_key
from app.utils.exceptions import AgentError
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Operator endpoints for webhook monitoring and job mappings (X-API-Key required)
router = APIRouter(tags=["Integration"], dependencies=[Depends(get_api_key)])


@router.get("/webhook-logs", response_model=List[WebhookLogResponse])
async def list_webhook_logs(
    limit: int = Query(50, ge=1, le=500),
    container: ServiceContainer = Depends(get_container),
):
    """Most recent webhook deliveries, newest first."""
    return container.webhook_log_service.get_recent(limit)


@router.get("/webhook-logs/stats", response_model=WebhookStatsResponse)
async def webhook_stats(container: ServiceContainer = Depends(get_container)):
    """Delivery counts by status and over the last 24 hours."""
    return container.webhook_log_service.get_stats()


@router.get("/webhook-logs/{delivery_id}", response_model=WebhookLogResponse)
async def get_webhook_log(delivery_id: str, container: ServiceContainer = Depends(get_container)):
    log = container.webhook_log_service.get_by_delivery_id(delivery_id)
    if not log:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook log not found")
    return log


@router.get("/job-mappings", response_model=List[JobMappingResponse])
async def list_job_mappings(container: ServiceContainer = Depends(get_container)):
    return container.job_mapping_service.list_all()


@router.get("/job-mappings/{external_job_id}", response_model=JobMappingResponse)
async def resolve_job_mapping(external_job_id: str, container: ServiceContainer = Depends(get_container)):
    """
    Resolve an external job id to its internal job.

    404 means the caller should fall back to the external job title.
    """
    mapping = container.job_mapping_service.resolve(external_job_id)
    if not mapping:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active mapping for job")
    return mapping


@router.put("/job-mappings", response_model=JobMappingResponse)
async def upsert_job_mapping(request: JobMappingRequest, container: ServiceContainer = Depends(get_container)):
    try:
        return container.job_mapping_service.upsert(
            external_job_id=request.external_job_id,
            external_job_title=request.external_job_title,
            internal_job_id=request.internal_job_id,
            internal_job_title=request.internal_job_title,
            location=request.location,
            is_active=request.is_active,
        )
    except AgentError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.delete("/job-mappings/{mapping_id}")
async def delete_job_mapping(mapping_id: str, container: ServiceContainer = Depends(get_container)):
    if not container.job_mapping_service.delete(mapping_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job mapping not found")
    return {"success": True}
