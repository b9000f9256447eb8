"""
Operator-facing schemas for webhook logs and job mappings.
"""

from typing import Optional

from pydantic import BaseModel, Field


class WebhookLogResponse(BaseModel):
    id: str
    delivery_id: str
    received_at: str
    applicant_name: str
    applicant_email: str = ""
    external_job_id: Optional[str] = None
    external_job_title: Optional[str] = None
    status: str
    application_id: Optional[str] = None
    error_message: Optional[str] = None
    raw_payload: Optional[str] = None


class WebhookStatsResponse(BaseModel):
    total: int
    success: int
    duplicate: int
    error: int
    last24Hours: int


class JobMappingRequest(BaseModel):
    external_job_id: str = Field(..., min_length=1, examples=["8f3a9c1b2d"])
    external_job_title: str = Field(..., examples=["Tire Technician"])
    internal_job_id: str = Field(..., min_length=1, examples=["job_123"])
    internal_job_title: str = Field(..., examples=["Tire Technician - Latrobe"])
    location: Optional[str] = Field(None, examples=["Latrobe, PA"])
    is_active: bool = True


class JobMappingResponse(BaseModel):
    id: str
    external_job_id: str
    external_job_title: str
    internal_job_id: str
    internal_job_title: str
    location: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None


__all__ = [
    "WebhookLogResponse",
    "WebhookStatsResponse",
    "JobMappingRequest",
    "JobMappingResponse",
]
