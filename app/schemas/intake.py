"""
Value types passed between the intake services.

These are request-scoped and never leave the process except through
`IntakeResult` (serialized by the webhook router) and `WebhookLogEntry`
(written to the audit log).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

STATUS_SUCCESS = "success"
STATUS_DUPLICATE = "duplicate"
STATUS_ERROR = "error"


@dataclass
class ExtractedResume:
    text: str
    raw_bytes: Optional[bytes] = None
    file_name: str = "resume.pdf"
    content_type: str = "application/pdf"
    # Name of the strategy that produced `text`
    source: str = "synthesized"


@dataclass(frozen=True)
class StorageHandle:
    storage_id: str


@dataclass(frozen=True)
class DeliveryClaim:
    """Row in intake_claims; one per external delivery id."""
    delivery_id: str
    application_id: Optional[str] = None
    created: bool = True


@dataclass
class ProcessingRequest:
    """Input sent to the matching service."""
    delivery_id: str
    name: str
    email: str
    phone: str
    resume_text: str
    external_job_id: str
    external_job_title: str
    truncated_raw_payload: str
    received_at: datetime
    storage_handle: Optional[StorageHandle] = None
    locale: Optional[str] = None
    questions: List[Dict[str, str]] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "deliveryId": self.delivery_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "resumeText": self.resume_text,
            "storageHandle": self.storage_handle.storage_id if self.storage_handle else None,
            "externalJobId": self.external_job_id,
            "externalJobTitle": self.external_job_title,
            "truncatedRawPayload": self.truncated_raw_payload,
            "receivedAt": self.received_at.isoformat(),
            "locale": self.locale,
            "questions": self.questions,
        }


@dataclass(frozen=True)
class ProcessingResult:
    application_id: str
    status: str


@dataclass(frozen=True)
class WebhookLogEntry:
    delivery_id: str
    received_at: datetime
    applicant_name: str
    applicant_email: str
    status: str
    external_job_id: Optional[str] = None
    external_job_title: Optional[str] = None
    application_id: Optional[str] = None
    error_message: Optional[str] = None
    raw_payload: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "delivery_id": self.delivery_id,
            "received_at": self.received_at.isoformat(),
            "applicant_name": self.applicant_name,
            "applicant_email": self.applicant_email,
            "external_job_id": self.external_job_id or None,
            "external_job_title": self.external_job_title or None,
            "status": self.status,
            "application_id": self.application_id,
            "error_message": self.error_message,
            "raw_payload": self.raw_payload,
        }


@dataclass
class IntakeResult:
    success: bool
    status: str
    application_id: Optional[str] = None
    error: Optional[str] = None
    message: str = ""
