"""
Job-board webhook Pydantic schemas.

The sender's payload is loosely shaped: every field is optional and unknown
fields are ignored. Field names follow the sender's JSON (camelCase).
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class _SenderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class ResumeFile(_SenderModel):
    contentType: Optional[str] = None
    fileName: Optional[str] = None
    data: Optional[str] = Field(None, description="Base64 encoded file bytes")


class ApplicantResume(_SenderModel):
    file: Optional[ResumeFile] = None
    # Job-board profile resume, already extracted by the sender
    html: Optional[str] = None
    text: Optional[str] = None


class Applicant(_SenderModel):
    fullName: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    resume: Optional[ApplicantResume] = None


class JobDescriptor(_SenderModel):
    jobId: Optional[str] = None
    jobTitle: Optional[str] = None
    jobCompanyName: Optional[str] = None
    jobLocation: Optional[str] = None


class ScreeningAnswer(_SenderModel):
    question: Optional[str] = None
    answer: Optional[str] = None


class IncomingApplicationPayload(_SenderModel):
    id: Optional[str] = Field(None, description="External delivery id (idempotency key)")
    locale: Optional[str] = None
    job: Optional[JobDescriptor] = None
    applicant: Optional[Applicant] = None
    questions: List[ScreeningAnswer] = Field(default_factory=list)

    @field_validator("questions", mode="before")
    @classmethod
    def _lenient_questions(cls, value: Any) -> List[ScreeningAnswer]:
        # Screening answers are extra data: bad items are dropped, never fatal
        if not isinstance(value, list):
            return []
        answers = []
        for item in value:
            if not isinstance(item, dict):
                continue
            item = dict(item)
            if isinstance(item.get("answer"), list):
                item["answer"] = ", ".join(str(part) for part in item["answer"] if part is not None)
            try:
                answers.append(ScreeningAnswer.model_validate(item))
            except ValidationError:
                continue
        return answers

    @property
    def delivery_id(self) -> str:
        return (self.id or "").strip()

    @property
    def resume_file(self) -> Optional[ResumeFile]:
        if self.applicant and self.applicant.resume:
            return self.applicant.resume.file
        return None

    @property
    def resume_text(self) -> Optional[str]:
        if self.applicant and self.applicant.resume:
            return self.applicant.resume.text
        return None

    @property
    def resume_html(self) -> Optional[str]:
        if self.applicant and self.applicant.resume:
            return self.applicant.resume.html
        return None


class WebhookResponse(BaseModel):
    success: bool
    applicationId: Optional[str] = None
    status: Optional[str] = None
    error: Optional[str] = None


class WebhookDescription(BaseModel):
    status: str
    endpoint: str
    method: str
    description: str


__all__ = [
    "ResumeFile",
    "ApplicantResume",
    "Applicant",
    "JobDescriptor",
    "ScreeningAnswer",
    "IncomingApplicationPayload",
    "WebhookResponse",
    "WebhookDescription",
]
