"""
Service container.

Builds every service once from a Config and one Supabase client. The FastAPI
app keeps the container on `app.state`; tests construct one from fakes.
"""

from dataclasses import dataclass

from app.config import Config
from app.db.supabase import create_supabase_client
from app.services.claim_service import DeliveryClaimService
from app.services.intake_service import IntakeService
from app.services.job_mapping_service import JobMappingService
from app.services.matching_client import MatchingClient
from app.services.resume_service import ResumeAcquirer, ResumeService
from app.services.signature_service import SignatureVerifier
from app.services.storage_service import ResumeStorer, SupabaseObjectStore
from app.services.webhook_log_service import WebhookLogService


@dataclass
class ServiceContainer:
    config: Config
    supabase: object
    resume_service: ResumeService
    signature_verifier: SignatureVerifier
    webhook_log_service: WebhookLogService
    job_mapping_service: JobMappingService
    intake_service: IntakeService

    @classmethod
    def from_config(cls, config: Config, supabase=None, object_store=None, matching_client=None) -> "ServiceContainer":
        supabase = supabase if supabase is not None else create_supabase_client(config)
        object_store = object_store if object_store is not None else SupabaseObjectStore(
            supabase, config.supabase.resume_bucket
        )
        matching_client = matching_client if matching_client is not None else MatchingClient(config.matching)

        resume_service = ResumeService()
        webhook_log_service = WebhookLogService(supabase)
        intake_service = IntakeService(
            acquirer=ResumeAcquirer(resume_service),
            storer=ResumeStorer(object_store, timeout_seconds=config.storage.upload_timeout_seconds),
            claims=DeliveryClaimService(supabase),
            matching=matching_client,
            webhook_logs=webhook_log_service,
            max_raw_payload_chars=config.webhook.max_raw_payload_chars,
            matching_timeout_seconds=config.matching.timeout_seconds,
        )
        return cls(
            config=config,
            supabase=supabase,
            resume_service=resume_service,
            signature_verifier=SignatureVerifier(),
            webhook_log_service=webhook_log_service,
            job_mapping_service=JobMappingService(supabase),
            intake_service=intake_service,
        )
