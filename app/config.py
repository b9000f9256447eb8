"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env in backend directory (resolve to absolute path)
_backend_root = Path(__file__).resolve().parent.parent
_env_path = _backend_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    load_dotenv()


@dataclass
class SupabaseConfig:
    """Supabase database and storage configuration"""
    url: str
    service_role_key: str
    resume_bucket: str = "resumes"


@dataclass
class WebhookConfig:
    """Inbound job-board webhook configuration"""
    # Empty secret means signatures are not enforced (open mode)
    secret: Optional[str] = None
    signature_header: str = "X-Signature"
    max_raw_payload_chars: int = 10000


@dataclass
class MatchingConfig:
    """Downstream matching/scoring service configuration"""
    url: str = ""
    api_key: Optional[str] = None
    timeout_seconds: float = 60.0


@dataclass
class StorageConfig:
    """Resume upload configuration"""
    upload_timeout_seconds: float = 15.0


@dataclass
class ApiKeyConfig:
    """Operator endpoint API key configuration"""
    key_hash: Optional[str] = None


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 8000
    frontend_url: str = ""


@dataclass
class Config:
    """Main application configuration"""

    # Supabase configuration (tables + resume storage)
    supabase: SupabaseConfig

    # Webhook intake
    webhook: WebhookConfig = field(default_factory=WebhookConfig)

    # Matching service
    matching: MatchingConfig = field(default_factory=MatchingConfig)

    # Resume storage
    storage: StorageConfig = field(default_factory=StorageConfig)

    # Operator API key
    api_key: ApiKeyConfig = field(default_factory=ApiKeyConfig)

    # Server configuration
    server: ServerConfig = field(default_factory=ServerConfig)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If required environment variables are missing
        """
        supabase_url = os.getenv("SUPABASE_URL")
        supabase_key = os.getenv("SUPABASE_SERVICE_KEY")

        if not supabase_url:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not supabase_key:
            raise ValueError("SUPABASE_SERVICE_KEY environment variable is required")

        # INDEED_API_SECRET kept as an alias for existing deployments
        webhook_secret = os.getenv("WEBHOOK_SECRET") or os.getenv("INDEED_API_SECRET") or None

        return cls(
            supabase=SupabaseConfig(
                url=supabase_url,
                service_role_key=supabase_key,
                resume_bucket=os.getenv("SUPABASE_RESUME_BUCKET", "resumes"),
            ),
            webhook=WebhookConfig(
                secret=webhook_secret,
                signature_header=os.getenv("WEBHOOK_SIGNATURE_HEADER", "X-Signature"),
                max_raw_payload_chars=int(os.getenv("WEBHOOK_MAX_RAW_PAYLOAD_CHARS", "10000")),
            ),
            matching=MatchingConfig(
                url=os.getenv("MATCHING_SERVICE_URL", "").rstrip("/"),
                api_key=os.getenv("MATCHING_SERVICE_API_KEY") or None,
                timeout_seconds=float(os.getenv("MATCHING_TIMEOUT_SECONDS", "60")),
            ),
            storage=StorageConfig(
                upload_timeout_seconds=float(os.getenv("RESUME_UPLOAD_TIMEOUT_SECONDS", "15")),
            ),
            api_key=ApiKeyConfig(
                key_hash=os.getenv("API_KEY_HASH") or None,
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
                frontend_url=os.getenv("FRONTEND_URL", ""),
            ),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
