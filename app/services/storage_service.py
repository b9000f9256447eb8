"""
Resume Storage Service

Uploads original resume files to Supabase Storage. Storage is best-effort:
a failed upload means the application is created text-only.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import Optional

import httpx
from supabase import Client

from app.schemas.intake import StorageHandle
from app.utils.exceptions import StorageError
from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadDestination:
    url: str
    storage_id: str


class SupabaseObjectStore:
    """Signed-upload-URL flow against a Supabase Storage bucket"""

    def __init__(self, client: Client, bucket: str, http_client: Optional[httpx.AsyncClient] = None):
        self.client = client
        self.bucket = bucket
        self.http_client = http_client

    def request_upload_destination(self, file_name: str) -> UploadDestination:
        """Reserve an object path and get a one-time upload URL for it."""
        safe_name = "".join(c if c.isalnum() or c in "._-" else "_" for c in file_name) or "resume.pdf"
        path = f"intake/{int(time.time())}_{uuid.uuid4().hex[:8]}_{safe_name}"
        response = self.client.storage.from_(self.bucket).create_signed_upload_url(path)
        if not isinstance(response, dict):
            raise StorageError(f"Unexpected signed upload response for {path}", "SupabaseObjectStore")
        url = response.get("signed_url") or response.get("signedUrl")
        if not url:
            raise StorageError(f"No upload URL returned for {path}", "SupabaseObjectStore")
        return UploadDestination(url=url, storage_id=response.get("path") or path)

    async def upload(self, destination: UploadDestination, raw_bytes: bytes, content_type: str) -> str:
        """PUT the bytes to the signed URL. Returns the storage id."""
        headers = {"content-type": content_type, "x-upsert": "false"}
        if self.http_client is not None:
            response = await self.http_client.put(destination.url, content=raw_bytes, headers=headers)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.put(destination.url, content=raw_bytes, headers=headers)

        if response.status_code >= 400:
            raise StorageError(
                f"Upload rejected with HTTP {response.status_code}: {response.text[:200]}",
                "SupabaseObjectStore",
            )
        return destination.storage_id


class ResumeStorer:
    """Best-effort resume upload; every failure degrades to 'no file stored'."""

    def __init__(self, object_store, timeout_seconds: float = 15.0):
        self.object_store = object_store
        self.timeout_seconds = timeout_seconds

    async def store(self, raw_bytes: Optional[bytes], content_type: str, file_name: str = "resume.pdf") -> Optional[StorageHandle]:
        if not raw_bytes:
            return None
        try:
            storage_id = await asyncio.wait_for(
                self._upload(raw_bytes, content_type, file_name),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"[ResumeStorer] Upload timed out after {self.timeout_seconds}s; continuing without file")
            return None
        except Exception as e:
            logger.error(f"[ResumeStorer] Failed to upload resume to storage: {e}; continuing without file")
            return None

        logger.info(f"[ResumeStorer] Resume uploaded to storage: {storage_id}")
        return StorageHandle(storage_id=storage_id)

    async def _upload(self, raw_bytes: bytes, content_type: str, file_name: str) -> str:
        # Supabase client is synchronous; keep it off the event loop so the timeout applies
        destination = await asyncio.to_thread(self.object_store.request_upload_destination, file_name)
        return await self.object_store.upload(destination, raw_bytes, content_type)
