"""
Webhook Log Service

Append-only log of every job-board delivery attempt (success, duplicate or
error), stored in the Supabase `webhook_logs` table. Writes never raise:
the intake response must not depend on the log being writable.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from app.schemas.intake import STATUS_DUPLICATE, STATUS_ERROR, STATUS_SUCCESS, WebhookLogEntry
from app.utils.datetime_utils import get_now_utc, hours_ago, to_epoch_ms
from app.utils.logger import get_logger

logger = get_logger(__name__)


class WebhookLogService:
    """Service for the webhook audit log"""

    TABLE = "webhook_logs"

    def __init__(self, client: Client):
        self.client = client

    def append(self, entry: WebhookLogEntry) -> Optional[str]:
        """
        Insert one log entry.

        Returns:
            The new row id, or None if the write failed
        """
        try:
            row = entry.to_row()
            row["id"] = str(uuid.uuid4())
            self.client.table(self.TABLE).insert(row).execute()
            logger.debug(f"[WebhookLog] {entry.status} logged for delivery {entry.delivery_id}")
            return row["id"]
        except Exception as e:
            logger.error(f"[WebhookLog] Failed to write log entry for {entry.delivery_id}: {e}", exc_info=True)
            return None

    def log_unparsed_error(self, error_message: str, received_at=None) -> Optional[str]:
        """Log a delivery whose body could not be decoded (no delivery id available)."""
        received_at = received_at or get_now_utc()
        return self.append(WebhookLogEntry(
            delivery_id=f"error-{to_epoch_ms(received_at)}",
            received_at=received_at,
            applicant_name="Unknown",
            applicant_email="",
            status=STATUS_ERROR,
            error_message=error_message,
        ))

    def get_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Most recent entries first."""
        response = self.client.table(self.TABLE).select("*").order("received_at", desc=True).limit(limit).execute()
        return response.data or []

    def get_by_delivery_id(self, delivery_id: str) -> Optional[Dict[str, Any]]:
        """First log entry written for a delivery id."""
        response = (
            self.client.table(self.TABLE)
            .select("*")
            .eq("delivery_id", delivery_id)
            .order("received_at")
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def count(self, status: Optional[str] = None, since: Optional[datetime] = None) -> int:
        """Server-side row count, optionally filtered by status and receipt time."""
        query = self.client.table(self.TABLE).select("id", count="exact")
        if status:
            query = query.eq("status", status)
        if since:
            query = query.gte("received_at", since.isoformat())
        response = query.execute()
        return response.count if response.count is not None else 0

    def get_stats(self) -> Dict[str, int]:
        """Counts by status plus deliveries received in the trailing 24 hours."""
        return {
            "total": self.count(),
            "success": self.count(status=STATUS_SUCCESS),
            "duplicate": self.count(status=STATUS_DUPLICATE),
            "error": self.count(status=STATUS_ERROR),
            "last24Hours": self.count(since=hours_ago(24)),
        }
