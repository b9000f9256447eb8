"""
Job Mapping Service

Operator-maintained links from a job board's job ids to internal job records.
The matching service reads these through `GET /job-mappings/{external_job_id}`;
when no active mapping exists it falls back to the external title as free text.
"""

import uuid
from typing import Any, Dict, List, Optional

from supabase import Client

from app.db.supabase import is_unique_violation
from app.utils.datetime_utils import get_now_utc
from app.utils.exceptions import AgentError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class JobMappingService:
    """Service for external → internal job mappings (table `job_mappings`)"""

    TABLE = "job_mappings"

    def __init__(self, client: Client):
        self.client = client

    def resolve(self, external_job_id: str) -> Optional[Dict[str, Any]]:
        """
        Look up the active mapping for an external job id.

        Returns:
            Mapping row, or None if the id is empty, unmapped or inactive
        """
        if not external_job_id:
            return None
        mapping = self.get_by_external_id(external_job_id)
        if not mapping or not mapping.get("is_active", True):
            return None
        return mapping

    def get_by_external_id(self, external_job_id: str) -> Optional[Dict[str, Any]]:
        response = self.client.table(self.TABLE).select("*").eq("external_job_id", external_job_id).limit(1).execute()
        return response.data[0] if response.data else None

    def list_all(self) -> List[Dict[str, Any]]:
        response = self.client.table(self.TABLE).select("*").order("created_at", desc=True).execute()
        return response.data or []

    def upsert(
        self,
        external_job_id: str,
        external_job_title: str,
        internal_job_id: str,
        internal_job_title: str,
        location: Optional[str] = None,
        is_active: bool = True,
    ) -> Dict[str, Any]:
        """
        Create or update the mapping for an external job id.

        Raises:
            AgentError: If the write fails
        """
        fields = {
            "external_job_title": external_job_title,
            "internal_job_id": internal_job_id,
            "internal_job_title": internal_job_title,
            "location": location,
            "is_active": is_active,
        }
        try:
            existing = self.get_by_external_id(external_job_id)
            if existing:
                response = self.client.table(self.TABLE).update(fields).eq("id", existing["id"]).execute()
                logger.info(f"[JobMappingService] Updated mapping {external_job_id} -> {internal_job_id}")
                return response.data[0] if response.data else {**existing, **fields}

            row = {
                "id": str(uuid.uuid4()),
                "external_job_id": external_job_id,
                "created_at": get_now_utc().isoformat(),
                **fields,
            }
            try:
                self.client.table(self.TABLE).insert(row).execute()
            except Exception as e:
                if not is_unique_violation(e):
                    raise
                # Lost a race with a concurrent upsert of the same external id
                response = self.client.table(self.TABLE).update(fields).eq("external_job_id", external_job_id).execute()
                return response.data[0] if response.data else row
            logger.info(f"[JobMappingService] Created mapping {external_job_id} -> {internal_job_id}")
            return row
        except Exception as e:
            logger.error(f"[JobMappingService] Error saving mapping {external_job_id}: {e}")
            raise AgentError(f"Failed to save job mapping: {str(e)}", "JobMappingService")

    def delete(self, mapping_id: str) -> bool:
        response = self.client.table(self.TABLE).delete().eq("id", mapping_id).execute()
        deleted = bool(response.data)
        if deleted:
            logger.info(f"[JobMappingService] Deleted mapping {mapping_id}")
        return deleted
