"""
Delivery Claim Service

Makes "has this delivery already been processed?" atomic. Each external
delivery id is claimed by inserting a row into `intake_claims`, whose
`delivery_id` column carries a UNIQUE constraint. The insert that wins
processes the delivery; every other insert hits the constraint and is
answered as a duplicate of the winner.
"""

import uuid
from typing import Optional

from supabase import Client

from app.db.supabase import is_unique_violation
from app.schemas.intake import DeliveryClaim
from app.utils.datetime_utils import get_now_utc
from app.utils.logger import get_logger

logger = get_logger(__name__)


class DeliveryClaimService:
    """Service for per-delivery claims backed by a UNIQUE constraint"""

    TABLE = "intake_claims"

    def __init__(self, client: Client):
        self.client = client

    def claim(self, delivery_id: str) -> DeliveryClaim:
        """
        Claim a delivery id.

        Returns:
            DeliveryClaim with created=True if this call owns the delivery,
            created=False (and the winner's application id, if already known)
            if another request claimed it first

        Raises:
            Whatever the Supabase client raises for errors other than the
            UNIQUE constraint
        """
        row = {
            "id": str(uuid.uuid4()),
            "delivery_id": delivery_id,
            "application_id": None,
            "created_at": get_now_utc().isoformat(),
        }
        try:
            self.client.table(self.TABLE).insert(row).execute()
            return DeliveryClaim(delivery_id=delivery_id, created=True)
        except Exception as e:
            if not is_unique_violation(e):
                raise

        existing = self.get(delivery_id)
        logger.info(f"[DeliveryClaim] Delivery {delivery_id} already claimed")
        return DeliveryClaim(
            delivery_id=delivery_id,
            application_id=(existing or {}).get("application_id"),
            created=False,
        )

    def get(self, delivery_id: str) -> Optional[dict]:
        response = self.client.table(self.TABLE).select("*").eq("delivery_id", delivery_id).limit(1).execute()
        return response.data[0] if response.data else None

    def complete(self, delivery_id: str, application_id: str) -> None:
        """Record the application created for a claimed delivery."""
        self.client.table(self.TABLE).update({"application_id": application_id}).eq("delivery_id", delivery_id).execute()

    def release(self, delivery_id: str) -> None:
        """Drop a claim whose processing failed so a replay can try again."""
        try:
            self.client.table(self.TABLE).delete().eq("delivery_id", delivery_id).execute()
        except Exception as e:
            logger.error(f"[DeliveryClaim] Failed to release claim for {delivery_id}: {e}")
