"""
Signature Service

Verifies that a webhook body was produced by the job board, using the
HMAC-SHA1 hex digest the sender puts in the signature header.
"""

import hashlib
import hmac
from typing import Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)


class SignatureVerifier:
    """HMAC-SHA1 verification of raw request bodies"""

    ALGORITHM_PREFIX = "sha1="

    def compute(self, raw_body: bytes, secret: str) -> str:
        """Hex digest the sender is expected to send for this body."""
        return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()

    def verify(self, raw_body: bytes, signature_header: Optional[str], secret: Optional[str]) -> bool:
        """
        Check a signature header against the raw body.

        Args:
            raw_body: Exact bytes received on the wire
            signature_header: Header value, optionally prefixed with "sha1="
            secret: Shared secret; None/empty means signatures are not enforced

        Returns:
            True if the body is accepted
        """
        if not secret:
            logger.warning("[SignatureVerifier] Signature verification skipped - no secret configured")
            return True

        if not signature_header:
            logger.warning("[SignatureVerifier] Missing signature header")
            return False

        provided = signature_header.strip()
        if provided.lower().startswith(self.ALGORITHM_PREFIX):
            provided = provided[len(self.ALGORITHM_PREFIX):]

        expected = self.compute(raw_body, secret)
        # compare_digest on bytes also handles non-ascii header values
        return hmac.compare_digest(expected.encode("utf-8"), provided.lower().encode("utf-8"))
