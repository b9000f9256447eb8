"""
Service exceptions.

Every error raised by a service carries the component that raised it so the
intake log shows where a delivery failed.
"""

from typing import Optional


class AgentError(Exception):
    """Base error raised by backend services"""

    def __init__(self, message: str, component: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.component = component

    def __str__(self) -> str:
        return self.message


class PayloadError(AgentError):
    """Webhook body could not be decoded into an application payload"""


class StorageError(AgentError):
    """Resume file could not be uploaded"""


class DownstreamError(AgentError):
    """Matching service failed, timed out, or returned an unusable answer"""
