"""
Exception taxonomy for the approvals pipeline.

Every failure is caught at the route boundary and collapsed into the
``useSampleData`` fallback signal, so these types exist to make logs and
tests precise rather than to drive different recoveries.
"""
from typing import Any, Dict, Optional


class RampApprovalsError(Exception):
    """Base exception for all approvals pipeline errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(RampApprovalsError):
    """Raised when Ramp credentials are missing."""
    pass


class AuthenticationError(RampApprovalsError):
    """Raised when the client-credentials token exchange is rejected."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code


class ApiRequestError(RampApprovalsError):
    """Raised when a Ramp resource collection returns a non-2xx status."""

    def __init__(self, message: str, status_code: int, collection: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code
        self.collection = collection
