"""
Watson Work Transport - Error Taxonomy

Every failure in the pipeline is one of these.
Only AuthenticationError ever reaches the webhook caller (as 401).
"""

from typing import Optional


class CompanyInfoError(Exception):
    """Base class for company info pipeline errors."""
    pass


class AuthenticationError(CompanyInfoError):
    """Webhook signature missing or invalid."""
    pass


class StartupError(CompanyInfoError):
    """Service cannot come up (bad config, OAuth token unavailable)."""
    pass


class ServiceError(CompanyInfoError):
    """Downstream HTTP call returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(CompanyInfoError):
    """Network-level failure talking to a downstream service."""
    pass
