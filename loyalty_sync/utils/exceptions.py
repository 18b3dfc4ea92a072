"""
Custom exceptions for the loyalty sync pipeline.

Each exception carries a machine-readable code alongside the message so the
webhook handler can map it to the right HTTP status without string matching.
"""
from typing import Optional


class LoyaltySyncError(Exception):
    """Base exception for all loyalty sync errors."""

    def __init__(self, message: str, code: str = "LOYALTY_SYNC_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class MissingIdentityError(LoyaltySyncError):
    """No usable email/customer id could be established for a webhook."""

    def __init__(self, topic: str, message: str = "Missing email or customerId after lookup"):
        self.topic = topic
        super().__init__(message, "MISSING_IDENTITY")


class CollaboratorError(LoyaltySyncError):
    """Non-2xx response or transport fault from an external system."""

    service = "External service"

    def __init__(
        self,
        operation: str,
        status_code: Optional[int] = None,
        body: str = '',
        original_error: Exception = None
    ):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        self.original_error = original_error

        if status_code is not None:
            message = f"{self.service} {operation} failed: {status_code} {body}".rstrip()
        else:
            message = f"{self.service} {operation} failed: {original_error}"
        super().__init__(message, f"{self.service.upper()}_ERROR")


class ShopifyError(CollaboratorError):
    """Error communicating with the Shopify Admin API."""

    service = "Shopify"


class HubSpotError(CollaboratorError):
    """Error communicating with the HubSpot CRM API."""

    service = "HubSpot"


class ConfigurationError(LoyaltySyncError):
    """Application configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")
