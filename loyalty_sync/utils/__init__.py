"""
Utility modules for loyalty sync.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_body,
    error_response,
    unauthorized,
    internal_error
)
from .exceptions import (
    LoyaltySyncError,
    MissingIdentityError,
    CollaboratorError,
    ShopifyError,
    HubSpotError,
    ConfigurationError
)
