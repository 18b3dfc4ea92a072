"""
Inbound webhook values.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WebhookEvent:
    """A single inbound Shopify webhook, built per request."""

    topic: str
    raw_body: bytes
    signature_header: Optional[str] = None


@dataclass(frozen=True)
class IdentityHint:
    """
    Identity extracted from a webhook payload.

    Neither field is trusted until the resolver has confirmed it against
    Shopify.
    """

    email: Optional[str] = None
    source_customer_id: Optional[str] = None

    @classmethod
    def build(cls, email=None, customer_id=None) -> 'IdentityHint':
        """Normalize casing/whitespace and drop empty values."""
        email = str(email).strip().lower() if email else ''
        customer_id = str(customer_id).strip() if customer_id is not None else ''
        return cls(email=email or None, source_customer_id=customer_id or None)


@dataclass(frozen=True)
class ResolvedIdentity:
    """Email and Shopify customer id after lookups."""

    email: Optional[str]
    customer_id: Optional[str]

    @property
    def is_complete(self) -> bool:
        return bool(self.email and self.customer_id)
