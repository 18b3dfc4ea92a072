"""
Identity resolution.

Webhook payloads carry an email, a customer id, both or neither. Whatever is
missing is re-derived from Shopify so the pipeline works with a pair that
refers to the same customer.
"""
import logging

from ..models import IdentityHint, ResolvedIdentity
from ..utils.exceptions import MissingIdentityError

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Confirms (email, customer id) for a webhook using read-only lookups."""

    def __init__(self, shopify_client):
        self.shopify = shopify_client

    def resolve(self, hint: IdentityHint, topic: str = '') -> ResolvedIdentity:
        """
        Fill in whichever half of the identity is missing.

        Args:
            hint: Identity extracted from the payload (email already lower-cased)
            topic: Webhook topic, carried on the error for diagnostics

        Returns:
            ResolvedIdentity; one side may still be None if Shopify had no match

        Raises:
            MissingIdentityError: Neither email nor id could be established
        """
        email = hint.email
        customer_id = hint.source_customer_id

        if customer_id and not email:
            email = self.shopify.get_customer_email(customer_id)
            if email:
                logger.info(f"Resolved email for customer {customer_id}")

        if email and not customer_id:
            customer_id = self.shopify.find_customer_id_by_email(email)
            if customer_id:
                logger.info(f"Resolved customer {customer_id} from email search")

        if not email and not customer_id:
            raise MissingIdentityError(topic)

        return ResolvedIdentity(email=email.lower() if email else None, customer_id=customer_id)
