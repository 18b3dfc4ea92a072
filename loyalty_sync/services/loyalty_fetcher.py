"""
Loyalty metafield fetch with a single email-based fallback.

Webhook payloads sometimes carry the id of a customer record that Shopify has
since merged away. When the metafield read reports not-found, the customer is
looked up again by email and the read is retried once with that id.
"""
import logging
from typing import Optional

from ..models import LoyaltyFetchResult

logger = logging.getLogger(__name__)


class LoyaltyFetcher:
    """Reads the raw loyalty record for a confirmed customer."""

    def __init__(self, shopify_client):
        self.shopify = shopify_client

    def fetch(self, customer_id: Optional[str], email: Optional[str] = None) -> LoyaltyFetchResult:
        """
        Fetch the raw loyalty record.

        Not-found after the retry is a normal outcome (no loyalty data yet) and
        returns found=False with an empty record. Any other Shopify failure
        propagates as ShopifyError.

        Args:
            customer_id: Shopify customer id from identity resolution
            email: Lower-cased email used for the fallback search

        Returns:
            LoyaltyFetchResult
        """
        used_customer_id = customer_id

        lookup = self.shopify.get_loyalty_metafield(customer_id) if customer_id else None

        if lookup is None or lookup.not_found:
            fallback_id = self.shopify.find_customer_id_by_email(email) if email else None

            if fallback_id and fallback_id != customer_id:
                logger.info(
                    f"Metafield not found for customer {customer_id}, retrying with {fallback_id}"
                )
                used_customer_id = fallback_id
                lookup = self.shopify.get_loyalty_metafield(fallback_id)

        if lookup is None or lookup.not_found:
            logger.info(f"No loyalty record for customer {used_customer_id}")
            return LoyaltyFetchResult(
                found=False,
                raw={},
                used_customer_id=used_customer_id
            )

        return LoyaltyFetchResult(
            found=lookup.has_record,
            raw=lookup.data,
            used_customer_id=used_customer_id,
            metafield=lookup.raw
        )
