"""
Loyalty sync pipeline services.
"""
from .shopify_client import ShopifyClient
from .hubspot_client import HubSpotClient
from .identity_resolver import IdentityResolver
from .loyalty_fetcher import LoyaltyFetcher
from .loyalty_normalizer import normalize
from .contact_reconciler import ContactReconciler
from .webhook_dispatcher import WebhookDispatcher, DispatchOutcome, DispatchState

__all__ = [
    'ShopifyClient',
    'HubSpotClient',
    'IdentityResolver',
    'LoyaltyFetcher',
    'normalize',
    'ContactReconciler',
    'WebhookDispatcher',
    'DispatchOutcome',
    'DispatchState',
]
