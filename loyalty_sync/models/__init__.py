"""
Request-scoped value objects for the loyalty sync pipeline.
Nothing here is persisted.
"""
from .webhook import WebhookEvent, IdentityHint, ResolvedIdentity
from .loyalty import LoyaltyProfile, MetafieldLookup, LoyaltyFetchResult
from .contact import DuplicatePolicy, ReconcileAction, ReconcileResult

__all__ = [
    'WebhookEvent',
    'IdentityHint',
    'ResolvedIdentity',
    'LoyaltyProfile',
    'MetafieldLookup',
    'LoyaltyFetchResult',
    'DuplicatePolicy',
    'ReconcileAction',
    'ReconcileResult',
]
