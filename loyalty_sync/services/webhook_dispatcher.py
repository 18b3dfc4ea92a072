"""
Webhook dispatcher.

Classifies a Shopify webhook by topic family, pulls identity hints out of the
payload and runs the sync pipeline:

    Received -> Classified -> IdentityResolved -> LoyaltyFetched
             -> Normalized -> Reconciled -> Responded

with early exits to Ignored (topic we do not handle) and Failed.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..models import IdentityHint, WebhookEvent, DuplicatePolicy
from ..utils.errors import ErrorCode, error_body
from ..utils.exceptions import MissingIdentityError
from .contact_reconciler import ContactReconciler
from .hubspot_client import HubSpotClient
from .identity_resolver import IdentityResolver
from .loyalty_fetcher import LoyaltyFetcher
from .loyalty_normalizer import normalize
from .shopify_client import ShopifyClient

logger = logging.getLogger(__name__)

CUSTOMERS_FAMILY = 'customers'
ORDERS_FAMILY = 'orders'

TOPIC_FAMILIES = {
    'customers/': CUSTOMERS_FAMILY,
    'orders/': ORDERS_FAMILY,
}


class DispatchState(str, Enum):
    RECEIVED = 'received'
    CLASSIFIED = 'classified'
    IDENTITY_RESOLVED = 'identity_resolved'
    LOYALTY_FETCHED = 'loyalty_fetched'
    NORMALIZED = 'normalized'
    RECONCILED = 'reconciled'
    RESPONDED = 'responded'
    IGNORED = 'ignored'
    FAILED = 'failed'


@dataclass
class DispatchOutcome:
    """Final state plus the HTTP status and JSON body to send back."""

    state: DispatchState
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


def classify_topic(topic: str) -> Optional[str]:
    """Map a topic such as 'orders/paid' to its family, or None if unhandled."""
    for prefix, family in TOPIC_FAMILIES.items():
        if topic.startswith(prefix):
            return family
    return None


def parse_payload(raw_body) -> Dict[str, Any]:
    """Decode the webhook body. Anything but a JSON object becomes {}."""
    if isinstance(raw_body, bytes):
        try:
            raw_body = raw_body.decode('utf-8')
        except UnicodeDecodeError:
            return {}
    try:
        payload = json.loads(raw_body or '')
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def extract_identity_hint(family: str, payload: Dict[str, Any]) -> IdentityHint:
    """
    Pull email/customer id from a payload.

    customers/*: flat customer object with id/email.
    orders/*: nested customer object; the order's own email is preferred over
    customer.email.
    """
    if family == CUSTOMERS_FAMILY:
        return IdentityHint.build(email=payload.get('email'), customer_id=payload.get('id'))

    customer = payload.get('customer')
    if not isinstance(customer, dict):
        customer = {}
    return IdentityHint.build(
        email=payload.get('email') or customer.get('email'),
        customer_id=customer.get('id')
    )


class WebhookDispatcher:
    """Runs the resolve -> fetch -> normalize -> reconcile pipeline."""

    def __init__(
        self,
        resolver: IdentityResolver,
        fetcher: LoyaltyFetcher,
        reconciler: ContactReconciler,
        normalizer: Callable = normalize
    ):
        self.resolver = resolver
        self.fetcher = fetcher
        self.reconciler = reconciler
        self.normalizer = normalizer

    @classmethod
    def from_settings(cls, settings) -> 'WebhookDispatcher':
        """Wire up the default Shopify/HubSpot collaborators."""
        shopify = ShopifyClient.from_settings(settings)
        hubspot = HubSpotClient.from_settings(settings)
        return cls(
            resolver=IdentityResolver(shopify),
            fetcher=LoyaltyFetcher(shopify),
            reconciler=ContactReconciler(hubspot, DuplicatePolicy(settings.duplicate_policy)),
        )

    def dispatch(self, event: WebhookEvent, debug: bool = False) -> DispatchOutcome:
        """
        Handle an authenticated webhook.

        Unhandled topics are acknowledged with 200 so Shopify does not retry
        them. Collaborator failures are not caught here.
        """
        topic = event.topic
        logger.debug(f"[{DispatchState.RECEIVED.value}] topic={topic}")

        family = classify_topic(topic)
        if family is None:
            logger.info(f"Ignoring webhook topic {topic!r}")
            return DispatchOutcome(DispatchState.IGNORED, 200, {'ignored': True, 'topic': topic})

        logger.debug(f"[{DispatchState.CLASSIFIED.value}] family={family}")
        hint = extract_identity_hint(family, parse_payload(event.raw_body))
        return self.sync(hint, topic, debug=debug)

    def sync(self, hint: IdentityHint, topic: str, debug: bool = False) -> DispatchOutcome:
        """
        Run the pipeline for one identity hint.

        Also used by the CLI to resync a customer without a webhook.
        """
        try:
            identity = self.resolver.resolve(hint, topic)
            if not identity.is_complete:
                raise MissingIdentityError(topic)
        except MissingIdentityError as e:
            logger.warning(f"Could not resolve identity for {topic}: {e.message}")
            return DispatchOutcome(
                DispatchState.FAILED,
                400,
                error_body(e.message, ErrorCode.MISSING_IDENTITY, topic=e.topic)
            )
        logger.debug(f"[{DispatchState.IDENTITY_RESOLVED.value}] customer={identity.customer_id}")

        fetched = self.fetcher.fetch(identity.customer_id, identity.email)
        logger.debug(f"[{DispatchState.LOYALTY_FETCHED.value}] found={fetched.found}")

        profile = self.normalizer(fetched.raw)
        logger.debug(f"[{DispatchState.NORMALIZED.value}] {profile}")

        result = self.reconciler.reconcile(identity.email, profile.to_crm_properties())
        logger.debug(f"[{DispatchState.RECONCILED.value}] {result.action.value}")
        logger.info(
            f"Synced loyalty for {identity.email} ({topic}): {result.action.value} {result.contact_ids}"
        )

        body = {'ok': True}
        body.update(result.to_dict())
        body.update({
            'email': identity.email,
            'topic': topic,
            'loyalty': profile.to_dict(),
        })
        if debug:
            body['debug'] = {
                'usedCustomerId': fetched.used_customer_id,
                'metafield': fetched.metafield,
                'parsed': fetched.raw,
            }

        return DispatchOutcome(DispatchState.RESPONDED, 200, body)
