"""
Shared fixtures for loyalty sync tests.

Shopify and HubSpot are replaced with MagicMocks specced on the real clients,
so pipeline tests exercise the real resolver/fetcher/normalizer/reconciler.
"""
import base64
import hashlib
import hmac
import pytest
from unittest.mock import MagicMock

from loyalty_sync import create_app
from loyalty_sync.models import MetafieldLookup
from loyalty_sync.services import (
    ShopifyClient,
    HubSpotClient,
    IdentityResolver,
    LoyaltyFetcher,
    ContactReconciler,
    WebhookDispatcher,
)

WEBHOOK_SECRET = 'test_webhook_secret'


def generate_hmac_signature(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    """Generate Shopify-compatible HMAC signature."""
    return base64.b64encode(
        hmac.new(secret.encode('utf-8'), payload, hashlib.sha256).digest()
    ).decode('utf-8')


def metafield(data: dict, raw: str = 'stored') -> MetafieldLookup:
    """A found metafield lookup."""
    return MetafieldLookup(data=data, raw=raw)


@pytest.fixture
def shopify():
    mock = MagicMock(spec=ShopifyClient)
    mock.get_customer_email.return_value = None
    mock.find_customer_id_by_email.return_value = None
    mock.get_loyalty_metafield.return_value = MetafieldLookup(not_found=True)
    return mock


@pytest.fixture
def hubspot():
    mock = MagicMock(spec=HubSpotClient)
    mock.search_contact_ids_by_email.return_value = []
    mock.create_contact.return_value = '501'
    mock.update_contact.return_value = None
    return mock


@pytest.fixture
def dispatcher(shopify, hubspot):
    return WebhookDispatcher(
        resolver=IdentityResolver(shopify),
        fetcher=LoyaltyFetcher(shopify),
        reconciler=ContactReconciler(hubspot),
    )


@pytest.fixture
def app(dispatcher):
    app = create_app('testing', dispatcher=dispatcher)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
