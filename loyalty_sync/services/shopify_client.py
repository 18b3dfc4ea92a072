"""
Shopify Admin API client.
Read-only customer lookups and loyalty metafield access.
"""
import json
import logging
import httpx
from typing import Optional, Dict, Any

from ..models import MetafieldLookup
from ..utils.exceptions import ShopifyError

logger = logging.getLogger(__name__)


def parse_json_object(value: Any) -> Dict[str, Any]:
    """
    Decode a metafield value into a dict.

    Appstle stores the record as a JSON string; some API versions hand it back
    already decoded. Anything that is not a JSON object becomes {}.
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, (str, bytes)):
        try:
            parsed = json.loads(value)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


class ShopifyClient:
    """
    Client for the Shopify Admin REST API.

    Supports:
    - Customer email lookup by id
    - Customer id lookup by exact email search
    - Loyalty metafield fetch
    """

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = '2024-07',
        namespace: str = 'appstle_loyalty',
        key: str = 'customer_loyalty',
        timeout: float = 15.0,
        transport: httpx.BaseTransport = None
    ):
        self.shop_domain = shop_domain.replace('https://', '').replace('http://', '').rstrip('/')
        self.access_token = access_token
        self.api_version = api_version
        self.namespace = namespace
        self.key = key
        self.timeout = timeout
        self._transport = transport
        self.base_url = f'https://{self.shop_domain}/admin/api/{api_version}'

    @classmethod
    def from_settings(cls, settings, transport: httpx.BaseTransport = None) -> 'ShopifyClient':
        return cls(
            settings.shopify_store,
            settings.shopify_token,
            api_version=settings.shopify_api_version,
            namespace=settings.metafield_namespace,
            key=settings.metafield_key,
            timeout=settings.http_timeout,
            transport=transport
        )

    def _get(self, operation: str, path: str, params: Optional[Dict] = None) -> httpx.Response:
        """Issue a GET. Transport faults (including timeouts) become ShopifyError."""
        headers = {
            'X-Shopify-Access-Token': self.access_token,
            'Content-Type': 'application/json'
        }

        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
                return client.get(f'{self.base_url}{path}', headers=headers, params=params)
        except httpx.HTTPError as e:
            raise ShopifyError(operation, original_error=e) from e

    @staticmethod
    def _raise_for_status(operation: str, response: httpx.Response) -> None:
        if response.status_code >= 400:
            raise ShopifyError(operation, response.status_code, response.text)

    def get_customer_email(self, customer_id: str) -> Optional[str]:
        """
        Look up a customer's email by id.

        Args:
            customer_id: Numeric Shopify customer ID

        Returns:
            Lower-cased email, or None if the customer or email does not exist
        """
        response = self._get('customer fetch', f'/customers/{customer_id}.json')
        if response.status_code == 404:
            return None
        self._raise_for_status('customer fetch', response)

        customer = response.json().get('customer') or {}
        email = (customer.get('email') or '').strip().lower()
        return email or None

    def find_customer_id_by_email(self, email: str) -> Optional[str]:
        """
        Find a customer id with an exact email search.

        Args:
            email: Lower-cased email

        Returns:
            First matching customer id as a string, or None
        """
        response = self._get(
            'customer search',
            '/customers/search.json',
            params={'query': f'email:{email}'}
        )
        if response.status_code == 404:
            return None
        self._raise_for_status('customer search', response)

        customers = response.json().get('customers') or []
        if not customers or customers[0].get('id') is None:
            return None
        return str(customers[0]['id'])

    def get_loyalty_metafield(self, customer_id: str) -> MetafieldLookup:
        """
        Fetch the loyalty metafield for a customer.

        A 404 means the customer id itself is unknown (stale or merged record)
        and is reported as not_found rather than raised.

        Args:
            customer_id: Numeric Shopify customer ID

        Returns:
            MetafieldLookup with decoded data and the raw stored value
        """
        response = self._get(
            'metafield fetch',
            f'/customers/{customer_id}/metafields.json',
            params={'namespace': self.namespace, 'key': self.key}
        )
        if response.status_code == 404:
            return MetafieldLookup(not_found=True)
        self._raise_for_status('metafield fetch', response)

        metafields = response.json().get('metafields') or []
        value = metafields[0].get('value') if metafields else None
        if not value:
            return MetafieldLookup(data={}, raw=None)

        return MetafieldLookup(data=parse_json_object(value), raw=value)
