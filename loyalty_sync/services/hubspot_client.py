"""
HubSpot CRM integration.

Contact search, creation and partial property updates against the CRM v3
objects API.

API Documentation: https://developers.hubspot.com/docs/api/crm/contacts
"""
import logging
import requests
from typing import Dict, Any, List

from ..utils.exceptions import HubSpotError

logger = logging.getLogger(__name__)


class HubSpotClient:
    """
    HubSpot contacts API client.

    Every call raises HubSpotError on a non-2xx response or transport fault;
    nothing is retried here.
    """

    BASE_URL = "https://api.hubapi.com"

    def __init__(
        self,
        access_token: str,
        base_url: str = None,
        search_limit: int = 20,
        timeout: float = 15.0
    ):
        self.access_token = access_token
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.search_limit = search_limit
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> 'HubSpotClient':
        return cls(
            settings.hubspot_token,
            base_url=settings.hubspot_base_url,
            search_limit=settings.hubspot_search_limit,
            timeout=settings.http_timeout
        )

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json"
        }

    def _request(self, operation: str, method: str, path: str, payload: Dict) -> requests.Response:
        try:
            response = requests.request(
                method,
                f"{self.base_url}{path}",
                headers=self._get_headers(),
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise HubSpotError(operation, original_error=e) from e

        if not response.ok:
            raise HubSpotError(operation, response.status_code, response.text)
        return response

    def search_contact_ids_by_email(self, email: str) -> List[str]:
        """
        Find every contact whose email property equals `email`.

        Args:
            email: Lower-cased email

        Returns:
            Contact ids, most recently created first
        """
        payload = {
            "filterGroups": [
                {"filters": [{"propertyName": "email", "operator": "EQ", "value": email}]}
            ],
            "properties": ["email", "createdate"],
            "sorts": [{"propertyName": "createdate", "direction": "DESCENDING"}],
            "limit": self.search_limit
        }

        response = self._request('search', 'POST', '/crm/v3/objects/contacts/search', payload)
        results = response.json().get('results') or []
        return [str(r['id']) for r in results if r.get('id') is not None]

    def create_contact(self, email: str) -> str:
        """Create a contact with only its email set. Returns the new id."""
        response = self._request(
            'create', 'POST', '/crm/v3/objects/contacts',
            {"properties": {"email": email}}
        )
        contact_id = str(response.json()['id'])
        logger.info(f"Created HubSpot contact {contact_id} for {email}")
        return contact_id

    def update_contact(self, contact_id: str, properties: Dict[str, Any]) -> None:
        """
        Partially update a contact.

        Only the given properties are sent; HubSpot leaves the rest alone.
        """
        self._request(
            'patch', 'PATCH', f'/crm/v3/objects/contacts/{contact_id}',
            {"properties": properties}
        )
