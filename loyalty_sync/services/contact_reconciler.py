"""
CRM contact reconciliation.

Upserts loyalty properties onto every HubSpot contact that shares the
customer's email. Duplicate contacts are tolerated, never merged.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List

from ..models import DuplicatePolicy, ReconcileAction, ReconcileResult

logger = logging.getLogger(__name__)


class ContactReconciler:
    """
    Applies an upsert policy to the contacts matching one email.

    - No match: create a contact, then write the properties
    - One match: write the properties
    - Several matches: write all of them concurrently (UPDATE_ALL) or only
      the newest (UPDATE_NEWEST)
    """

    MAX_WORKERS = 8

    def __init__(self, hubspot_client, policy: DuplicatePolicy = DuplicatePolicy.UPDATE_ALL):
        self.hubspot = hubspot_client
        self.policy = DuplicatePolicy(policy)

    def reconcile(self, email: str, properties: Dict[str, Any]) -> ReconcileResult:
        """
        Upsert properties for an email.

        Any failed write raises, including a single failure among concurrent
        duplicate updates.

        Args:
            email: Lower-cased email (HubSpot matches it exactly as stored)
            properties: Loyalty properties to write

        Returns:
            ReconcileResult describing which contacts were written
        """
        ids = self.hubspot.search_contact_ids_by_email(email)

        if not ids:
            new_id = self.hubspot.create_contact(email)
            self.hubspot.update_contact(new_id, properties)
            return ReconcileResult(ReconcileAction.CREATED, [new_id])

        if len(ids) == 1 or self.policy == DuplicatePolicy.UPDATE_NEWEST:
            # Search results are sorted newest first
            target_id, others = ids[0], ids[1:]
            self.hubspot.update_contact(target_id, properties)
            if others:
                logger.info(f"Updated newest contact {target_id}, left {len(others)} duplicates for {email}")
            return ReconcileResult(ReconcileAction.UPDATED, [target_id], duplicates=others)

        self._update_all(ids, properties)
        logger.info(f"Updated {len(ids)} duplicate contacts for {email}")
        return ReconcileResult(ReconcileAction.DUPLICATES_UPDATED, list(ids))

    def _update_all(self, ids: List[str], properties: Dict[str, Any]) -> None:
        """Write every contact in parallel; re-raise the first failure after all finish."""
        with ThreadPoolExecutor(max_workers=min(len(ids), self.MAX_WORKERS)) as executor:
            futures = {
                executor.submit(self.hubspot.update_contact, contact_id, properties): contact_id
                for contact_id in ids
            }
            for future in as_completed(futures):
                try:
                    future.result()
                except Exception:
                    logger.error(f"Update failed for HubSpot contact {futures[future]}")
                    raise
