"""
CRM reconciliation values.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DuplicatePolicy(str, Enum):
    """Which contacts get written when several share one email."""

    UPDATE_ALL = 'update_all'
    UPDATE_NEWEST = 'update_newest'


class ReconcileAction(str, Enum):
    CREATED = 'created'
    UPDATED = 'updated'
    DUPLICATES_UPDATED = 'duplicates_updated'


@dataclass
class ReconcileResult:
    """
    What the reconciler did.

    contact_ids lists every contact that was written. duplicates lists
    matching contacts that were detected but left untouched.
    """

    action: ReconcileAction
    contact_ids: List[str]
    duplicates: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        if self.action == ReconcileAction.CREATED:
            return {'created': self.contact_ids[0]}
        if self.action == ReconcileAction.DUPLICATES_UPDATED:
            return {'duplicatesUpdated': list(self.contact_ids)}

        result = {'updated': self.contact_ids[0]}
        if self.duplicates:
            result['duplicates'] = list(self.duplicates)
        return result
