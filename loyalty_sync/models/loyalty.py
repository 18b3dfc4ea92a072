"""
Loyalty record values.

The raw record is whatever the loyalty app stored in the customer metafield.
`LoyaltyProfile` is the fixed shape written to the CRM.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class LoyaltyProfile:
    """Normalized loyalty data. Always fully populated."""

    enabled: bool = False
    points: int = 0
    referral_link: str = ''
    vip_tier: str = ''

    def to_dict(self) -> Dict[str, Any]:
        """Response representation."""
        return {
            'enabled': self.enabled,
            'points': self.points,
            'referralLink': self.referral_link,
            'vipTier': self.vip_tier,
        }

    def to_crm_properties(self) -> Dict[str, Any]:
        """HubSpot contact properties (must exist in the portal)."""
        return {
            'loyalty_enabled': self.enabled,
            'loyalty_points': self.points,
            'loyalty_referral_link': self.referral_link,
            'loyalty_tier': self.vip_tier,
        }


@dataclass
class MetafieldLookup:
    """Result of one metafield read against Shopify."""

    not_found: bool = False
    data: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[Any] = None

    @property
    def has_record(self) -> bool:
        return not self.not_found and self.raw is not None


@dataclass
class LoyaltyFetchResult:
    """Outcome of the loyalty fetch, including the id that was finally used."""

    found: bool
    raw: Dict[str, Any]
    used_customer_id: Optional[str]
    metafield: Optional[Any] = None
