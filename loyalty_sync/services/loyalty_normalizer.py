"""
Loyalty record normalization.

Turns the loosely structured Appstle metafield into a LoyaltyProfile. Appstle
has renamed fields over time, so each output field is looked up through an
ordered alias table. Earlier entries are the current names and always win
when several spellings are present at once.
"""
import math
from typing import Any, Mapping, Optional, Tuple, Union

from ..models import LoyaltyProfile

ENABLED_KEYS: Tuple[str, ...] = ('enabled',)

POINTS_KEYS: Tuple[str, ...] = (
    'availablePoints',
    'pointBalance',
    'pointsBalance',
    'balance',
    'points',
    'point_balance',
)

# Used only when no POINTS_KEYS alias is present: points = credited - spent
CREDITED_POINTS_KEY = 'creditedPoints'
SPENT_POINTS_KEY = 'spentAmount'

REFERRAL_LINK_KEYS: Tuple[str, ...] = (
    'referralLink',
    'referral_url',
    'referralUrl',
    'referral_link',
    'referral',
)

VIP_TIER_KEYS: Tuple[str, ...] = (
    'currentVipTier',
    'currentVip',
    'vipTier',
)

_TRUE_VALUES = ('true', '1')

_MISSING = object()


def first_defined(raw: Mapping[str, Any], keys: Tuple[str, ...], default: Any = _MISSING) -> Any:
    """Return the value of the first alias whose value is not None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def parse_bool(value: Any) -> bool:
    """True for True, "true", 1 and "1". Everything else is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value in _TRUE_VALUES
    if isinstance(value, (int, float)):
        return value == 1
    return False


def parse_number(value: Any) -> Optional[Union[int, float]]:
    """
    Parse a number, accepting strings with thousands separators.

    Integers (and integer strings) stay exact ints of any size. Returns None
    for anything missing, non-numeric or non-finite.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        text = value.replace(',', '').strip()
        # int()/float() accept "1_000"; Appstle never sends that
        if not text or '_' in text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return None
    elif isinstance(value, float):
        number = value
    else:
        return None

    return number if math.isfinite(number) else None


def to_points(value: Any) -> int:
    number = parse_number(value)
    return int(number) if number is not None else 0


def resolve_points(raw: Mapping[str, Any]) -> int:
    candidate = first_defined(raw, POINTS_KEYS)
    if candidate is not _MISSING:
        return to_points(candidate)

    if CREDITED_POINTS_KEY in raw and SPENT_POINTS_KEY in raw:
        credited = parse_number(raw[CREDITED_POINTS_KEY]) or 0
        spent = parse_number(raw[SPENT_POINTS_KEY]) or 0
        try:
            return to_points(credited - spent)
        except OverflowError:
            # huge int against a float
            return 0

    return 0


def _as_text(value: Any) -> str:
    if value is _MISSING or isinstance(value, (Mapping, list, tuple)):
        return ''
    return value if isinstance(value, str) else str(value)


def normalize(raw: Optional[Mapping[str, Any]]) -> LoyaltyProfile:
    """
    Normalize a raw loyalty record.

    Total over any input: a missing or non-mapping record yields the all-default
    profile.

    Args:
        raw: Decoded metafield value

    Returns:
        LoyaltyProfile with every field populated
    """
    if not isinstance(raw, Mapping):
        raw = {}

    explicit = [key for key in ENABLED_KEYS if key in raw]
    if explicit:
        enabled = parse_bool(raw[explicit[0]])
    else:
        # Any stored loyalty data means the customer is in the program
        enabled = len(raw) > 0

    return LoyaltyProfile(
        enabled=enabled,
        points=resolve_points(raw),
        referral_link=_as_text(first_defined(raw, REFERRAL_LINK_KEYS)),
        vip_tier=_as_text(first_defined(raw, VIP_TIER_KEYS)),
    )
