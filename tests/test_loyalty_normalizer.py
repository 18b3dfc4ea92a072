"""
Tests for loyalty record normalization.

Covers:
- Defaults for empty/missing/garbage records
- enabled flag parsing and the implicit-membership rule
- Points alias precedence, thousands separators, credited - spent fallback
- Referral link and VIP tier aliases
"""
import json

import pytest

from loyalty_sync.models import LoyaltyProfile
from loyalty_sync.services.loyalty_normalizer import (
    normalize,
    parse_bool,
    parse_number,
    POINTS_KEYS,
)


class TestNormalizeDefaults:
    """normalize() is total: every input yields a full profile."""

    @pytest.mark.parametrize('raw', [{}, None, [], 'not a dict', 42])
    def test_empty_or_invalid_record_yields_defaults(self, raw):
        profile = normalize(raw)
        assert profile == LoyaltyProfile(enabled=False, points=0, referral_link='', vip_tier='')

    def test_to_dict_has_all_fields(self):
        assert normalize({}).to_dict() == {
            'enabled': False,
            'points': 0,
            'referralLink': '',
            'vipTier': '',
        }

    def test_crm_properties_mirror_profile(self):
        profile = normalize({'availablePoints': 10, 'referralLink': 'https://r/x', 'currentVipTier': 'Gold'})
        assert profile.to_crm_properties() == {
            'loyalty_enabled': True,
            'loyalty_points': 10,
            'loyalty_referral_link': 'https://r/x',
            'loyalty_tier': 'Gold',
        }


class TestEnabled:
    """Tests for the enabled flag."""

    @pytest.mark.parametrize('value', [True, 'true', 1, '1'])
    def test_truthy_values(self, value):
        assert normalize({'enabled': value}).enabled is True

    @pytest.mark.parametrize('value', [False, 'false', 0, '0', 'yes', None, 2, 'TRUE', 'True', ' 1 ', ' true'])
    def test_everything_else_is_false(self, value):
        assert normalize({'enabled': value, 'availablePoints': 5}).enabled is False

    def test_no_flag_with_data_means_enabled(self):
        assert normalize({'customerStatus': 'ACTIVE'}).enabled is True

    def test_no_flag_without_data_means_disabled(self):
        assert normalize({}).enabled is False

    def test_parse_bool_rejects_containers(self):
        assert parse_bool({'enabled': True}) is False
        assert parse_bool([1]) is False


class TestPoints:
    """Tests for points resolution."""

    def test_current_key_wins_over_legacy(self):
        raw = {'point_balance': 5, 'pointBalance': 7, 'availablePoints': 100}
        assert normalize(raw).points == 100

    def test_alias_order_is_fixed(self):
        # Every alias present with a distinct value: the first listed wins
        raw = {key: index + 1 for index, key in enumerate(POINTS_KEYS)}
        assert normalize(raw).points == 1

    def test_none_alias_falls_through_to_next(self):
        assert normalize({'availablePoints': None, 'balance': 12}).points == 12

    def test_thousands_separators(self):
        assert normalize({'points': '1,234'}).points == 1234
        assert normalize({'points': '1,234,567'}).points == 1234567

    def test_unparseable_is_zero(self):
        assert normalize({'points': 'abc'}).points == 0

    def test_first_defined_alias_wins_even_if_unparseable(self):
        assert normalize({'availablePoints': 'abc', 'points': 50}).points == 0

    @pytest.mark.parametrize('value', ['nan', 'inf', '-Infinity', float('nan'), float('inf')])
    def test_non_finite_is_zero(self, value):
        assert normalize({'points': value}).points == 0

    def test_no_points_key_is_zero(self):
        assert normalize({'referralLink': 'x'}).points == 0

    def test_fractional_points_truncate(self):
        assert normalize({'points': '12.9'}).points == 12
        assert normalize({'points': -3.5}).points == -3

    def test_negative_points_preserved(self):
        assert normalize({'points': '-40'}).points == -40

    def test_credited_minus_spent(self):
        assert normalize({'creditedPoints': '1,500', 'spentAmount': 200}).points == 1300

    def test_credited_minus_spent_needs_both(self):
        assert normalize({'creditedPoints': 1500}).points == 0

    def test_alias_beats_credited_minus_spent(self):
        raw = {'creditedPoints': 1500, 'spentAmount': 200, 'points': 9}
        assert normalize(raw).points == 9

    def test_credited_minus_spent_with_garbage(self):
        assert normalize({'creditedPoints': 'abc', 'spentAmount': 25}).points == -25

    def test_parse_number_rejects_bool_and_underscores(self):
        assert parse_number(True) is None
        assert parse_number('1_000') is None
        assert parse_number('') is None
        assert parse_number(' 12 ') == 12

    def test_huge_integer_points_stay_exact(self):
        huge = json.loads('{"points": 1' + '0' * 400 + '}')
        assert normalize(huge).points == 10 ** 400

    def test_large_integer_keeps_precision(self):
        assert normalize({'points': 2 ** 53 + 1}).points == 2 ** 53 + 1
        assert normalize({'points': '9,007,199,254,740,993'}).points == 9007199254740993

    def test_huge_credited_minus_float_spent_is_zero(self):
        assert normalize({'creditedPoints': 10 ** 400, 'spentAmount': 1.5}).points == 0

    def test_huge_credited_minus_int_spent_is_exact(self):
        assert normalize({'creditedPoints': 10 ** 400, 'spentAmount': 1}).points == 10 ** 400 - 1


class TestReferralAndTier:
    """Tests for referral link and VIP tier aliases."""

    def test_referral_alias_precedence(self):
        raw = {'referral': 'legacy', 'referral_url': 'older', 'referralLink': 'current'}
        assert normalize(raw).referral_link == 'current'

    def test_referral_legacy_only(self):
        assert normalize({'referral_link': 'https://ref/abc'}).referral_link == 'https://ref/abc'

    def test_vip_tier_alias_precedence(self):
        raw = {'vipTier': 'Silver', 'currentVip': 'Gold', 'currentVipTier': 'Platinum'}
        assert normalize(raw).vip_tier == 'Platinum'

    def test_vip_tier_non_string_is_stringified(self):
        assert normalize({'vipTier': 3}).vip_tier == '3'

    def test_container_values_become_empty(self):
        profile = normalize({'referralLink': {'url': 'https://ref/abc'}, 'currentVipTier': ['Gold']})
        assert profile.referral_link == ''
        assert profile.vip_tier == ''

    def test_missing_values_default_to_empty(self):
        profile = normalize({'availablePoints': 1})
        assert profile.referral_link == ''
        assert profile.vip_tier == ''

    def test_normalize_does_not_mutate_input(self):
        raw = {'points': '1,000', 'referralLink': 'x'}
        normalize(raw)
        assert raw == {'points': '1,000', 'referralLink': 'x'}
