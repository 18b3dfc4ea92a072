"""
Tests for ShopifyClient against a mocked transport.
"""
import json
import httpx
import pytest

from loyalty_sync.services import ShopifyClient
from loyalty_sync.services.shopify_client import parse_json_object
from loyalty_sync.utils.exceptions import ShopifyError


def make_client(handler):
    return ShopifyClient(
        'https://test-shop.myshopify.com/',
        'shpat_test_token',
        api_version='2024-07',
        transport=httpx.MockTransport(handler)
    )


class TestCustomerLookups:

    def test_get_customer_email(self):
        def handler(request):
            assert request.url.path == '/admin/api/2024-07/customers/42.json'
            assert request.headers['X-Shopify-Access-Token'] == 'shpat_test_token'
            return httpx.Response(200, json={'customer': {'id': 42, 'email': 'Jane@Example.com'}})

        assert make_client(handler).get_customer_email('42') == 'jane@example.com'

    def test_get_customer_email_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={'errors': 'Not Found'}))
        assert client.get_customer_email('42') is None

    def test_get_customer_email_blank(self):
        client = make_client(lambda request: httpx.Response(200, json={'customer': {'id': 42, 'email': None}}))
        assert client.get_customer_email('42') is None

    def test_find_customer_id_by_email(self):
        def handler(request):
            assert request.url.path == '/admin/api/2024-07/customers/search.json'
            assert request.url.params['query'] == 'email:jane@example.com'
            return httpx.Response(200, json={'customers': [{'id': 7890123456789}, {'id': 1}]})

        assert make_client(handler).find_customer_id_by_email('jane@example.com') == '7890123456789'

    def test_find_customer_id_no_results(self):
        client = make_client(lambda request: httpx.Response(200, json={'customers': []}))
        assert client.find_customer_id_by_email('nobody@example.com') is None

    def test_server_error_raises(self):
        client = make_client(lambda request: httpx.Response(502, text='Bad Gateway'))
        with pytest.raises(ShopifyError) as exc_info:
            client.find_customer_id_by_email('jane@example.com')
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == 'Shopify customer search failed: 502 Bad Gateway'


class TestLoyaltyMetafield:

    def test_json_string_value_is_decoded(self):
        stored = json.dumps({'availablePoints': 1200, 'currentVipTier': 'Gold'})

        def handler(request):
            assert request.url.path == '/admin/api/2024-07/customers/42/metafields.json'
            assert request.url.params['namespace'] == 'appstle_loyalty'
            assert request.url.params['key'] == 'customer_loyalty'
            return httpx.Response(200, json={'metafields': [{'key': 'customer_loyalty', 'value': stored}]})

        lookup = make_client(handler).get_loyalty_metafield('42')

        assert lookup.not_found is False
        assert lookup.has_record is True
        assert lookup.data == {'availablePoints': 1200, 'currentVipTier': 'Gold'}
        assert lookup.raw == stored

    def test_404_is_not_found(self):
        lookup = make_client(lambda request: httpx.Response(404)).get_loyalty_metafield('42')
        assert lookup.not_found is True
        assert lookup.data == {}

    def test_no_metafield_is_empty_record(self):
        lookup = make_client(lambda request: httpx.Response(200, json={'metafields': []})).get_loyalty_metafield('42')
        assert lookup.not_found is False
        assert lookup.has_record is False
        assert lookup.data == {}
        assert lookup.raw is None

    def test_undecodable_value_is_empty_data(self):
        client = make_client(lambda request: httpx.Response(200, json={'metafields': [{'value': '{not json'}]}))
        lookup = client.get_loyalty_metafield('42')
        assert lookup.data == {}
        assert lookup.raw == '{not json'

    def test_server_error_raises(self):
        client = make_client(lambda request: httpx.Response(500, text='oops'))
        with pytest.raises(ShopifyError):
            client.get_loyalty_metafield('42')

    def test_timeout_raises_shopify_error(self):
        def handler(request):
            raise httpx.ReadTimeout('timed out', request=request)

        with pytest.raises(ShopifyError) as exc_info:
            make_client(handler).get_loyalty_metafield('42')
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ReadTimeout)


class TestParseJsonObject:

    def test_dict_passthrough(self):
        assert parse_json_object({'a': 1}) == {'a': 1}

    def test_json_array_is_not_an_object(self):
        assert parse_json_object('[1, 2]') == {}

    def test_other_types(self):
        assert parse_json_object(12) == {}
        assert parse_json_object(None) == {}
