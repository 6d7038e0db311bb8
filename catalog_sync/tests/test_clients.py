import responses
from django.test import SimpleTestCase

from catalog_sync.clients.shopify_client import ShopifyClient
from catalog_sync.exceptions import FetchError
from catalog_sync.options import SyncConfig

from .utils import catalog_payload

API_URL = "https://shop.example.test/admin/api/2024-01/products.json"


def _config(url=API_URL):
    return SyncConfig(endpoint_url=url, access_token="shpat-secret", table_name="shopify_products")


class TestFetchProducts(SimpleTestCase):
    def setUp(self):
        self.client = ShopifyClient(timeout=5)

    @responses.activate
    def test_fetches_records(self):
        responses.add(responses.GET, API_URL, json={"products": catalog_payload()}, status=200)

        records = self.client.fetch_products(_config())

        self.assertEqual([r.id for r in records], [1, 2, 3])
        self.assertEqual(records[1].extra, {"handle": "mug"})

    @responses.activate
    def test_sends_auth_headers(self):
        responses.add(responses.GET, API_URL, json={"products": []}, status=200)

        self.client.fetch_products(_config())

        headers = responses.calls[0].request.headers
        self.assertEqual(headers['X-Shopify-Access-Token'], 'shpat-secret')
        self.assertEqual(headers['Content-Type'], 'application/json')

    @responses.activate
    def test_empty_list(self):
        responses.add(responses.GET, API_URL, json={"products": []}, status=200)
        self.assertEqual(self.client.fetch_products(_config()), [])

    @responses.activate
    def test_server_error(self):
        responses.add(responses.GET, API_URL, json={"errors": "boom"}, status=500)
        with self.assertRaises(FetchError):
            self.client.fetch_products(_config())

    @responses.activate
    def test_unauthorized(self):
        responses.add(responses.GET, API_URL, json={"errors": "Invalid API key"}, status=401)
        with self.assertRaises(FetchError):
            self.client.fetch_products(_config())

    @responses.activate
    def test_malformed_json(self):
        responses.add(responses.GET, API_URL, body="<html>oops</html>", status=200)
        with self.assertRaisesRegex(FetchError, "Malformed JSON"):
            self.client.fetch_products(_config())

    @responses.activate
    def test_missing_products_key(self):
        responses.add(responses.GET, API_URL, json={"items": []}, status=200)
        with self.assertRaisesRegex(FetchError, "no 'products' key"):
            self.client.fetch_products(_config())

    @responses.activate
    def test_products_not_a_list(self):
        responses.add(responses.GET, API_URL, json={"products": {"id": 1}}, status=200)
        with self.assertRaises(FetchError):
            self.client.fetch_products(_config())

    @responses.activate
    def test_non_object_item(self):
        responses.add(responses.GET, API_URL, json={"products": [1, 2]}, status=200)
        with self.assertRaises(FetchError):
            self.client.fetch_products(_config())

    @responses.activate
    def test_connection_error(self):
        # No registered URL, responses refuses the connection
        with self.assertRaises(FetchError):
            self.client.fetch_products(_config())

    def test_no_url_configured(self):
        with self.assertRaisesRegex(FetchError, "No API URL"):
            self.client.fetch_products(_config(url=""))
