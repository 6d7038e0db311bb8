import logging

import requests
from django.conf import settings

from catalog_sync.exceptions import FetchError
from catalog_sync.transforms import ProductRecord

from .base import BaseClient

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = 'X-Shopify-Access-Token'


class ShopifyClient(BaseClient):
    """Single-shot GET of the product list. The next scheduled cycle is the retry."""

    def __init__(self, timeout=None):
        self.timeout = timeout if timeout is not None else settings.CATALOG_FETCH_TIMEOUT

    def make_session(self, config) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            'Content-Type': 'application/json',
            ACCESS_TOKEN_HEADER: config.access_token,
        })
        return session

    def fetch_products(self, config) -> list[ProductRecord]:
        if not config.endpoint_url:
            raise FetchError("No API URL configured")

        with self.make_session(config) as session:
            try:
                response = session.get(config.endpoint_url, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise FetchError(f"Request to {config.endpoint_url} failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise FetchError(f"Malformed JSON from {config.endpoint_url}") from exc

        if not isinstance(body, dict) or 'products' not in body:
            raise FetchError("Response has no 'products' key")
        products = body['products']
        if not isinstance(products, list):
            raise FetchError("'products' is not a list")

        records = []
        for index, raw in enumerate(products):
            if not isinstance(raw, dict):
                raise FetchError(f"Product at index {index} is not an object")
            records.append(ProductRecord.from_payload(raw))

        logger.info("Fetched %d products from %s", len(records), config.endpoint_url)
        return records
