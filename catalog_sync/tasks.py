import logging

from celery import shared_task

from catalog_sync.clients.shopify_client import ShopifyClient
from catalog_sync.sync import SyncOrchestrator

logger = logging.getLogger(__name__)


def _as_stats(result):
    return {} if result is None else result.as_dict()


@shared_task
def sync_products():
    """Run one catalog sync cycle now. Failures are logged; the next beat is the retry."""
    return _as_stats(SyncOrchestrator(client=ShopifyClient()).run())


@shared_task
def sync_products_if_due():
    """Beat entry: sync only when the stored schedule says a cycle is due."""
    return _as_stats(SyncOrchestrator(client=ShopifyClient()).run_if_due())
