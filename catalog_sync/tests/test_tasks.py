from datetime import timedelta

import responses
from django.conf import settings
from django.test import TransactionTestCase

from catalog_sync.models import SyncOption
from catalog_sync.options import OptionStore
from catalog_sync.tasks import sync_products, sync_products_if_due

from .utils import catalog_payload, drop_table

API_URL = 'https://catalog.example.test/admin/api/2024-01/products.json'


class TestSyncProductsTask(TransactionTestCase):
    def tearDown(self):
        drop_table('test_shopify_products')

    @responses.activate
    def test_sync_products_runs(self):
        responses.add(responses.GET, API_URL, json={"products": catalog_payload()}, status=200)

        result = sync_products()

        self.assertEqual(result['attempted'], 3)
        self.assertEqual(result['inserted'], 3)
        self.assertEqual(result['errors'], [])

    @responses.activate
    def test_failed_cycle_returns_empty(self):
        responses.add(responses.GET, API_URL, status=503)
        self.assertEqual(sync_products(), {})


class TestSyncProductsIfDueTask(TransactionTestCase):
    def tearDown(self):
        drop_table('test_shopify_products')

    @responses.activate
    def test_uses_stored_schedule(self):
        responses.add(responses.GET, API_URL, json={"products": catalog_payload()}, status=200)
        SyncOption.objects.create(key='schedule', value='daily')

        first = sync_products_if_due()
        second = sync_products_if_due()

        self.assertEqual(first['inserted'], 3)
        self.assertEqual(second, {})
        self.assertEqual(len(responses.calls), 1)
        status = OptionStore().load_status()
        self.assertGreater(status.next_sync_at - status.last_sync_at, timedelta(hours=23))

    def test_beat_runs_due_check(self):
        entry = settings.CELERY_BEAT_SCHEDULE['sync-catalog-if-due']
        self.assertEqual(entry['task'], 'catalog_sync.tasks.sync_products_if_due')
