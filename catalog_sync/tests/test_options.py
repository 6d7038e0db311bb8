from datetime import datetime, timezone

from django.test import TestCase, override_settings

from catalog_sync.models import SyncOption
from catalog_sync.options import Interval, OptionStore, SyncConfig, SyncStatus


class TestConfig(TestCase):
    def setUp(self):
        self.store = OptionStore()

    def test_defaults_from_settings(self):
        config = self.store.load_config()
        self.assertEqual(config.endpoint_url, 'https://catalog.example.test/admin/api/2024-01/products.json')
        self.assertEqual(config.access_token, 'shpat-test-token')
        self.assertEqual(config.table_name, 'shopify_products')
        self.assertIs(config.interval, Interval.FIVE_MINUTES)

    def test_qualified_table_name_uses_prefix(self):
        self.assertEqual(self.store.load_config().qualified_table_name, 'test_shopify_products')

    def test_save_and_load(self):
        config = SyncConfig(
            endpoint_url='https://other.test/products.json',
            access_token='tok',
            table_name='mirror',
            interval=Interval.DAILY,
        )
        self.store.save_config(config)
        self.assertEqual(self.store.load_config(), config)

    def test_unknown_schedule_falls_back(self):
        SyncOption.objects.create(key='schedule', value='weekly')
        self.assertIs(self.store.load_config().interval, Interval.FIVE_MINUTES)

    def test_blank_table_name_falls_back(self):
        SyncOption.objects.create(key='table_name', value='  ')
        self.assertEqual(self.store.load_config().table_name, 'shopify_products')

    def test_install_defaults_keeps_existing(self):
        SyncOption.objects.create(key='schedule', value='hourly')

        self.store.install_defaults()

        values = dict(SyncOption.objects.values_list('key', 'value'))
        self.assertEqual(values['schedule'], 'hourly')
        self.assertEqual(values['table_name'], 'shopify_products')
        self.assertEqual(values['last_sync'], 'never')
        self.assertEqual(values['record_count'], '0')

    @override_settings(SYNC_SCHEDULE_SECONDS={'five_minutes': 300, 'hourly': 3600, 'daily': 86400})
    def test_interval_seconds(self):
        self.assertEqual(Interval.FIVE_MINUTES.seconds, 300)
        self.assertEqual(Interval.HOURLY.seconds, 3600)
        self.assertEqual(Interval.DAILY.seconds, 86400)


class TestStatus(TestCase):
    def setUp(self):
        self.store = OptionStore()

    def test_never_synced(self):
        status = self.store.load_status()
        self.assertIsNone(status.last_sync_at)
        self.assertEqual(status.last_record_count, 0)
        self.assertEqual(
            status.display(),
            {'last_sync': 'never', 'next_sync': 'unscheduled', 'record_count': 0},
        )

    def test_save_and_load(self):
        when = datetime(2024, 6, 1, 12, 30, 15, tzinfo=timezone.utc)

        self.store.save_status(last_sync_at=when, record_count=12)

        status = self.store.load_status()
        self.assertEqual(status.last_sync_at, when)
        self.assertEqual(status.last_record_count, 12)
        self.assertEqual(SyncOption.objects.get(key='last_sync').value, '2024-06-01 12:30:15')

    def test_display_with_next_sync(self):
        status = SyncStatus(
            last_sync_at=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
            next_sync_at=datetime(2024, 6, 1, 12, 5, tzinfo=timezone.utc),
            last_record_count=3,
        )
        self.assertEqual(status.display(), {
            'last_sync': '2024-06-01 12:00:00',
            'next_sync': '2024-06-01 12:05:00',
            'record_count': 3,
        })

    def test_garbage_count_reads_zero(self):
        SyncOption.objects.create(key='record_count', value='lots')
        self.assertEqual(self.store.load_status().last_record_count, 0)

    def test_next_sync_saved_and_cleared(self):
        when = datetime(2024, 6, 1, 12, 5, tzinfo=timezone.utc)

        self.store.save_next_sync(when)
        self.assertEqual(self.store.load_status().next_sync_at, when)
        self.assertEqual(SyncOption.objects.get(key='next_sync').value, '2024-06-01 12:05:00')

        self.store.save_next_sync(None)
        self.assertIsNone(self.store.load_status().next_sync_at)
        self.assertEqual(SyncOption.objects.get(key='next_sync').value, 'unscheduled')
