import logging
import uuid
from contextlib import contextmanager
from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError
from django.utils import timezone

from catalog_sync.exceptions import FetchError, SchemaError
from catalog_sync.options import OptionStore
from catalog_sync.schema import ensure_table, table_exists
from catalog_sync.writer import BulkReplaceWriter, SyncResult

logger = logging.getLogger(__name__)

LOCK_KEY = 'catalog_sync:cycle-lock'


@contextmanager
def sync_lock(timeout=None):
    """Yields True if this caller holds the cycle lock, False if someone else does."""
    timeout = timeout if timeout is not None else settings.CATALOG_SYNC_LOCK_TIMEOUT
    token = uuid.uuid4().hex
    acquired = cache.add(LOCK_KEY, token, timeout)
    try:
        yield acquired
    finally:
        if acquired and cache.get(LOCK_KEY) == token:
            cache.delete(LOCK_KEY)


class SyncOrchestrator:
    def __init__(self, client, store=None):
        self.client = client
        self.store = store or OptionStore()

    def ensure_destination(self):
        """Create the baseline table if no sync has created one yet."""
        config = self.store.load_config()
        try:
            ensure_table(config.qualified_table_name)
        except SchemaError as exc:
            logger.error("Could not prepare table %s: %s", config.qualified_table_name, exc)

    def run_if_due(self, now=None):
        """Run a cycle if the stored next sync time has passed, booking the next one first."""
        now = now or timezone.now()
        interval = timedelta(seconds=self.store.load_config().interval.seconds)
        next_sync_at = self.store.load_status().next_sync_at
        # A booking further out than one interval predates a shorter schedule
        if next_sync_at is not None and now < next_sync_at <= now + interval:
            logger.debug("Catalog sync not due until %s", next_sync_at)
            return None
        self.store.save_next_sync(now + interval)
        return self.run()

    def run(self):
        """Run one sync cycle. Returns the write counts, or None if the cycle did not complete."""
        with sync_lock() as acquired:
            if not acquired:
                logger.warning("Sync cycle already running, skipping this trigger")
                return None
            return self._run_cycle()

    def _run_cycle(self):
        config = self.store.load_config()
        table_name = config.qualified_table_name
        logger.info("Starting catalog sync into %s", table_name)

        try:
            records = self.client.fetch_products(config)
        except FetchError as exc:
            logger.error("Failed to fetch products: %s", exc)
            return None

        try:
            if records or table_exists(table_name):
                columns = ensure_table(table_name, records[0] if records else None)
            else:
                columns = None
        except SchemaError as exc:
            logger.error("Failed to prepare table %s: %s", table_name, exc)
            return None
        except DatabaseError as exc:
            logger.error("Failed to inspect table %s: %s", table_name, exc)
            return None

        if columns is None:
            logger.info("No products fetched and no table yet, nothing to write")
            result = SyncResult()
        else:
            try:
                result = BulkReplaceWriter(table_name, columns).replace_all(records)
            except DatabaseError as exc:
                logger.error("Bulk replace of %s rolled back: %s", table_name, exc)
                return None

        # Status reports the fetched batch size, not rows actually stored
        self.store.save_status(last_sync_at=timezone.now(), record_count=result.attempted)
        logger.info("Sync complete: %s", result.as_dict())
        return result
