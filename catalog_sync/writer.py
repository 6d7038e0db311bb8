import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction

from catalog_sync.exceptions import RowInsertError
from catalog_sync.schema import build_model
from catalog_sync.transforms import record_to_row

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    attempted: int = 0
    inserted: int = 0
    failed: int = 0
    errors: list = field(default_factory=list)

    def as_dict(self):
        return {
            'attempted': self.attempted,
            'inserted': self.inserted,
            'failed': self.failed,
            'errors': [str(error) for error in self.errors],
        }


class BulkReplaceWriter:
    """Replaces every row of the destination table with a fresh batch.

    Delete and inserts share one transaction, so readers never see the table
    empty and an aborted cycle leaves the previous contents. Each insert runs
    in its own savepoint; a failing row is recorded and skipped.
    """

    def __init__(self, table_name, columns):
        self.table_name = table_name
        self.columns = list(columns)
        self.model = build_model(table_name, self.columns)

    def _build(self, record):
        row = record_to_row(record, self.columns)
        return self.model(**{column.attname: row[column.name] for column in self.columns})

    def replace_all(self, records) -> SyncResult:
        result = SyncResult(attempted=len(records))
        manager = self.model._default_manager

        with transaction.atomic():
            deleted, _ = manager.all().delete()
            logger.debug("Cleared %d rows from %s", deleted, self.table_name)

            for record in records:
                try:
                    with transaction.atomic():
                        self._build(record).save(force_insert=True)
                except (DatabaseError, ValueError, TypeError) as exc:
                    error = RowInsertError(product_id=record.id, message=str(exc))
                    logger.error("Failed to insert product %s into %s: %s", record.id, self.table_name, exc)
                    result.errors.append(error)
                    result.failed += 1
                    continue
                result.inserted += 1

        logger.info(
            "Replaced %s: %d attempted, %d inserted, %d failed",
            self.table_name, result.attempted, result.inserted, result.failed,
        )
        return result
