from dataclasses import dataclass


class CatalogSyncError(Exception):
    """Base class for errors raised by the sync engine."""


class FetchError(CatalogSyncError):
    """The remote catalog could not be fetched or parsed."""


class SchemaError(CatalogSyncError):
    """The destination table could not be created or inspected."""


@dataclass(frozen=True)
class RowInsertError:
    """A single record that failed to insert. Collected, never raised."""

    product_id: object
    message: str

    def __str__(self):
        return f"product {self.product_id}: {self.message}"
