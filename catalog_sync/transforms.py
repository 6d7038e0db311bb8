from dataclasses import dataclass, field
from datetime import datetime, time, timezone as dt_timezone

from django.utils.dateparse import parse_date, parse_datetime

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
# Written for missing or unparseable source timestamps in string columns
EPOCH_TIMESTAMP = '1970-01-01 00:00:00'

CANONICAL_FIELDS = ('id', 'title', 'body_html', 'vendor', 'product_type', 'created_at', 'updated_at')
TIMESTAMP_FIELDS = ('created_at', 'updated_at')

# Payload key -> destination column
COLUMN_FOR_FIELD = {'id': 'product_id'}


def is_scalar(value):
    return not isinstance(value, (dict, list, tuple, set))


def column_name(key):
    return COLUMN_FOR_FIELD.get(key, key)


@dataclass(frozen=True)
class ProductRecord:
    id: object
    title: object = None
    body_html: object = None
    vendor: object = None
    product_type: object = None
    created_at: object = None
    updated_at: object = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_payload(cls, raw: dict) -> 'ProductRecord':
        """Keep scalar fields only; arrays and objects are dropped."""
        scalars = {key: value for key, value in raw.items() if is_scalar(value)}
        canonical = {name: scalars.pop(name, None) for name in CANONICAL_FIELDS}
        return cls(**canonical, extra=scalars)

    def scalar_items(self):
        """Canonical fields first, then extras in payload order. ``id`` is renamed ``product_id``."""
        items = [(column_name(name), getattr(self, name)) for name in CANONICAL_FIELDS]
        items.extend((column_name(key), value) for key, value in self.extra.items())
        return items

    def as_columns(self):
        """Column name -> value. A payload key equal to a canonical column name never overrides it."""
        values = {}
        for name, value in self.scalar_items():
            values.setdefault(name, value)
        return values


def parse_timestamp(value):
    """Parse a source timestamp into an aware UTC datetime, or None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = parse_datetime(value.strip())
            if parsed is None:
                day = parse_date(value.strip())
                parsed = datetime.combine(day, time.min) if day else None
        except ValueError:
            return None
    else:
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt_timezone.utc)
    return parsed.astimezone(dt_timezone.utc)


def normalize_timestamp(value):
    """'2024-01-01T00:00:00Z' -> '2024-01-01 00:00:00' (UTC); the epoch when unparseable."""
    parsed = parse_timestamp(value)
    return parsed.strftime(TIMESTAMP_FORMAT) if parsed else EPOCH_TIMESTAMP


def record_to_row(record: ProductRecord, columns):
    """Map a record onto the destination columns; absent fields become None."""
    values = record.as_columns()
    row = {}
    for column in columns:
        value = values.get(column.name)
        if column.name in TIMESTAMP_FIELDS:
            value = parse_timestamp(value) if column.is_datetime else normalize_timestamp(value)
        row[column.name] = value
    return row
