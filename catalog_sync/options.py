"""
Configuration and status persisted as key/value rows in ``SyncOption``.

Configuration defaults come from Django settings (environment driven), so a
fresh install works before anyone saves the settings form.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone

from django.conf import settings
from django.db import transaction
from django.utils.dateparse import parse_datetime

from catalog_sync.models import SyncOption

NEVER = 'never'
UNSCHEDULED = 'unscheduled'
STATUS_FORMAT = '%Y-%m-%d %H:%M:%S'

API_URL = 'api_url'
ACCESS_TOKEN = 'access_token'
TABLE_NAME = 'table_name'
SCHEDULE = 'schedule'
LAST_SYNC = 'last_sync'
NEXT_SYNC = 'next_sync'
RECORD_COUNT = 'record_count'

CONFIG_KEYS = (API_URL, ACCESS_TOKEN, TABLE_NAME, SCHEDULE)
STATUS_KEYS = (LAST_SYNC, NEXT_SYNC, RECORD_COUNT)


class Interval(str, enum.Enum):
    FIVE_MINUTES = 'five_minutes'
    HOURLY = 'hourly'
    DAILY = 'daily'

    @property
    def seconds(self) -> int:
        return settings.SYNC_SCHEDULE_SECONDS[self.value]

    @classmethod
    def parse(cls, value):
        try:
            return cls(value)
        except ValueError:
            return cls.FIVE_MINUTES


@dataclass(frozen=True)
class SyncConfig:
    endpoint_url: str
    access_token: str
    table_name: str
    interval: Interval = Interval.FIVE_MINUTES

    @property
    def qualified_table_name(self) -> str:
        return f"{settings.CATALOG_TABLE_PREFIX}{self.table_name}"


@dataclass(frozen=True)
class SyncStatus:
    last_sync_at: datetime | None = None
    next_sync_at: datetime | None = None
    last_record_count: int = 0

    def display(self) -> dict:
        return {
            LAST_SYNC: format_timestamp(self.last_sync_at) if self.last_sync_at else NEVER,
            NEXT_SYNC: format_timestamp(self.next_sync_at) if self.next_sync_at else UNSCHEDULED,
            RECORD_COUNT: self.last_record_count,
        }


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(dt_timezone.utc)
    return value.strftime(STATUS_FORMAT)


def parse_status_timestamp(value):
    """Stored status timestamp -> aware UTC datetime; None for never/unscheduled."""
    if not value or value in (NEVER, UNSCHEDULED):
        return None
    parsed = parse_datetime(value)
    if parsed is not None and parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_timezone.utc)
    return parsed


def default_values() -> dict[str, str]:
    return {
        API_URL: settings.CATALOG_API_URL,
        ACCESS_TOKEN: settings.CATALOG_ACCESS_TOKEN,
        TABLE_NAME: settings.CATALOG_TABLE_NAME,
        SCHEDULE: Interval.parse(settings.CATALOG_SYNC_SCHEDULE).value,
        LAST_SYNC: NEVER,
        NEXT_SYNC: UNSCHEDULED,
        RECORD_COUNT: '0',
    }


class OptionStore:
    """Loads and saves ``SyncConfig``/``SyncStatus`` through ``SyncOption`` rows."""

    def _read(self, keys) -> dict[str, str]:
        values = {key: default for key, default in default_values().items() if key in keys}
        # Single query so status keys are read from one snapshot
        for option in SyncOption.objects.filter(key__in=keys):
            values[option.key] = option.value
        return values

    def _write(self, values: dict[str, str]) -> None:
        with transaction.atomic():
            for key, value in values.items():
                SyncOption.objects.update_or_create(key=key, defaults={'value': value})

    def install_defaults(self) -> None:
        """Create missing option rows with their defaults, leaving existing ones alone."""
        existing = set(SyncOption.objects.values_list('key', flat=True))
        missing = [
            SyncOption(key=key, value=value)
            for key, value in default_values().items()
            if key not in existing
        ]
        if missing:
            SyncOption.objects.bulk_create(missing, ignore_conflicts=True)

    def load_config(self) -> SyncConfig:
        values = self._read(CONFIG_KEYS)
        return SyncConfig(
            endpoint_url=values[API_URL].strip(),
            access_token=values[ACCESS_TOKEN].strip(),
            table_name=values[TABLE_NAME].strip() or settings.CATALOG_TABLE_NAME,
            interval=Interval.parse(values[SCHEDULE]),
        )

    def save_config(self, config: SyncConfig) -> None:
        self._write({
            API_URL: config.endpoint_url,
            ACCESS_TOKEN: config.access_token,
            TABLE_NAME: config.table_name,
            SCHEDULE: config.interval.value,
        })

    def load_status(self) -> SyncStatus:
        values = self._read(STATUS_KEYS)
        last_sync_at = parse_status_timestamp(values[LAST_SYNC])
        next_sync_at = parse_status_timestamp(values[NEXT_SYNC])
        try:
            record_count = int(values[RECORD_COUNT])
        except (TypeError, ValueError):
            record_count = 0
        return SyncStatus(
            last_sync_at=last_sync_at,
            next_sync_at=next_sync_at,
            last_record_count=record_count,
        )

    def save_status(self, last_sync_at: datetime, record_count: int) -> None:
        self._write({
            LAST_SYNC: format_timestamp(last_sync_at),
            RECORD_COUNT: str(record_count),
        })

    def save_next_sync(self, next_sync_at: datetime | None) -> None:
        """Record when the registered trigger fires next; None once unscheduled."""
        self._write({NEXT_SYNC: format_timestamp(next_sync_at) if next_sync_at else UNSCHEDULED})
