"""
Destination table management.

The column set of the catalog table is derived once, from the first record of
the sync that creates it, and is never altered afterwards. Later calls
introspect the existing table and hand its shape back to the writer.

Tables are driven through throwaway Django models registered in an isolated
app registry, so the schema editor and the ORM work against a table whose
shape is only known at runtime.
"""
import enum
import logging
import re
from dataclasses import dataclass

from django.apps.registry import Apps
from django.db import DatabaseError, connection, models

from catalog_sync.exceptions import SchemaError
from catalog_sync.transforms import CANONICAL_FIELDS, column_name, is_scalar

logger = logging.getLogger(__name__)

BOUNDED_LENGTH = 255
PRIMARY_KEY = 'id'
UNIQUE_COLUMN = 'product_id'
NULLABLE_FIELDS = {'body_html'}

IDENTIFIER_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]{0,62}$')


class ColumnType(enum.Enum):
    INTEGER = 'integer'
    FLOAT = 'float'
    TEXT = 'text'
    BOUNDED_STRING = 'bounded_string'
    DATETIME = 'datetime'


@dataclass(frozen=True)
class ColumnSpec:
    name: str
    type: ColumnType
    nullable: bool = False

    @property
    def is_datetime(self):
        return self.type is ColumnType.DATETIME

    @property
    def attname(self):
        # Payload keys may shadow Model attributes (pk, objects, save)
        return f"col_{self.name}"

    def to_field(self):
        options = {'null': self.nullable, 'db_column': self.name}
        if self.name == UNIQUE_COLUMN:
            options['unique'] = True
        if self.type is ColumnType.INTEGER:
            return models.BigIntegerField(**options)
        if self.type is ColumnType.FLOAT:
            return models.FloatField(**options)
        if self.type is ColumnType.TEXT:
            return models.TextField(**options)
        if self.type is ColumnType.DATETIME:
            return models.DateTimeField(**options)
        return models.CharField(max_length=BOUNDED_LENGTH, **options)


def infer_column_type(value) -> ColumnType:
    # JSON booleans are kept queryable as 0/1 rather than strings
    if isinstance(value, bool):
        return ColumnType.INTEGER
    if isinstance(value, int):
        return ColumnType.INTEGER
    if isinstance(value, float):
        return ColumnType.FLOAT
    if isinstance(value, str) and len(value) > BOUNDED_LENGTH:
        return ColumnType.TEXT
    return ColumnType.BOUNDED_STRING


def baseline_columns() -> list[ColumnSpec]:
    return [
        ColumnSpec('product_id', ColumnType.INTEGER),
        ColumnSpec('title', ColumnType.TEXT),
        ColumnSpec('body_html', ColumnType.TEXT, nullable=True),
        ColumnSpec('vendor', ColumnType.BOUNDED_STRING, nullable=True),
        ColumnSpec('product_type', ColumnType.BOUNDED_STRING, nullable=True),
        ColumnSpec('created_at', ColumnType.DATETIME, nullable=True),
        ColumnSpec('updated_at', ColumnType.DATETIME, nullable=True),
    ]


def derive_columns(sample) -> list[ColumnSpec]:
    """One NOT NULL column per scalar field of the sample record.

    A null sample value gives a nullable bounded string, since the sample row
    itself has to fit. Fields beyond the canonical ones are nullable so that
    later payloads which omit them still insert, and so are the canonical
    fields the catalog itself allows to be null.
    """
    canonical = {column_name(name) for name in CANONICAL_FIELDS} - NULLABLE_FIELDS
    columns = {}
    for name, value in sample.scalar_items():
        if name == PRIMARY_KEY or name in columns or not is_scalar(value):
            continue
        nullable = name != UNIQUE_COLUMN and (value is None or name not in canonical)
        columns[name] = ColumnSpec(name, infer_column_type(value), nullable=nullable)
    return list(columns.values())


def validate_identifier(name, kind='column'):
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise SchemaError(f"Invalid {kind} name: {name!r}")
    return name


def build_model(table_name, columns):
    """A Django model bound to ``table_name`` with the given columns."""
    attrs = {
        '__module__': __name__,
        PRIMARY_KEY: models.BigAutoField(primary_key=True),
    }

    class Meta:
        apps = Apps()
        app_label = 'catalog_sync'
        db_table = table_name

    attrs['Meta'] = Meta
    for column in columns:
        attrs[column.attname] = column.to_field()
    model_name = 'Catalog' + ''.join(part.title() for part in table_name.split('_'))
    return type(model_name, (models.Model,), attrs)


def table_exists(table_name) -> bool:
    with connection.cursor() as cursor:
        return table_name in connection.introspection.table_names(cursor)


def _column_type_for(field_type) -> ColumnType:
    if 'Integer' in field_type or 'AutoField' in field_type:
        return ColumnType.INTEGER
    if 'Float' in field_type or 'Decimal' in field_type:
        return ColumnType.FLOAT
    if field_type == 'TextField':
        return ColumnType.TEXT
    if field_type == 'DateTimeField':
        return ColumnType.DATETIME
    return ColumnType.BOUNDED_STRING


def describe_table(table_name) -> list[ColumnSpec]:
    """Column specs of an existing table, primary key excluded."""
    introspection = connection.introspection
    columns = []
    with connection.cursor() as cursor:
        for info in introspection.get_table_description(cursor, table_name):
            if info.name == PRIMARY_KEY:
                continue
            try:
                field_type = introspection.get_field_type(info.type_code, info)
            except KeyError:
                field_type = 'TextField'
            if isinstance(field_type, tuple):
                field_type = field_type[0]
            columns.append(ColumnSpec(info.name, _column_type_for(field_type), nullable=bool(info.null_ok)))
    return columns


def create_table(table_name, columns) -> None:
    model = build_model(table_name, columns)
    try:
        with connection.schema_editor() as editor:
            editor.create_model(model)
    except DatabaseError as exc:
        raise SchemaError(f"Could not create table {table_name}: {exc}") from exc


def ensure_table(table_name, sample=None) -> list[ColumnSpec]:
    """Create ``table_name`` if missing and return its columns.

    Additive only: an existing table is never dropped or retyped, so repeated
    calls are no-ops whatever the sample looks like.
    """
    validate_identifier(table_name, kind='table')
    try:
        if table_exists(table_name):
            return describe_table(table_name)
    except DatabaseError as exc:
        raise SchemaError(f"Could not inspect table {table_name}: {exc}") from exc

    if sample is not None and sample.id is None:
        raise SchemaError(f"Sample record has no id, cannot key table {table_name}")
    columns = derive_columns(sample) if sample is not None else baseline_columns()
    for column in columns:
        validate_identifier(column.name)

    create_table(table_name, columns)
    logger.info(
        "Created table %s with columns %s",
        table_name, ', '.join(column.name for column in columns),
    )
    return columns
