from django.db import connection


def drop_table(table_name):
    with connection.cursor() as cursor:
        if table_name in connection.introspection.table_names(cursor):
            cursor.execute(f"DROP TABLE {connection.ops.quote_name(table_name)}")


def fetch_rows(table_name):
    with connection.cursor() as cursor:
        cursor.execute(f"SELECT * FROM {connection.ops.quote_name(table_name)} ORDER BY id")
        names = [col[0] for col in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]


def shirt_payload():
    return {
        "id": 1,
        "title": "Shirt",
        "body_html": "<p>x</p>",
        "vendor": "Acme",
        "product_type": "Apparel",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
    }


def catalog_payload():
    return [
        shirt_payload(),
        {"id": 2, "title": "Mug", "body_html": None, "vendor": "Acme", "product_type": "Kitchen",
         "created_at": "2024-02-01T10:30:00-02:00", "updated_at": "2024-02-03T08:00:00+00:00",
         "handle": "mug", "variants": [{"id": 21, "price": "9.99"}], "options": {"size": "L"}},
        {"id": 3, "title": "Cap", "body_html": "", "vendor": "Hatco", "product_type": "Apparel",
         "created_at": "2024-03-05T00:00:00Z", "updated_at": "2024-03-05T00:00:00Z"},
    ]
