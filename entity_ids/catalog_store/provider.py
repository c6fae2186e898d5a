"""
Entity IDs - Catalog Store DB Providers
=========================================
Django ORM implementation of the catalog reader/writer, and a lookup
resolver that reads lookup tables directly for previews.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Mapping, Optional

from django.db import DatabaseError, connection, transaction

from entity_ids.catalog.models import EntityDetail, EntitySummary
from entity_ids.catalog_store.models import CatalogEntity
from entity_ids.display_format.errors import EntityNotFoundError, PersistenceError

logger = logging.getLogger("entity_ids.catalog")

LOOKUP_KEY_COLUMN = "id"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _to_detail(row: CatalogEntity) -> EntityDetail:
    return EntityDetail(
        entity_id=row.entity_id,
        schema_name=row.entity_schema,
        type_name=row.entity_type,
        display_format=row.display_format,
        max_counter=row.max_counter or {},
    )


class DbEntityCatalog:
    def list_entities(self, business_id: uuid.UUID) -> tuple[EntitySummary, ...]:
        rows = (
            CatalogEntity.objects.filter(business_id=business_id)
            .order_by("entity_schema", "entity_type", "entity_id")
            .only("entity_id", "entity_schema", "entity_type")
        )
        return tuple(
            EntitySummary(
                entity_id=row.entity_id,
                schema_name=row.entity_schema,
                type_name=row.entity_type,
            )
            for row in rows
        )

    def get_entity(self, business_id: uuid.UUID, entity_id: uuid.UUID) -> EntityDetail:
        row = CatalogEntity.objects.filter(
            business_id=business_id,
            entity_id=entity_id,
        ).first()
        if row is None:
            raise EntityNotFoundError(str(entity_id))
        return _to_detail(row)

    def save_format(
        self,
        business_id: uuid.UUID,
        entity_id: uuid.UUID,
        document: Mapping[str, Any],
    ) -> None:
        try:
            with transaction.atomic():
                updated = CatalogEntity.objects.filter(
                    business_id=business_id,
                    entity_id=entity_id,
                ).update(display_format=dict(document))
        except DatabaseError as exc:
            raise PersistenceError(f"Update failed: {exc}", cause=exc) from exc
        if updated == 0:
            raise EntityNotFoundError(str(entity_id))


class DbLookupResolver:
    """
    Reads `lookup_value_field` from the lookup table row whose primary
    key column (`id`) equals the key value.

    Identifiers are restricted to plain SQL names and quoted by the
    connection. Schema qualification is used on PostgreSQL only.
    """

    def __init__(self, key_column: str = LOOKUP_KEY_COLUMN):
        self._key_column = self._identifier(key_column, "key_column")

    @staticmethod
    def _identifier(value: str, field_name: str) -> str:
        if not isinstance(value, str) or not _IDENTIFIER.match(value):
            raise ValueError(f"{field_name} must be a plain SQL identifier.")
        return value

    def _table_name(self, lookup_schema: str, lookup_table: str) -> str:
        quote = connection.ops.quote_name
        table = quote(self._identifier(lookup_table, "lookup_table"))
        if lookup_schema and connection.vendor == "postgresql":
            return f"{quote(self._identifier(lookup_schema, 'lookup_schema'))}.{table}"
        return table

    def resolve(
        self,
        *,
        lookup_schema: str,
        lookup_table: str,
        lookup_value_field: str,
        key_value: Any,
    ) -> Optional[str]:
        quote = connection.ops.quote_name
        column = quote(self._identifier(lookup_value_field, "lookup_value_field"))
        sql = (
            f"SELECT {column} FROM {self._table_name(lookup_schema, lookup_table)} "
            f"WHERE {quote(self._key_column)} = %s"
        )
        with connection.cursor() as cursor:
            cursor.execute(sql, [str(key_value)])
            row = cursor.fetchone()
        if row is None or row[0] is None:
            logger.debug(
                "No %s.%s row for key %r.", lookup_schema, lookup_table, key_value
            )
            return None
        return str(row[0])
