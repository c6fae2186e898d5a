"""
Entity IDs - Catalog Store Relational Models
==============================================
One row per entity type of a business. `display_format` is the document
the editor replaces on save; `max_counter` belongs to the issuance
trigger and is read-only here.
"""

from __future__ import annotations

import uuid

from django.db import models


class CatalogEntity(models.Model):
    entity_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_id = models.UUIDField(db_index=True)
    entity_schema = models.CharField(max_length=63)
    entity_type = models.CharField(max_length=63)
    display_format = models.JSONField(null=True, blank=True)
    max_counter = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "entity_ids_catalog_entities"
        ordering = ["business_id", "entity_schema", "entity_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "entity_schema", "entity_type"],
                name="uq_catalog_entity_business_schema_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.entity_schema}.{self.entity_type} ({self.business_id})"
