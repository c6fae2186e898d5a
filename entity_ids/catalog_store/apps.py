"""
Entity IDs - Catalog Store App Configuration
==============================================
Persistent entity catalog: entity types with their display format
document and the trigger-maintained counter state.
"""

from django.apps import AppConfig


class EntityCatalogStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "entity_ids.catalog_store"
    label = "entity_ids_catalog_store"
    verbose_name = "Entity IDs Catalog Store"
