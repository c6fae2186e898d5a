"""
Entity IDs - Catalog Public API
=================================
"""

from entity_ids.catalog.models import EntityDetail, EntitySummary
from entity_ids.catalog.provider import (
    EntityCatalogReader,
    EntityCatalogWriter,
    InMemoryEntityCatalog,
)
from entity_ids.catalog.service import (
    DisplayFormatEditorService,
    EditorState,
    PreviewOutcome,
    SaveOutcome,
    grouping_tokens,
)

__all__ = [
    "EntitySummary",
    "EntityDetail",
    "EntityCatalogReader",
    "EntityCatalogWriter",
    "InMemoryEntityCatalog",
    "DisplayFormatEditorService",
    "EditorState",
    "SaveOutcome",
    "PreviewOutcome",
    "grouping_tokens",
]
