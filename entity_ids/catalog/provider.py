"""
Entity IDs - Catalog Provider
===============================
Protocols for reading and writing the entity catalog, plus an in-memory
implementation.

Doctrine:
- Providers are a dependency injection point (testable, swappable).
- Every call names its business explicitly; there is no ambient tenant.
- Saves replace the whole display_format document. No partial patches.
- max_counter is never written through this interface.
- The DB provider lives in entity_ids.catalog_store.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import Any, Mapping, Optional, Protocol

from entity_ids.catalog.models import EntityDetail, EntitySummary
from entity_ids.display_format.errors import EntityNotFoundError, PersistenceError


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------

class EntityCatalogReader(Protocol):
    def list_entities(self, business_id: uuid.UUID) -> tuple[EntitySummary, ...]:
        """Entity types of the business, ordered by schema then type."""
        ...

    def get_entity(self, business_id: uuid.UUID, entity_id: uuid.UUID) -> EntityDetail:
        """Raise EntityNotFoundError if the entity is not in this business."""
        ...


class EntityCatalogWriter(Protocol):
    def save_format(
        self,
        business_id: uuid.UUID,
        entity_id: uuid.UUID,
        document: Mapping[str, Any],
    ) -> None:
        """Replace the stored display_format. Raise PersistenceError on failure."""
        ...


# ---------------------------------------------------------------------------
# InMemory catalog (deterministic, thread-safe for tests)
# ---------------------------------------------------------------------------

class InMemoryEntityCatalog:
    """
    Thread-safe in-memory catalog. Used in tests and local wiring.

    `fail_saves_with` makes every save raise PersistenceError with that
    message, to exercise the failure path.
    """

    def __init__(self, entities: tuple[tuple[uuid.UUID, EntityDetail], ...] = ()):
        self._lock = threading.Lock()
        # Key: (business_id, entity_id)
        self._entities: dict[tuple[uuid.UUID, uuid.UUID], EntityDetail] = {}
        self.fail_saves_with: Optional[str] = None
        self.save_count = 0
        for business_id, detail in entities:
            self._entities[(business_id, detail.entity_id)] = detail

    def register_entity(self, business_id: uuid.UUID, detail: EntityDetail) -> None:
        with self._lock:
            self._entities[(business_id, detail.entity_id)] = detail

    def list_entities(self, business_id: uuid.UUID) -> tuple[EntitySummary, ...]:
        with self._lock:
            summaries = [
                detail.summary
                for (owner, _), detail in self._entities.items()
                if owner == business_id
            ]
        return tuple(sorted(summaries, key=lambda s: s.sort_key()))

    def get_entity(self, business_id: uuid.UUID, entity_id: uuid.UUID) -> EntityDetail:
        with self._lock:
            detail = self._entities.get((business_id, entity_id))
        if detail is None:
            raise EntityNotFoundError(str(entity_id))
        return copy.deepcopy(detail)

    def save_format(
        self,
        business_id: uuid.UUID,
        entity_id: uuid.UUID,
        document: Mapping[str, Any],
    ) -> None:
        with self._lock:
            if self.fail_saves_with is not None:
                raise PersistenceError(self.fail_saves_with)
            detail = self._entities.get((business_id, entity_id))
            if detail is None:
                raise EntityNotFoundError(str(entity_id))
            self._entities[(business_id, entity_id)] = EntityDetail(
                entity_id=detail.entity_id,
                schema_name=detail.schema_name,
                type_name=detail.type_name,
                display_format=copy.deepcopy(dict(document)),
                max_counter=detail.max_counter,
            )
            self.save_count += 1
