"""
Entity IDs Django Adapter Wiring
================================
Constructs HttpApiDependencies for the adapter runtime.

ENTITY_IDS_CATALOG selects the catalog:
- "db":     Django ORM catalog and direct lookup-table reads
- "memory": seeded in-memory catalog for local smoke usage

Callers authenticate with X-API-KEY; ENTITY_IDS_API_KEYS maps each key to
the businesses it may configure.
"""

from __future__ import annotations

import threading
import uuid

from django.conf import settings

from entity_ids.catalog import DisplayFormatEditorService, EntityDetail, InMemoryEntityCatalog
from entity_ids.catalog_store.provider import DbEntityCatalog, DbLookupResolver
from entity_ids.display_format import InMemoryLookupResolver
from entity_ids.http_api.auth import AuthPrincipal, InMemoryAuthProvider
from entity_ids.http_api.dependencies import HttpApiDependencies

CATALOG_DB = "db"
CATALOG_MEMORY = "memory"

DEV_BUSINESS_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
DEV_ENTITY_ID = uuid.UUID("44444444-4444-4444-4444-444444444444")
DEV_LOCATION_ID = "loc-1"
DEV_API_KEY = "dev-entity-ids-admin-key"

_DEPENDENCIES_LOCK = threading.Lock()
_DEPENDENCIES: HttpApiDependencies | None = None


def _build_memory_service() -> DisplayFormatEditorService:
    catalog = InMemoryEntityCatalog()
    catalog.register_entity(
        DEV_BUSINESS_ID,
        EntityDetail(
            entity_id=DEV_ENTITY_ID,
            schema_name="external",
            type_name="assets",
            display_format={"table_name": "external.assets"},
            max_counter={},
        ),
    )
    resolver = InMemoryLookupResolver()
    resolver.add_row("identity", "locations", DEV_LOCATION_ID, {"short_code": "HQ"})
    return DisplayFormatEditorService(
        reader=catalog,
        writer=catalog,
        lookup_resolver=resolver,
    )


def _build_db_service() -> DisplayFormatEditorService:
    catalog = DbEntityCatalog()
    return DisplayFormatEditorService(
        reader=catalog,
        writer=catalog,
        lookup_resolver=DbLookupResolver(),
    )


def _build_auth_provider() -> InMemoryAuthProvider:
    api_keys = getattr(settings, "ENTITY_IDS_API_KEYS", None)
    if api_keys is None:
        api_keys = {DEV_API_KEY: [str(DEV_BUSINESS_ID)]}
    return InMemoryAuthProvider(
        {
            api_key: AuthPrincipal(
                actor_id=f"api-key:{index}",
                allowed_business_ids=tuple(business_ids),
            )
            for index, (api_key, business_ids) in enumerate(sorted(api_keys.items()))
        }
    )


def _create_dependencies() -> HttpApiDependencies:
    backend = getattr(settings, "ENTITY_IDS_CATALOG", CATALOG_DB)
    if backend == CATALOG_MEMORY:
        service = _build_memory_service()
    elif backend == CATALOG_DB:
        service = _build_db_service()
    else:
        raise ValueError(
            f"ENTITY_IDS_CATALOG '{backend}' is not valid. "
            f"Must be one of: {sorted({CATALOG_DB, CATALOG_MEMORY})}"
        )
    return HttpApiDependencies(
        editor_service=service,
        auth_provider=_build_auth_provider(),
    )


def build_dependencies() -> HttpApiDependencies:
    """
    Lazy singleton wiring for adapter runtime.
    """
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        if _DEPENDENCIES is None:
            _DEPENDENCIES = _create_dependencies()
        return _DEPENDENCIES


def reset_dependencies() -> None:
    """Drop the cached wiring so the next request rebuilds it (tests)."""
    global _DEPENDENCIES
    with _DEPENDENCIES_LOCK:
        _DEPENDENCIES = None
