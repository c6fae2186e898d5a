"""
Entity IDs Django HTTP adapter.
Thin framework glue over entity_ids/http_api handlers.
"""

from adapters.django_api.wiring import (
    DEV_API_KEY,
    DEV_BUSINESS_ID,
    DEV_ENTITY_ID,
    build_dependencies,
    reset_dependencies,
)

__all__ = [
    "DEV_API_KEY",
    "DEV_BUSINESS_ID",
    "DEV_ENTITY_ID",
    "build_dependencies",
    "reset_dependencies",
]
