"""
Entity IDs HTTP API
===================
"""

from entity_ids.http_api.auth import (
    AuthPrincipal,
    AuthProvider,
    InMemoryAuthProvider,
    authorize_business,
)
from entity_ids.http_api.contracts import (
    EntityListRequest,
    EntityReadRequest,
    FormatPreviewHttpRequest,
    FormatSaveHttpRequest,
    FormatValidateHttpRequest,
    HttpApiErrorBody,
    HttpApiResponse,
)
from entity_ids.http_api.dependencies import HttpApiDependencies
from entity_ids.http_api.handlers import (
    get_entity_format,
    list_entities,
    post_format_preview,
    post_format_save,
    post_format_validate,
)

__all__ = [
    "AuthPrincipal",
    "AuthProvider",
    "InMemoryAuthProvider",
    "authorize_business",
    "EntityListRequest",
    "EntityReadRequest",
    "FormatValidateHttpRequest",
    "FormatSaveHttpRequest",
    "FormatPreviewHttpRequest",
    "HttpApiErrorBody",
    "HttpApiResponse",
    "HttpApiDependencies",
    "list_entities",
    "get_entity_format",
    "post_format_validate",
    "post_format_save",
    "post_format_preview",
]
