"""
Entity IDs HTTP API - Auth
==========================
API-key principals and business scoping for the display format endpoints.

Doctrine:
- The caller is identified by the X-API-KEY header only.
- A principal may read and configure only the businesses it lists.
- Resolution is deterministic; failures come back as error payloads.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from entity_ids.http_api.errors import error_response

HEADER_API_KEY = "x-api-key"

CODE_ACTOR_REQUIRED_MISSING = "ACTOR_REQUIRED_MISSING"
CODE_ACTOR_INVALID = "ACTOR_INVALID"
CODE_ACTOR_UNAUTHORIZED_BUSINESS = "ACTOR_UNAUTHORIZED_BUSINESS"


def _canonical_uuid_string(value: Any, *, field_name: str) -> str:
    try:
        return str(uuid.UUID(str(value).strip()))
    except Exception as exc:
        raise ValueError(f"{field_name} must be a valid UUID string.") from exc


@dataclass(frozen=True)
class AuthPrincipal:
    actor_id: str
    allowed_business_ids: tuple[str, ...]

    def __post_init__(self):
        if not self.actor_id or not isinstance(self.actor_id, str):
            raise ValueError("actor_id must be a non-empty string.")
        if not isinstance(self.allowed_business_ids, tuple):
            raise ValueError("allowed_business_ids must be a tuple.")
        normalized = {
            _canonical_uuid_string(value, field_name="allowed_business_ids")
            for value in self.allowed_business_ids
        }
        object.__setattr__(self, "allowed_business_ids", tuple(sorted(normalized)))

    def can_access(self, business_id: uuid.UUID) -> bool:
        return str(business_id) in self.allowed_business_ids


class AuthProvider(Protocol):
    def resolve_api_key(self, api_key: str) -> AuthPrincipal | None:
        ...


class InMemoryAuthProvider:
    """
    Deterministic in-memory auth provider for tests/bootstrap.
    """

    def __init__(self, api_key_to_principal: Mapping[str, AuthPrincipal] | None = None):
        normalized: dict[str, AuthPrincipal] = {}
        for api_key, principal in sorted(
            dict(api_key_to_principal or {}).items(),
            key=lambda item: item[0],
        ):
            if not isinstance(api_key, str) or not api_key.strip():
                raise ValueError("API key must be a non-empty string.")
            if not isinstance(principal, AuthPrincipal):
                raise ValueError("Principal must be AuthPrincipal.")
            normalized[api_key] = principal
        self._api_key_to_principal = normalized

    def resolve_api_key(self, api_key: str) -> AuthPrincipal | None:
        if not isinstance(api_key, str):
            return None
        return self._api_key_to_principal.get(api_key)


def _normalize_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    return {
        str(key).strip().lower(): str(value).strip()
        for key, value in (headers or {}).items()
    }


def authorize_business(
    headers: Mapping[str, Any] | None,
    business_id: uuid.UUID,
    auth_provider: Optional[AuthProvider],
) -> Optional[dict[str, Any]]:
    """
    Return an error payload when the caller may not act on business_id,
    or None when it may. No provider configured means no check.
    """
    if auth_provider is None:
        return None

    api_key = _normalize_headers(headers).get(HEADER_API_KEY)
    if not api_key:
        return error_response(
            code=CODE_ACTOR_REQUIRED_MISSING,
            message="Missing required header X-API-KEY.",
        )

    principal = auth_provider.resolve_api_key(api_key)
    if principal is None:
        return error_response(
            code=CODE_ACTOR_INVALID,
            message="API key is not recognized.",
        )

    if not principal.can_access(business_id):
        return error_response(
            code=CODE_ACTOR_UNAUTHORIZED_BUSINESS,
            message="Actor is not authorized for this business.",
            details={"actor_id": principal.actor_id, "business_id": str(business_id)},
        )
    return None
