"""
Entity IDs HTTP API - Dependencies
==================================
Injected services for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from entity_ids.catalog.service import DisplayFormatEditorService
from entity_ids.http_api.auth import AuthProvider


@dataclass(frozen=True)
class HttpApiDependencies:
    editor_service: DisplayFormatEditorService
    auth_provider: Optional[AuthProvider] = None
