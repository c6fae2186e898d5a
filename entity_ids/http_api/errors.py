"""
Entity IDs HTTP API - Error Mapping
===================================
Stable transport error mapping for validation issues and handler failures.
"""

from __future__ import annotations

from typing import Any, Optional

from entity_ids.display_format.validation import ValidationResult
from entity_ids.http_api.contracts import HttpApiErrorBody, HttpApiResponse

CODE_INVALID_REQUEST = "INVALID_REQUEST"
CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
CODE_ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
CODE_PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
CODE_PREVIEW_FAILED = "PREVIEW_FAILED"
CODE_READ_MODEL_ERROR = "READ_MODEL_ERROR"
CODE_HANDLER_EXECUTION_FAILED = "HANDLER_EXECUTION_FAILED"


def error_response(
    *,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(
        ok=False,
        error=HttpApiErrorBody(
            code=code,
            message=message,
            details=details or {},
        ),
    ).to_dict()


def success_response(
    data: Any,
    *,
    meta: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return HttpApiResponse(ok=True, data=data, meta=meta).to_dict()


def validation_failed_response(result: ValidationResult) -> dict[str, Any]:
    count = len(result.errors)
    return error_response(
        code=CODE_VALIDATION_FAILED,
        message=f"Display format has {count} problem{'s' if count != 1 else ''}.",
        details={
            "errors": [e.to_dict() for e in result.errors],
            "warnings": list(result.warnings),
        },
    )
