"""
Entity IDs HTTP API - Handlers
==============================
Framework-agnostic handlers for the display-ID configuration screen.
Each handler takes a request contract and the injected dependencies and
returns a JSON-ready `{"ok": ..., "data" | "error": ...}` payload.
When an auth provider is wired, the X-API-KEY principal must cover the
request business before anything else runs.
"""

from __future__ import annotations

import logging
from typing import Any

from entity_ids.catalog.service import EditorState, grouping_tokens
from entity_ids.display_format.errors import (
    EntityNotFoundError,
    PersistenceError,
    PreviewError,
)
from entity_ids.display_format.serialization import serialize_display_format
from entity_ids.http_api.auth import authorize_business
from entity_ids.http_api.contracts import (
    EntityListRequest,
    EntityReadRequest,
    FormatPreviewHttpRequest,
    FormatSaveHttpRequest,
    FormatValidateHttpRequest,
)
from entity_ids.http_api.errors import (
    CODE_ENTITY_NOT_FOUND,
    CODE_HANDLER_EXECUTION_FAILED,
    CODE_INVALID_REQUEST,
    CODE_PERSISTENCE_ERROR,
    CODE_PREVIEW_FAILED,
    CODE_READ_MODEL_ERROR,
    error_response,
    success_response,
    validation_failed_response,
)

logger = logging.getLogger("entity_ids.http_api")


def _authorize(request, dependencies, headers) -> dict[str, Any] | None:
    return authorize_business(
        headers,
        request.business_id,
        getattr(dependencies, "auth_provider", None),
    )


def _not_found(exc: EntityNotFoundError) -> dict[str, Any]:
    return error_response(
        code=CODE_ENTITY_NOT_FOUND,
        message=str(exc),
        details={"entity_id": exc.entity_id},
    )


def _serialize_editor_state(state: EditorState) -> dict[str, Any]:
    return {
        "entity": state.entity.to_dict(),
        "form_values": state.form_values,
        "grouping_tokens": list(state.grouping_tokens),
        "max_counter": dict(state.max_counter),
        "max_counter_text": state.max_counter_text,
    }


# ══════════════════════════════════════════════════════════════
# READS
# ══════════════════════════════════════════════════════════════

def list_entities(
    request: EntityListRequest,
    dependencies,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    denied = _authorize(request, dependencies, headers)
    if denied is not None:
        return denied
    try:
        entities = dependencies.editor_service.list_entities(
            request.business_id,
            search=request.search,
        )
    except Exception as exc:
        logger.exception("Listing entities failed.")
        return error_response(
            code=CODE_READ_MODEL_ERROR,
            message="Failed to read entities.",
            details={"error_type": type(exc).__name__},
        )

    return success_response(
        {
            "items": [entity.to_dict() for entity in entities],
            "count": len(entities),
        }
    )


def get_entity_format(
    request: EntityReadRequest,
    dependencies,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    denied = _authorize(request, dependencies, headers)
    if denied is not None:
        return denied
    try:
        state = dependencies.editor_service.load_form(
            request.business_id,
            request.entity_id,
        )
    except EntityNotFoundError as exc:
        return _not_found(exc)
    except Exception as exc:
        logger.exception("Loading display format for %s failed.", request.entity_id)
        return error_response(
            code=CODE_READ_MODEL_ERROR,
            message="Failed to read entity display format.",
            details={"error_type": type(exc).__name__, "reason": str(exc)},
        )
    return success_response(_serialize_editor_state(state))


# ══════════════════════════════════════════════════════════════
# WRITES
# ══════════════════════════════════════════════════════════════

def post_format_validate(
    request: FormatValidateHttpRequest,
    dependencies,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    denied = _authorize(request, dependencies, headers)
    if denied is not None:
        return denied
    try:
        fmt, result = dependencies.editor_service.validate(request.values)
    except ValueError as exc:
        return error_response(code=CODE_INVALID_REQUEST, message=str(exc))

    if not result.ok:
        return validation_failed_response(result)
    return success_response(
        {
            "valid": True,
            "warnings": list(result.warnings),
            "display_format": serialize_display_format(fmt),
            "grouping_tokens": list(grouping_tokens(fmt)),
        }
    )


def post_format_save(
    request: FormatSaveHttpRequest,
    dependencies,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    denied = _authorize(request, dependencies, headers)
    if denied is not None:
        return denied
    try:
        outcome = dependencies.editor_service.save(
            request.business_id,
            request.entity_id,
            request.values,
        )
    except EntityNotFoundError as exc:
        return _not_found(exc)
    except PersistenceError as exc:
        return error_response(code=CODE_PERSISTENCE_ERROR, message=str(exc))
    except ValueError as exc:
        return error_response(code=CODE_INVALID_REQUEST, message=str(exc))
    except Exception as exc:
        logger.exception("Saving display format for %s failed.", request.entity_id)
        return error_response(
            code=CODE_HANDLER_EXECUTION_FAILED,
            message="Failed to save entity display format.",
            details={"error_type": type(exc).__name__},
        )

    if not outcome.saved:
        return validation_failed_response(outcome.validation)
    return success_response(
        {
            "saved": True,
            "entity_id": str(request.entity_id),
            "display_format": outcome.document,
            "warnings": list(outcome.validation.warnings),
        }
    )


def post_format_preview(
    request: FormatPreviewHttpRequest,
    dependencies,
    *,
    headers: dict[str, Any] | None = None,
) -> dict[str, Any]:
    denied = _authorize(request, dependencies, headers)
    if denied is not None:
        return denied
    try:
        outcome = dependencies.editor_service.preview(
            request.values,
            request.sample_record,
            request.simulated_counter,
            sample_date=request.sample_date,
        )
    except PreviewError as exc:
        return error_response(
            code=CODE_PREVIEW_FAILED,
            message="Preview could not be rendered.",
            details={
                "problems": list(exc.problems),
                "tokens": [t.to_dict() for t in exc.tokens],
            },
        )
    except ValueError as exc:
        return error_response(code=CODE_INVALID_REQUEST, message=str(exc))

    if not outcome.validation.ok:
        return validation_failed_response(outcome.validation)
    return success_response(
        {
            "display_id": outcome.display_id,
            "tokens": [t.to_dict() for t in outcome.tokens],
            "required_fields": list(outcome.required_fields),
            "counter_key": outcome.counter_key,
            "counter_key_problems": list(outcome.counter_key_problems),
            "warnings": list(outcome.validation.warnings),
        }
    )
