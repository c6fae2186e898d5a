"""
Entity IDs Django Adapter Views
===============================
Pass-through HTTP views over entity_ids/http_api handlers.
"""

from __future__ import annotations

import json
import uuid
from datetime import date
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from entity_ids.http_api.contracts import (
    EntityListRequest,
    EntityReadRequest,
    FormatPreviewHttpRequest,
    FormatSaveHttpRequest,
    FormatValidateHttpRequest,
)
from entity_ids.http_api.errors import error_response
from entity_ids.http_api.handlers import (
    get_entity_format,
    list_entities,
    post_format_preview,
    post_format_save,
    post_format_validate,
)


def _headers_from_request(request: HttpRequest) -> dict[str, str]:
    return {str(key): str(value) for key, value in request.headers.items()}


def _json_error(code: str, message: str, status: int = 400) -> JsonResponse:
    return JsonResponse(
        error_response(code=code, message=message, details={}),
        status=status,
    )


def _parse_uuid(value: Any, field_name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except Exception as exc:
        raise ValueError(f"{field_name} must be a valid UUID.") from exc


def _parse_optional_date(value: Any, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValueError(f"{field_name} must be an ISO date (YYYY-MM-DD).") from exc


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except Exception as exc:
        raise ValueError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object.")
    return parsed


def _require_object(body: dict[str, Any], key: str) -> dict[str, Any]:
    value = body.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be an object.")
    return value


def _business_id_from_query(request: HttpRequest) -> uuid.UUID:
    business_id_raw = request.GET.get("business_id")
    if business_id_raw is None:
        raise ValueError("business_id is required.")
    return _parse_uuid(business_id_raw, "business_id")


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


def _dispatch_write(handler, contract_factory, request: HttpRequest, **kwargs) -> JsonResponse:
    try:
        body = _parse_json_body(request)
        business_id = _parse_uuid(body.get("business_id"), "business_id")
        contract = contract_factory(body=body, business_id=business_id, **kwargs)
    except (ValueError, KeyError) as exc:
        return _json_error("INVALID_REQUEST", str(exc), status=400)
    return JsonResponse(
        handler(contract, build_dependencies(), headers=_headers_from_request(request))
    )


def _validate_contract_factory(*, body, business_id):
    return FormatValidateHttpRequest(
        business_id=business_id,
        values=_require_object(body, "values"),
    )


def _save_contract_factory(*, body, business_id, entity_id):
    return FormatSaveHttpRequest(
        business_id=business_id,
        entity_id=entity_id,
        values=_require_object(body, "values"),
    )


def _preview_contract_factory(*, body, business_id):
    return FormatPreviewHttpRequest(
        business_id=business_id,
        values=_require_object(body, "values"),
        sample_record=_require_object(body, "sample_record"),
        simulated_counter=body.get("simulated_counter", 1),
        sample_date=_parse_optional_date(body.get("sample_date"), "sample_date"),
    )


@csrf_exempt
def entities_list_view(request: HttpRequest) -> JsonResponse:
    if request.method != "GET":
        return _method_not_allowed()
    try:
        contract = EntityListRequest(
            business_id=_business_id_from_query(request),
            search=request.GET.get("search"),
        )
    except ValueError as exc:
        return _json_error("INVALID_REQUEST", str(exc), status=400)
    return JsonResponse(
        list_entities(contract, build_dependencies(), headers=_headers_from_request(request))
    )


@csrf_exempt
def display_format_view(request: HttpRequest, entity_id: uuid.UUID) -> JsonResponse:
    if request.method == "GET":
        try:
            contract = EntityReadRequest(
                business_id=_business_id_from_query(request),
                entity_id=entity_id,
            )
        except ValueError as exc:
            return _json_error("INVALID_REQUEST", str(exc), status=400)
        return JsonResponse(
            get_entity_format(
                contract,
                build_dependencies(),
                headers=_headers_from_request(request),
            )
        )
    if request.method == "POST":
        return _dispatch_write(
            post_format_save,
            _save_contract_factory,
            request,
            entity_id=entity_id,
        )
    return _method_not_allowed()


@csrf_exempt
def display_format_validate_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_format_validate, _validate_contract_factory, request)


@csrf_exempt
def display_format_preview_view(request: HttpRequest) -> JsonResponse:
    if request.method != "POST":
        return _method_not_allowed()
    return _dispatch_write(post_format_preview, _preview_contract_factory, request)
