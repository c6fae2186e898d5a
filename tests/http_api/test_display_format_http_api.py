from __future__ import annotations

import uuid
from datetime import date

import pytest

from entity_ids.catalog import (
    DisplayFormatEditorService,
    EntityDetail,
    InMemoryEntityCatalog,
)
from entity_ids.display_format import InMemoryLookupResolver
from entity_ids.http_api import (
    EntityListRequest,
    EntityReadRequest,
    FormatPreviewHttpRequest,
    FormatSaveHttpRequest,
    FormatValidateHttpRequest,
    AuthPrincipal,
    HttpApiDependencies,
    InMemoryAuthProvider,
    get_entity_format,
    list_entities,
    post_format_preview,
    post_format_save,
    post_format_validate,
)


BUSINESS_ID = uuid.uuid5(uuid.NAMESPACE_URL, "entity-ids-http-business")
ENTITY_ID = uuid.uuid5(uuid.NAMESPACE_URL, "entity-ids-http-assets")


def _values(**overrides) -> dict:
    values = {
        "format": "AST-{LOCATION_CODE}-{DATE}-{COUNTER}",
        "date_field": "request_date",
        "counter_padding": 4,
        "reset_period": "CALENDAR_YEAR",
        "reset_group": "LOCATION_CODE",
        "token_config": [
            {
                "type": "lookup",
                "token": "LOCATION_CODE",
                "entity_field": "location_id",
                "lookup_schema": "identity",
                "lookup_table": "locations",
                "lookup_value_field": "short_code",
            },
            {"type": "date_part", "token": "DATE", "date_format": "YYYY"},
            {"type": "counter", "token": "COUNTER"},
        ],
    }
    values.update(overrides)
    return values


def _dependencies() -> tuple[HttpApiDependencies, InMemoryEntityCatalog]:
    catalog = InMemoryEntityCatalog()
    catalog.register_entity(
        BUSINESS_ID,
        EntityDetail(
            entity_id=ENTITY_ID,
            schema_name="external",
            type_name="assets",
            max_counter={"2024|HQ": 3},
        ),
    )
    resolver = InMemoryLookupResolver()
    resolver.add_row("identity", "locations", "loc-1", {"short_code": "HQ"})
    service = DisplayFormatEditorService(reader=catalog, writer=catalog, lookup_resolver=resolver)
    return HttpApiDependencies(editor_service=service), catalog


def test_list_entities_success_shape() -> None:
    dependencies, _ = _dependencies()
    payload = list_entities(EntityListRequest(business_id=BUSINESS_ID), dependencies)
    assert payload["ok"] is True
    assert payload["data"]["count"] == 1
    assert payload["data"]["items"][0]["label"] == "external.assets"


def test_list_entities_read_failure_is_mapped() -> None:
    class BrokenReader:
        def list_entities(self, business_id):
            raise RuntimeError("boom")

    service = DisplayFormatEditorService(reader=BrokenReader(), writer=InMemoryEntityCatalog())
    payload = list_entities(
        EntityListRequest(business_id=BUSINESS_ID),
        HttpApiDependencies(editor_service=service),
    )
    assert payload["ok"] is False
    assert payload["error"]["code"] == "READ_MODEL_ERROR"
    assert payload["error"]["details"]["error_type"] == "RuntimeError"


def test_get_entity_format_defaults_and_counter() -> None:
    dependencies, _ = _dependencies()
    payload = get_entity_format(
        EntityReadRequest(business_id=BUSINESS_ID, entity_id=ENTITY_ID),
        dependencies,
    )
    assert payload["ok"] is True
    assert payload["data"]["form_values"]["counter_padding"] == 4
    assert payload["data"]["max_counter"] == {"2024|HQ": 3}


def test_get_entity_format_not_found() -> None:
    dependencies, _ = _dependencies()
    payload = get_entity_format(
        EntityReadRequest(business_id=BUSINESS_ID, entity_id=uuid.uuid4()),
        dependencies,
    )
    assert payload["error"]["code"] == "ENTITY_NOT_FOUND"


def test_validate_reports_every_issue() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_validate(
        FormatValidateHttpRequest(
            business_id=BUSINESS_ID,
            values=_values(format="{A}-{B}-{COUNTER}", reset_group="COUNTER"),
        ),
        dependencies,
    )
    assert payload["ok"] is False
    assert payload["error"]["code"] == "VALIDATION_FAILED"
    codes = sorted(e["code"] for e in payload["error"]["details"]["errors"])
    assert codes == [
        "INVALID_RESET_POLICY",
        "MISSING_TOKEN_CONFIG",
        "MISSING_TOKEN_CONFIG",
    ]


def test_validate_success_returns_document() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_validate(
        FormatValidateHttpRequest(business_id=BUSINESS_ID, values=_values()),
        dependencies,
    )
    assert payload["ok"] is True
    assert payload["data"]["grouping_tokens"] == ["LOCATION_CODE"]
    assert payload["data"]["display_format"]["counter_config"]["reset_group"] == "LOCATION_CODE"


def test_validate_bad_period_is_invalid_request() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_validate(
        FormatValidateHttpRequest(business_id=BUSINESS_ID, values=_values(reset_period="WEEKLY")),
        dependencies,
    )
    assert payload["error"]["code"] == "INVALID_REQUEST"


def test_save_then_read_back() -> None:
    dependencies, catalog = _dependencies()
    payload = post_format_save(
        FormatSaveHttpRequest(business_id=BUSINESS_ID, entity_id=ENTITY_ID, values=_values()),
        dependencies,
    )
    assert payload["ok"] is True
    assert payload["data"]["saved"] is True
    stored = catalog.get_entity(BUSINESS_ID, ENTITY_ID).display_format
    assert stored["format"] == "AST-{LOCATION_CODE}-{DATE}-{COUNTER}"


def test_save_persistence_error_message_verbatim() -> None:
    dependencies, catalog = _dependencies()
    catalog.fail_saves_with = "duplicate key value violates unique constraint"
    payload = post_format_save(
        FormatSaveHttpRequest(business_id=BUSINESS_ID, entity_id=ENTITY_ID, values=_values()),
        dependencies,
    )
    assert payload["error"]["code"] == "PERSISTENCE_ERROR"
    assert payload["error"]["message"] == "duplicate key value violates unique constraint"


def test_save_validation_failure_not_persisted() -> None:
    dependencies, catalog = _dependencies()
    payload = post_format_save(
        FormatSaveHttpRequest(
            business_id=BUSINESS_ID,
            entity_id=ENTITY_ID,
            values=_values(counter_padding=None),
        ),
        dependencies,
    )
    assert payload["error"]["code"] == "VALIDATION_FAILED"
    assert catalog.save_count == 0


def test_preview_success() -> None:
    dependencies, catalog = _dependencies()
    payload = post_format_preview(
        FormatPreviewHttpRequest(
            business_id=BUSINESS_ID,
            values=_values(),
            sample_record={"location_id": "loc-1"},
            simulated_counter=7,
            sample_date=date(2024, 1, 1),
        ),
        dependencies,
    )
    assert payload["data"]["display_id"] == "AST-HQ-2024-0007"
    assert payload["data"]["counter_key"] == "2024|HQ"
    assert catalog.get_entity(BUSINESS_ID, ENTITY_ID).max_counter == {"2024|HQ": 3}


def test_preview_failure_lists_problems() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_preview(
        FormatPreviewHttpRequest(business_id=BUSINESS_ID, values=_values()),
        dependencies,
    )
    assert payload["error"]["code"] == "PREVIEW_FAILED"
    assert len(payload["error"]["details"]["problems"]) == 2


def test_contracts_reject_bad_input() -> None:
    with pytest.raises(ValueError, match="business_id"):
        EntityListRequest(business_id="not-a-uuid")
    with pytest.raises(ValueError, match="simulated_counter"):
        FormatPreviewHttpRequest(business_id=BUSINESS_ID, values={}, simulated_counter=0)


def test_preview_reports_each_token() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_preview(
        FormatPreviewHttpRequest(
            business_id=BUSINESS_ID,
            values=_values(),
            sample_record={"location_id": "loc-1"},
            simulated_counter=7,
            sample_date=date(2024, 1, 1),
        ),
        dependencies,
    )
    assert payload["data"]["tokens"] == [
        {"token": "LOCATION_CODE", "token_type": "lookup", "value": "HQ", "available": True},
        {"token": "DATE", "token_type": "date_part", "value": "2024", "available": True},
        {"token": "COUNTER", "token_type": "counter", "value": "0007", "available": True},
    ]
    assert payload["data"]["required_fields"] == ["location_id"]


def test_preview_failure_marks_unresolved_tokens() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_preview(
        FormatPreviewHttpRequest(business_id=BUSINESS_ID, values=_values()),
        dependencies,
    )
    available = {t["token"]: t["available"] for t in payload["error"]["details"]["tokens"]}
    assert available == {"LOCATION_CODE": False, "DATE": False, "COUNTER": True}


def test_preview_without_date_still_renders() -> None:
    dependencies, _ = _dependencies()
    payload = post_format_preview(
        FormatPreviewHttpRequest(
            business_id=BUSINESS_ID,
            values=_values(
                format="X-{COUNTER}",
                reset_group=None,
                token_config=[{"type": "counter", "token": "COUNTER"}],
            ),
            simulated_counter=7,
        ),
        dependencies,
    )
    assert payload["ok"] is True
    assert payload["data"]["display_id"] == "X-0007"
    assert payload["data"]["counter_key"] is None
    assert payload["data"]["counter_key_problems"]


def _authorized_dependencies() -> HttpApiDependencies:
    dependencies, _ = _dependencies()
    provider = InMemoryAuthProvider(
        {"editor-key": AuthPrincipal(actor_id="editor", allowed_business_ids=(str(BUSINESS_ID),))}
    )
    return HttpApiDependencies(editor_service=dependencies.editor_service, auth_provider=provider)


def test_auth_accepts_key_for_business() -> None:
    payload = list_entities(
        EntityListRequest(business_id=BUSINESS_ID),
        _authorized_dependencies(),
        headers={"X-API-KEY": "editor-key"},
    )
    assert payload["ok"] is True


def test_auth_requires_api_key() -> None:
    payload = list_entities(
        EntityListRequest(business_id=BUSINESS_ID),
        _authorized_dependencies(),
        headers={},
    )
    assert payload["error"]["code"] == "ACTOR_REQUIRED_MISSING"


def test_auth_rejects_other_business_before_saving() -> None:
    other_business = uuid.uuid5(uuid.NAMESPACE_URL, "entity-ids-http-other")
    payload = post_format_save(
        FormatSaveHttpRequest(business_id=other_business, entity_id=ENTITY_ID, values=_values()),
        _authorized_dependencies(),
        headers={"x-api-key": "editor-key"},
    )
    assert payload["error"]["code"] == "ACTOR_UNAUTHORIZED_BUSINESS"
    assert payload["error"]["details"]["actor_id"] == "editor"


def test_principal_rejects_bad_business_id() -> None:
    with pytest.raises(ValueError, match="allowed_business_ids"):
        AuthPrincipal(actor_id="editor", allowed_business_ids=("not-a-uuid",))
