"""
Entity IDs HTTP API - Contracts
===============================
Framework-agnostic request/response DTOs for the display format endpoints.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


def _check_business_id(value) -> None:
    if not isinstance(value, uuid.UUID):
        raise ValueError("business_id must be UUID.")


@dataclass(frozen=True)
class EntityListRequest:
    business_id: uuid.UUID
    search: Optional[str] = None

    def __post_init__(self):
        _check_business_id(self.business_id)
        if self.search is not None and not isinstance(self.search, str):
            raise ValueError("search must be a string or None.")


@dataclass(frozen=True)
class EntityReadRequest:
    business_id: uuid.UUID
    entity_id: uuid.UUID

    def __post_init__(self):
        _check_business_id(self.business_id)
        if not isinstance(self.entity_id, uuid.UUID):
            raise ValueError("entity_id must be UUID.")


@dataclass(frozen=True)
class FormatValidateHttpRequest:
    business_id: uuid.UUID
    values: dict

    def __post_init__(self):
        _check_business_id(self.business_id)
        if not isinstance(self.values, dict):
            raise ValueError("values must be dict.")


@dataclass(frozen=True)
class FormatSaveHttpRequest:
    business_id: uuid.UUID
    entity_id: uuid.UUID
    values: dict

    def __post_init__(self):
        _check_business_id(self.business_id)
        if not isinstance(self.entity_id, uuid.UUID):
            raise ValueError("entity_id must be UUID.")
        if not isinstance(self.values, dict):
            raise ValueError("values must be dict.")


@dataclass(frozen=True)
class FormatPreviewHttpRequest:
    business_id: uuid.UUID
    values: dict
    sample_record: dict = field(default_factory=dict)
    simulated_counter: int = 1
    sample_date: Optional[date] = None

    def __post_init__(self):
        _check_business_id(self.business_id)
        if not isinstance(self.values, dict):
            raise ValueError("values must be dict.")
        if not isinstance(self.sample_record, dict):
            raise ValueError("sample_record must be dict.")
        if (
            isinstance(self.simulated_counter, bool)
            or not isinstance(self.simulated_counter, int)
            or self.simulated_counter < 1
        ):
            raise ValueError("simulated_counter must be int >= 1.")
        if self.sample_date is not None and not isinstance(self.sample_date, date):
            raise ValueError("sample_date must be date or None.")


@dataclass(frozen=True)
class HttpApiErrorBody:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class HttpApiResponse:
    ok: bool
    data: Any = None
    error: Optional[HttpApiErrorBody] = None
    meta: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            payload = {"ok": True, "data": self.data}
            if self.meta is not None:
                payload["meta"] = dict(self.meta)
            return payload
        if self.error is None:
            raise ValueError("error must be set when ok is False.")
        return {"ok": False, "error": self.error.to_dict()}
