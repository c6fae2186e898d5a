"""
Entity IDs - Display Format Editor Service
============================================
Application service behind the display-ID configuration screen:
load an entity's format into editor values, validate edits, save them
and preview the result.

Doctrine:
- Business and entity ids are always explicit arguments.
- Validation issues come back as data (ValidationResult); only failures
  that end the operation raise.
- Persistence errors are surfaced as they are. No automatic retry; the
  user resubmits.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from entity_ids.catalog.models import EntityDetail, EntitySummary
from entity_ids.catalog.provider import EntityCatalogReader, EntityCatalogWriter
from entity_ids.display_format.errors import PersistenceError, PreviewError
from entity_ids.display_format.models import EntityDisplayFormat
from entity_ids.display_format.preview import (
    LookupResolver,
    TokenResolution,
    counter_state_key,
    preview,
    required_fields,
    resolve_tokens,
)
from entity_ids.display_format.serialization import (
    OWNED_KEYS,
    build_display_format,
    parse_display_format,
    serialize_display_format,
    to_form_values,
)
from entity_ids.display_format.validation import ValidationResult, validate_display_format

logger = logging.getLogger("entity_ids.catalog")


# ══════════════════════════════════════════════════════════════
# RESULTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EditorState:
    entity: EntitySummary
    display_format: EntityDisplayFormat
    form_values: dict[str, Any]
    grouping_tokens: tuple[str, ...]
    max_counter: Mapping[str, Any] = field(default_factory=dict)
    max_counter_text: str = "{}"


@dataclass(frozen=True)
class SaveOutcome:
    saved: bool
    validation: ValidationResult
    display_format: EntityDisplayFormat
    document: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class PreviewOutcome:
    validation: ValidationResult
    display_id: Optional[str] = None
    tokens: tuple[TokenResolution, ...] = ()
    required_fields: tuple[str, ...] = ()
    counter_key: Optional[str] = None
    counter_key_problems: tuple[str, ...] = ()


def grouping_tokens(fmt: EntityDisplayFormat) -> tuple[str, ...]:
    """Tokens the counter may be grouped by: the lookup tokens."""
    return tuple(t.token for t in fmt.lookup_tokens())


def _stored_extras(detail: EntityDetail) -> dict[str, Any]:
    return {
        k: v
        for k, v in (detail.display_format or {}).items()
        if k not in OWNED_KEYS
    }


# ══════════════════════════════════════════════════════════════
# SERVICE
# ══════════════════════════════════════════════════════════════

class DisplayFormatEditorService:
    def __init__(
        self,
        *,
        reader: EntityCatalogReader,
        writer: EntityCatalogWriter,
        lookup_resolver: Optional[LookupResolver] = None,
    ):
        self._reader = reader
        self._writer = writer
        self._lookup_resolver = lookup_resolver

    # ── reads ────────────────────────────────────────────────

    def list_entities(
        self,
        business_id: uuid.UUID,
        *,
        search: Optional[str] = None,
    ) -> tuple[EntitySummary, ...]:
        entities = self._reader.list_entities(business_id)
        needle = (search or "").strip().lower()
        if not needle:
            return entities
        return tuple(e for e in entities if needle in e.label.lower())

    def load_form(self, business_id: uuid.UUID, entity_id: uuid.UUID) -> EditorState:
        detail = self._reader.get_entity(business_id, entity_id)
        fmt = parse_display_format(detail.display_format)
        return EditorState(
            entity=detail.summary,
            display_format=fmt,
            form_values=to_form_values(fmt),
            grouping_tokens=grouping_tokens(fmt),
            max_counter=dict(detail.max_counter),
            max_counter_text=detail.max_counter_text(),
        )

    # ── validation ───────────────────────────────────────────

    def validate(self, values: Mapping[str, Any]) -> tuple[EntityDisplayFormat, ValidationResult]:
        fmt = build_display_format(values)
        return fmt, validate_display_format(fmt)

    # ── save ─────────────────────────────────────────────────

    def save(
        self,
        business_id: uuid.UUID,
        entity_id: uuid.UUID,
        values: Mapping[str, Any],
    ) -> SaveOutcome:
        """
        Validate editor values and replace the stored format.

        Keys of the stored document this editor does not own are kept.
        Returns saved=False with every issue when validation fails.
        Raises PersistenceError if the catalog rejects the write.
        """
        detail = self._reader.get_entity(business_id, entity_id)
        fmt = build_display_format(values, extras=_stored_extras(detail))
        result = validate_display_format(fmt)
        if not result.ok:
            logger.info(
                "Display format for %s rejected with %d issue(s).",
                detail.summary.label,
                len(result.errors),
            )
            return SaveOutcome(saved=False, validation=result, display_format=fmt)

        document = serialize_display_format(fmt)
        try:
            self._writer.save_format(business_id, entity_id, document)
        except PersistenceError:
            logger.exception("Saving display format for %s failed.", detail.summary.label)
            raise

        logger.info("Display format for %s saved: %s", detail.summary.label, fmt.format)
        return SaveOutcome(
            saved=True,
            validation=result,
            display_format=fmt,
            document=document,
        )

    # ── preview ──────────────────────────────────────────────

    def preview(
        self,
        values: Mapping[str, Any],
        sample_record: Mapping[str, Any],
        simulated_counter: int,
        *,
        sample_date: Optional[date] = None,
    ) -> PreviewOutcome:
        """
        Render a display ID from unsaved editor values.

        Invalid values are returned as issues without rendering. Raises
        PreviewError when the sample data cannot resolve a token.
        The counter slot is a display aid: when it cannot be named,
        counter_key is None and counter_key_problems says why.
        """
        fmt, result = self.validate(values)
        if not result.ok:
            return PreviewOutcome(validation=result)
        display_id = preview(
            fmt,
            sample_record,
            simulated_counter,
            lookup_resolver=self._lookup_resolver,
            sample_date=sample_date,
        )
        key, key_problems = self._counter_key(fmt, sample_record, sample_date)
        return PreviewOutcome(
            validation=result,
            display_id=display_id,
            tokens=resolve_tokens(
                fmt,
                sample_record,
                simulated_counter,
                lookup_resolver=self._lookup_resolver,
                sample_date=sample_date,
            ),
            required_fields=required_fields(fmt),
            counter_key=key,
            counter_key_problems=key_problems,
        )

    def _counter_key(
        self,
        fmt: EntityDisplayFormat,
        sample_record: Mapping[str, Any],
        sample_date: Optional[date],
    ) -> tuple[Optional[str], tuple[str, ...]]:
        try:
            key = counter_state_key(
                fmt,
                sample_record,
                lookup_resolver=self._lookup_resolver,
                sample_date=sample_date,
            )
        except PreviewError as exc:
            logger.debug("Counter slot not shown: %s", exc)
            return None, exc.problems
        return key, ()
