"""
Entity IDs - Catalog Read Models
==================================
What the editor sees of an entity type: its identity, its stored
display format document and the trigger-maintained counter state.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class EntitySummary:
    entity_id: uuid.UUID
    schema_name: str
    type_name: str

    def __post_init__(self):
        if not isinstance(self.entity_id, uuid.UUID):
            raise ValueError("entity_id must be UUID.")
        if not self.schema_name or not isinstance(self.schema_name, str):
            raise ValueError("schema_name must be a non-empty string.")
        if not self.type_name or not isinstance(self.type_name, str):
            raise ValueError("type_name must be a non-empty string.")

    @property
    def label(self) -> str:
        return f"{self.schema_name}.{self.type_name}"

    def sort_key(self) -> tuple[str, str, str]:
        return (self.schema_name, self.type_name, str(self.entity_id))

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_id": str(self.entity_id),
            "schema_name": self.schema_name,
            "type_name": self.type_name,
            "label": self.label,
        }


@dataclass(frozen=True)
class EntityDetail:
    """
    One entity type as stored.

    `display_format` is the raw stored document (None before the type is
    first configured). `max_counter` maps "period|group" keys to the last
    issued counter; the issuance trigger owns it and this code only shows it.
    """
    entity_id: uuid.UUID
    schema_name: str
    type_name: str
    display_format: Optional[Mapping[str, Any]] = None
    max_counter: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.entity_id, uuid.UUID):
            raise ValueError("entity_id must be UUID.")
        if self.display_format is not None and not isinstance(self.display_format, Mapping):
            raise ValueError("display_format must be a mapping or None.")
        if not isinstance(self.max_counter, Mapping):
            raise ValueError("max_counter must be a mapping.")

    @property
    def summary(self) -> EntitySummary:
        return EntitySummary(
            entity_id=self.entity_id,
            schema_name=self.schema_name,
            type_name=self.type_name,
        )

    def max_counter_text(self) -> str:
        """Pretty-printed counter state, as shown read-only in the editor."""
        return json.dumps(dict(self.max_counter), indent=2, sort_keys=True, default=str)
